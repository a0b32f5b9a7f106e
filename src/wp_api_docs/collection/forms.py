"""Sample submission bodies for forms-handler forms.

A form stores its fields as a JSON list of
`{name, type, multiple?, options?, min?, max?, step?, required?}` objects.
Each field gets one representative value; forms with a file field are
submitted as multipart, everything else as a JSON object.
"""

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from wp_api_docs.collection.base import FormPart, JsonBody, MultipartBody

logger = logging.getLogger(__name__)

DEFAULT_NUMBER = 42.0
SAMPLE_FILE = "sample.pdf"
FALLBACK_OPTION = "option"

TEXT_SAMPLES = {
    "text": "Sample Text",
    "email": "test@example.com",
    "password": "P@ssw0rd123",
    "tel": "+1234567890",
    "url": "https://example.com",
    "textarea": "Sample message text.",
    "checkbox": "1",
}

DATE_FORMATS = {
    "date": "%Y-%m-%d",
    "time": "%H:%M",
    "datetime": "%Y-%m-%dT%H:%M",
    "datetime-local": "%Y-%m-%dT%H:%M",
}


class FormField(BaseModel):
    """One declared form field."""

    name: str
    type: str = "text"
    multiple: bool = False
    required: bool = False
    options: list[Any] = []
    min: float | None = None
    max: float | None = None
    step: float | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> Any:
        return str(v) if v is not None else v

    @field_validator("type", mode="before")
    @classmethod
    def _type_or_text(cls, v: Any) -> str:
        return "text" if v is None or v == "" else str(v)

    @field_validator("multiple", "required", mode="before")
    @classmethod
    def _truthy(cls, v: Any) -> bool:
        return bool(v) and v not in ("0", "false")

    @field_validator("options", mode="before")
    @classmethod
    def _list_or_empty(cls, v: Any) -> list:
        return v if isinstance(v, list) else []

    @field_validator("min", "max", "step", mode="before")
    @classmethod
    def _number_or_none(cls, v: Any) -> float | None:
        if isinstance(v, bool):
            return None
        try:
            number = float(v)
        except (TypeError, ValueError, OverflowError):
            return None
        # nan and inf are not numeric bounds
        return number if math.isfinite(number) else None


def parse_fields(config: Any) -> list[FormField]:
    """Decode a form's field configuration (JSON text or an already decoded list)."""
    if isinstance(config, str):
        try:
            config = json.loads(config)
        except json.JSONDecodeError:
            logger.warning("Ignoring form field config that is not valid JSON")
            return []
    if not isinstance(config, list):
        return []

    fields = []
    for raw in config:
        if not isinstance(raw, dict) or not raw.get("name"):
            continue
        try:
            fields.append(FormField(**raw))
        except ValidationError as e:
            logger.warning("Skipping form field %r: %s", raw.get("name"), e)
    return fields


def option_values(options: list[Any]) -> list[str]:
    """Option values, taking `value`, then `label`, then the raw option."""
    values = []
    for option in options:
        if isinstance(option, dict):
            if option.get("value") is not None:
                values.append(str(option["value"]))
            elif option.get("label") is not None:
                values.append(str(option["label"]))
        else:
            values.append(str(option))
    return values


def sample_number(field: FormField) -> int | float:
    """min (else max, else a default) floored to a multiple of step.

    An integral step yields an int. The result may fall below min when min
    is not itself a multiple of step; min > max is not reconciled.
    """
    step = field.step if field.step is not None else 1.0
    value = DEFAULT_NUMBER
    if field.min is not None:
        value = field.min
    elif field.max is not None:
        value = field.max

    if step > 0 and math.isfinite(value / step):
        value = math.floor(value / step) * step
    return int(value) if float(step).is_integer() else float(value)


def sample_value(field: FormField, now: datetime | None = None) -> Any:
    """One representative value for a form field."""
    field_type = field.type

    if field_type in TEXT_SAMPLES:
        return TEXT_SAMPLES[field_type]
    if field_type == "number":
        return sample_number(field)
    if field_type in DATE_FORMATS:
        now = now or datetime.now(timezone.utc)
        return now.strftime(DATE_FORMATS[field_type])
    if field_type == "radio":
        values = option_values(field.options)
        return values[0] if values else FALLBACK_OPTION
    if field_type == "select":
        values = option_values(field.options)
        if field.multiple:
            return values[: max(1, min(2, len(values)))]
        return values[0] if values else FALLBACK_OPTION
    if field_type == "file":
        return [SAMPLE_FILE] if field.multiple else SAMPLE_FILE
    return "Sample text"


def has_file_field(fields: list[FormField]) -> bool:
    return any(f.type == "file" for f in fields)


def build_submit_body(fields: list[FormField], now: datetime | None = None) -> JsonBody | MultipartBody:
    """Request body for a form submission."""
    if not has_file_field(fields):
        return JsonBody(fields={f.name: sample_value(f, now) for f in fields})

    parts: list[FormPart] = []
    for field in fields:
        value = sample_value(field, now)
        kind = "file" if field.type == "file" else "text"
        if isinstance(value, list):
            key = f"{field.name}[]" if field.multiple else field.name
            for v in value:
                parts.append(FormPart(key=key, kind=kind, value=str(v), required=field.required))
        else:
            parts.append(FormPart(key=field.name, kind=kind, value=str(value), required=field.required))
    return MultipartBody(parts=parts)
