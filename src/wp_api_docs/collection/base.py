"""Data models for request collections.

The route builders produce these records; the Postman serializer and the
OpenAPI converter consume them. A collection is a tree of folders whose
leaves are operations (one HTTP request template each).
"""

import json
import re
from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator

BASE_URL_TOKEN = "{{baseUrl}}"
COLLECTION_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"

SUPPORTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
BODY_METHODS = ("POST", "PUT", "PATCH")
MUTATING_METHODS = ("POST", "PUT", "PATCH", "DELETE")

_PLACEHOLDER_RE = re.compile(r"^(\{\{[^{}]+\}\}|:\w+)$")


class KeyValue(BaseModel):
    key: str
    value: str = ""
    enabled: bool = True
    description: str = ""


class QueryParam(KeyValue):
    """A single query-string parameter."""


class Header(KeyValue):
    """A single request header."""


class FormPart(BaseModel):
    """One multipart form field: a text value or a file reference."""

    key: str
    kind: Literal["text", "file"] = "text"
    value: str = ""  # text value, or file src when kind == "file"
    required: bool = False
    description: str = ""


class JsonBody(BaseModel):
    """Raw JSON request body."""

    mode: Literal["json"] = "json"
    fields: dict[str, Any] = {}
    template: str | None = None  # literal body text; rendered from fields when None

    def render(self) -> str:
        if self.template is not None:
            return self.template
        return json.dumps(self.fields, indent=4, ensure_ascii=False)


class MultipartBody(BaseModel):
    """multipart/form-data request body. Keys may repeat for multi-valued fields."""

    mode: Literal["multipart"] = "multipart"
    parts: list[FormPart] = []


RequestBody = Annotated[Union[JsonBody, MultipartBody], Field(discriminator="mode")]


class UrlTemplate(BaseModel):
    """Request URL split into host, path segments and query parameters."""

    raw: str
    path: list[str]
    query: list[QueryParam] = []
    host: list[str] = [BASE_URL_TOKEN]

    @classmethod
    def build(cls, path: str | list[str], query: list[QueryParam] | None = None) -> "UrlTemplate":
        """Build a URL whose raw form is derived from the segments and enabled query params."""
        if isinstance(path, str):
            segments = [s for s in path.split("/") if s]
        else:
            segments = [s for s in path if s]
        params = list(query or [])

        raw = f"{BASE_URL_TOKEN}/" + "/".join(segments)
        enabled = [q for q in params if q.enabled]
        if enabled:
            raw += "?" + "&".join(f"{q.key}={q.value}" for q in enabled)
        return cls(raw=raw, path=segments, query=params)

    @property
    def path_string(self) -> str:
        return "/" + "/".join(self.path)

    def path_variables(self) -> list[str]:
        """Names of `:name` style segments (registered routes)."""
        return [s[1:] for s in self.path if s.startswith(":")]


class Operation(BaseModel):
    """One HTTP request template."""

    kind: Literal["operation"] = "operation"
    name: str
    method: str
    url: UrlTemplate
    headers: list[Header] = []
    body: RequestBody | None = None
    description: str = ""

    @field_validator("method")
    @classmethod
    def _upper_method(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def _check_invariants(self) -> "Operation":
        if self.method == "GET" and self.body is not None:
            raise ValueError(f"GET operation '{self.name}' cannot carry a body")
        keys = [q.key for q in self.url.query]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Duplicate query parameter in operation '{self.name}'")
        return self

    @property
    def path(self) -> str:
        return self.url.path_string


class Folder(BaseModel):
    """Named, ordered group of folders and operations."""

    kind: Literal["folder"] = "folder"
    name: str
    items: list["Node"] = []
    auth: dict[str, Any] | None = None

    def operations(self) -> Iterator[Operation]:
        """Yield every operation below this folder, depth first, in display order."""
        for item in self.items:
            if isinstance(item, Folder):
                yield from item.operations()
            else:
                yield item

    def folder(self, name: str) -> "Folder | None":
        for item in self.items:
            if isinstance(item, Folder) and item.name == name:
                return item
        return None


Node = Annotated[Union[Folder, Operation], Field(discriminator="kind")]

Folder.model_rebuild()


class Variable(BaseModel):
    key: str
    value: str = ""


class CollectionInfo(BaseModel):
    name: str
    schema_id: str = COLLECTION_SCHEMA


class Collection(BaseModel):
    """Root document: metadata, the folder tree and the variable dictionary."""

    info: CollectionInfo
    root: Folder
    variables: list[Variable] = []

    @field_validator("variables")
    @classmethod
    def _unique_keys(cls, v: list[Variable]) -> list[Variable]:
        keys = [var.key for var in v]
        if len(keys) != len(set(keys)):
            raise ValueError("Collection variable keys must be unique")
        return v

    def variable_map(self) -> dict[str, str]:
        return {v.key: v.value for v in self.variables}

    def operations(self) -> Iterator[Operation]:
        return self.root.operations()


def is_placeholder(segment: str) -> bool:
    """True for `{{token}}` and `:token` path segments."""
    return bool(_PLACEHOLDER_RE.match(segment))


def path_key(path: str | list[str]) -> str:
    """Normalize a path for cross-source comparison: placeholder segments become `*`."""
    segments = path.split("/") if isinstance(path, str) else path
    return "/" + "/".join("*" if is_placeholder(s) else s for s in segments if s)
