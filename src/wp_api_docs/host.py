"""Interface to the host CMS and a file-backed implementation of it.

The generator never talks to the CMS directly. Everything it needs
(content listings, plugin detection, the REST route registry) goes
through a `Host`. `SiteSnapshot` implements it from a YAML or JSON
description of a site, which is what the CLI uses.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

import yaml
from pydantic import BaseModel, ValidationError, model_validator

from wp_api_docs.config import DEFAULT_BASE_URL
from wp_api_docs.errors import CollaboratorUnavailable

BUILTIN_TYPES = ("page", "post", "attachment")


class Capability(str, Enum):
    """Optional host features that change the generated routes."""

    SEO_METADATA = "seo-metadata"
    CUSTOM_FIELDS = "custom-fields"
    FORMS_HANDLER = "forms-handler"
    ECOMMERCE = "ecommerce"


class ContentType(BaseModel):
    """A public content type registered on the host."""

    name: str
    rest_base: str = ""
    label: str = ""  # plural display label
    singular_label: str = ""
    public: bool = True

    @model_validator(mode="after")
    def _fill_labels(self) -> "ContentType":
        fallback = self.name[:1].upper() + self.name[1:]
        self.rest_base = self.rest_base or self.name
        self.label = self.label or fallback
        self.singular_label = self.singular_label or fallback
        return self


class ContentItem(BaseModel):
    """A page, post, term or custom item as listed by the content store."""

    id: int
    slug: str
    title: str = ""
    status: str = "publish"
    meta: dict[str, Any] = {}


class OptionGroup(BaseModel):
    slug: str
    title: str = ""


class Host(Protocol):
    def site_name(self) -> str: ...

    def resolve_base_url(self) -> str: ...

    def get_default_locale(self) -> str: ...

    def is_capability_active(self, capability: Capability) -> bool: ...

    def list_content_types(self) -> Sequence[ContentType]: ...

    def list_content_items(self, content_type: str, filters: Mapping[str, Any] | None = None) -> Sequence[ContentItem]: ...

    def get_option_groups(self) -> Sequence[OptionGroup]: ...

    def get_registered_routes(self) -> Mapping[str, Any]: ...


class SiteSnapshot(BaseModel):
    """Host implementation backed by static site data."""

    name: str = "WordPress REST API"
    base_url: str = DEFAULT_BASE_URL
    locale: str = "en_US"
    capabilities: list[str] = []
    content_types: list[ContentType] = []
    content: dict[str, list[ContentItem]] = {}  # content type or taxonomy -> items
    option_groups: list[OptionGroup] = []
    routes: dict[str, Any] = {}  # route pattern -> endpoint definitions

    def site_name(self) -> str:
        return self.name

    def resolve_base_url(self) -> str:
        return self.base_url

    def get_default_locale(self) -> str:
        return self.locale

    def is_capability_active(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def list_content_types(self) -> list[ContentType]:
        return [t for t in self.content_types if t.public]

    def list_content_items(self, content_type: str, filters: Mapping[str, Any] | None = None) -> list[ContentItem]:
        filters = filters or {}
        items = self.content.get(content_type, [])
        if "slug" in filters:
            items = [i for i in items if i.slug == filters["slug"]]
        if "status" in filters:
            items = [i for i in items if i.status == filters["status"]]
        return sorted(items, key=lambda i: i.title.lower())

    def get_option_groups(self) -> list[OptionGroup]:
        return list(self.option_groups)

    def get_registered_routes(self) -> dict[str, Any]:
        return self.routes


def load_snapshot(file_path: Path) -> SiteSnapshot:
    """Load a site snapshot from a YAML or JSON file."""
    try:
        data = yaml.safe_load(Path(file_path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise CollaboratorUnavailable(f"Cannot read site snapshot {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise CollaboratorUnavailable(f"Site snapshot {file_path} must be a mapping")
    try:
        return SiteSnapshot(**data)
    except ValidationError as e:
        raise CollaboratorUnavailable(f"Malformed site snapshot {file_path}: {e}") from e
