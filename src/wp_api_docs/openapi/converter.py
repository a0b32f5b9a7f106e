"""Collection to OpenAPI 3.0 converter.

Walks the folder tree depth first and flattens it into a path/method map.
Operations landing on the same path and method are merged, so the output
holds exactly one operation per pair.
"""

import copy
import json
import logging
import re
from typing import Any, Callable

from wp_api_docs.collection import descriptions
from wp_api_docs.collection.base import BODY_METHODS, MUTATING_METHODS, SUPPORTED_METHODS, Collection, Folder, JsonBody, MultipartBody, Operation
from wp_api_docs.collection.routes import ECOMMERCE_NAMESPACE, SPECIFIC_PAGES_FOLDER
from wp_api_docs.config import DEFAULT_BASE_URL
from wp_api_docs.openapi import schemas
from wp_api_docs.openapi.describe import MIN_DESCRIPTION_LENGTH, describe_operation, is_good_description, list_or_slug_description

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.3"

API_DESCRIPTION = (
    "OpenAPI 3.0 specification for the WordPress REST API. Covers wp/v2 endpoints "
    "(posts, pages, terms, users, etc.) and custom namespaces. Authentication: "
    "Cookie/Nonce for same-origin, Application Passwords for external apps."
)

PARAM_ORDER = {"path": 0, "query": 1, "header": 2}

_TAG_RE = re.compile(r"/wp-json/([^/]+)/v\d+/([^/]+)")
_SLUG_RE = re.compile(r"[^a-zA-Z0-9]+")

DocumentTransform = Callable[[dict], dict]


def to_camel_case_param(name: str) -> str:
    """`PostID` -> `postId`; `form-slug` -> `formSlug`."""
    if name.endswith("ID"):
        return name[:-2].lower() + "Id"
    words = [w for w in re.split(r"[._\- ]+", name) if w]
    joined = "".join(w[:1].upper() + w[1:] for w in words)
    return joined[:1].lower() + joined[1:]


def _path_parameter(segment: str) -> tuple[str, str, dict[str, Any]] | None:
    """(name, description, schema) for a placeholder segment, None for literals."""
    if segment.startswith("{{") and segment.endswith("}}"):
        token = segment[2:-2]
        if token.endswith("ID"):
            return (
                to_camel_case_param(token),
                f"ID of the {token[:-2]}",
                {"type": "integer", "format": "int64"},
            )
        return to_camel_case_param(token), "URL-friendly slug or identifier", {"type": "string"}
    if segment.startswith(":") and len(segment) > 1:
        name = segment[1:]
        if name == "id" or name.endswith("_id"):
            return name, f"ID of the {name}", {"type": "integer", "format": "int64"}
        return name, f"The {name} route argument", {"type": "string"}
    return None


def sort_parameters(params: list[dict]) -> list[dict]:
    return sorted(params, key=lambda p: PARAM_ORDER.get(p.get("in", "query"), 1))


def _unique_parameters(params: list[dict]) -> list[dict]:
    """First occurrence wins per (name, location)."""
    seen: dict[tuple[str, str], dict] = {}
    for p in params:
        seen.setdefault((p["name"], p.get("in", "")), p)
    return list(seen.values())


def infer_property_schema(value: Any) -> dict[str, Any]:
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, int):
        return {"type": "integer"}
    if isinstance(value, float):
        return {"type": "number"}
    if isinstance(value, list):
        return {"type": "array", "items": {"type": "string"}}
    if isinstance(value, dict):
        return {"type": "object"}
    return {"type": "string"}


class OpenApiConverter:
    """Converts one collection into an OpenAPI document.

    Operation IDs come from a counter owned by the converter and reset on
    every `convert` call, so converting the same collection twice gives
    identical output.
    """

    def __init__(self, base_url: str | None = None, transform: DocumentTransform | None = None, api_version: str = "1.0.0"):
        self.base_url = base_url or DEFAULT_BASE_URL
        self.transform = transform
        self.api_version = api_version
        self._paths: dict[str, dict[str, Any]] = {}
        self._counter = 0

    def convert(self, collection: Collection) -> dict[str, Any]:
        self._paths = {}
        self._counter = 0

        base_url = (collection.variable_map().get("baseUrl") or self.base_url).rstrip("/")
        self._process(collection.root.items)

        doc: dict[str, Any] = {
            "openapi": OPENAPI_VERSION,
            "info": {
                "title": collection.info.name or "WordPress REST API",
                "description": API_DESCRIPTION,
                "version": self.api_version,
            },
            "externalDocs": {
                "description": "WordPress REST API Handbook",
                "url": schemas.HANDBOOK_URL,
            },
            "servers": [{"url": base_url, "description": "WordPress site URL"}],
            "paths": self._paths,
            "components": {
                "schemas": copy.deepcopy(schemas.SCHEMAS),
                "responses": copy.deepcopy(schemas.RESPONSES),
                "securitySchemes": schemas.security_schemes(self._has_ecommerce(collection)),
            },
        }
        logger.info("Converted %d paths from collection %r", len(self._paths), collection.info.name)

        if self.transform is not None:
            doc = self.transform(doc)
        return doc

    @staticmethod
    def _has_ecommerce(collection: Collection) -> bool:
        prefix = ["wp-json", *ECOMMERCE_NAMESPACE.split("/")]
        return any(op.url.path[: len(prefix)] == prefix for op in collection.operations())

    def _process(self, items: list[Folder | Operation]) -> None:
        for item in items:
            if isinstance(item, Folder):
                # lookups by slug that the entity folders already cover
                if item.name == SPECIFIC_PAGES_FOLDER:
                    continue
                self._process(item.items)
            else:
                self._convert_operation(item)

    def _convert_operation(self, op: Operation) -> None:
        method = op.method
        if method not in SUPPORTED_METHODS:
            logger.debug("Skipping %r: unsupported method %s", op.name, method)
            return

        path = self.build_path(op.url.path)
        if path is None:
            logger.debug("Skipping %r: URL has no path segments", op.name)
            return

        parameters = self._parameters(op)
        source = op.description.strip()
        if is_good_description(source, op.name):
            description = source
        else:
            description = describe_operation(path, method, parameters)

        operation: dict[str, Any] = {"summary": op.name}
        if len(description) >= MIN_DESCRIPTION_LENGTH:
            operation["description"] = description
        if parameters:
            operation["parameters"] = parameters

        if method in BODY_METHODS:
            request_body = self._request_body(op)
            if request_body is not None:
                operation["requestBody"] = request_body

        operation["responses"] = schemas.default_responses(method)
        if method == "GET" and "{" not in path and not path.endswith("/settings"):
            operation["responses"]["200"]["headers"] = copy.deepcopy(schemas.PAGINATION_HEADERS)

        if method in MUTATING_METHODS:
            operation["security"] = copy.deepcopy(schemas.MUTATING_SECURITY)

        tags = self.extract_tags(path)
        if tags:
            operation["tags"] = tags

        methods = self._paths.setdefault(path, {})
        key = method.lower()
        if key in methods:
            methods[key] = self._merge(methods[key], operation, path, method)
        else:
            # numbered only when emitted
            methods[key] = {"operationId": self._operation_id(op.name), **operation}

    @staticmethod
    def build_path(segments: list[str]) -> str | None:
        """`wp-json/wp/v2/posts/{{PostID}}` -> `/wp-json/wp/v2/posts/{postId}`; None when empty."""
        converted = []
        for segment in segments:
            param = _path_parameter(segment)
            converted.append("{%s}" % param[0] if param else segment)
        path = "/" + "/".join(s for s in converted if s)
        return path if path != "/" else None

    def _parameters(self, op: Operation) -> list[dict]:
        params: list[dict] = []

        for segment in op.url.path:
            param = _path_parameter(segment)
            if param is None:
                continue
            name, description, schema = param
            params.append({
                "name": name,
                "in": "path",
                "required": True,
                "description": description,
                "schema": schema,
            })

        for q in descriptions.enrich_query_params([q.model_copy() for q in op.url.query]):
            entry: dict[str, Any] = {
                "name": q.key,
                "in": "query",
                "required": False,
                "schema": schemas.param_schema(q.key, q.value),
            }
            if q.description:
                entry["description"] = q.description
            params.append(entry)

        # disabled headers are placeholders; auth is declared through security
        for h in descriptions.enrich_headers([h.model_copy() for h in op.headers]):
            if not h.enabled or h.key.lower() == "content-type":
                continue
            entry = {
                "name": h.key,
                "in": "header",
                "required": False,
                "schema": {"type": "string", "default": h.value},
            }
            if h.description:
                entry["description"] = h.description
            params.append(entry)

        return sort_parameters(_unique_parameters(params))

    def _request_body(self, op: Operation) -> dict[str, Any] | None:
        body = op.body
        if isinstance(body, JsonBody):
            if body.template is None:
                decoded: Any = body.fields
            else:
                try:
                    decoded = json.loads(body.template)
                except json.JSONDecodeError:
                    logger.debug("Body of %r is not JSON; leaving it out", op.name)
                    return None
            if not isinstance(decoded, dict):
                return None

            properties = {}
            for key, value in decoded.items():
                prop = infer_property_schema(value)
                desc = descriptions.get_request_body(key)
                if desc:
                    prop["description"] = desc
                properties[key] = prop
            return {
                "required": True,
                "content": {
                    "application/json": {
                        "schema": {"type": "object", "properties": properties},
                        "example": decoded,
                    }
                },
            }

        if isinstance(body, MultipartBody) and body.parts:
            properties = {}
            required: list[str] = []
            for part in body.parts:
                is_file = part.kind == "file"
                prop = {
                    "type": "string",
                    "description": part.description or ("File upload" if is_file else "Form field value"),
                }
                if is_file:
                    prop["format"] = "binary"
                properties.setdefault(part.key, prop)
                if part.required and part.key not in required:
                    required.append(part.key)

            schema: dict[str, Any] = {"type": "object", "properties": properties}
            if required:
                schema["required"] = required
            return {
                "required": bool(required),
                "content": {"multipart/form-data": {"schema": schema}},
            }
        return None

    def _operation_id(self, name: str) -> str:
        self._counter += 1
        safe = _SLUG_RE.sub("_", name).strip("_") or "operation"
        return f"{safe.lower()}_{self._counter}"

    @staticmethod
    def extract_tags(path: str) -> list[str]:
        """`/wp-json/wp/v2/posts` -> `["wp - posts"]`."""
        m = _TAG_RE.search(path)
        if m:
            return [f"{m.group(1)} - {m.group(2)}"]
        return []

    @staticmethod
    def _merge(existing: dict, incoming: dict, path: str, method: str) -> dict:
        """Union the parameters of two operations on one path and method; the first one wins otherwise."""
        params = _unique_parameters(existing.get("parameters", []) + incoming.get("parameters", []))
        if params:
            existing["parameters"] = sort_parameters(params)
        if method == "GET" and "{" not in path:
            existing["description"] = list_or_slug_description(path)
        return existing
