"""Postman Collection v2.1 serializer and parser.

`dump_collection` turns the collection model into Postman JSON;
`parse_collection` reads a Postman export back so an existing file can be
converted to OpenAPI.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from wp_api_docs.collection.base import (
    COLLECTION_SCHEMA,
    Collection,
    CollectionInfo,
    Folder,
    FormPart,
    Header,
    JsonBody,
    MultipartBody,
    Operation,
    QueryParam,
    UrlTemplate,
    Variable,
)
from wp_api_docs.errors import CollaboratorUnavailable

logger = logging.getLogger(__name__)


def dump_collection(collection: Collection) -> dict[str, Any]:
    """Postman v2.1 document for a collection."""
    data: dict[str, Any] = {
        "info": {
            "name": collection.info.name,
            "schema": collection.info.schema_id,
        },
        "item": [_dump_node(node) for node in collection.root.items],
        "variable": [{"key": v.key, "value": v.value} for v in collection.variables],
    }
    if collection.root.auth:
        data["auth"] = collection.root.auth
    return data


def _dump_node(node: Folder | Operation) -> dict[str, Any]:
    if isinstance(node, Folder):
        folder: dict[str, Any] = {"name": node.name, "item": [_dump_node(n) for n in node.items]}
        if node.auth:
            folder["auth"] = node.auth
        return folder
    return {"name": node.name, "request": _dump_request(node)}


def _dump_key_value(kv: QueryParam | Header) -> dict[str, Any]:
    item: dict[str, Any] = {"key": kv.key, "value": kv.value}
    if not kv.enabled:
        item["disabled"] = True
    if kv.description:
        item["description"] = kv.description
    return item


def _dump_request(op: Operation) -> dict[str, Any]:
    url: dict[str, Any] = {
        "raw": op.url.raw,
        "host": op.url.host,
        "path": op.url.path,
    }
    if op.url.query:
        url["query"] = [_dump_key_value(q) for q in op.url.query]
    path_variables = op.url.path_variables()
    if path_variables:
        url["variable"] = [{"key": name, "value": ""} for name in path_variables]

    request: dict[str, Any] = {
        "method": op.method,
        "header": [_dump_key_value(h) for h in op.headers],
        "url": url,
    }
    if isinstance(op.body, JsonBody):
        request["body"] = {
            "mode": "raw",
            "raw": op.body.render(),
            "options": {"raw": {"language": "json"}},
        }
    elif isinstance(op.body, MultipartBody):
        request["body"] = {"mode": "formdata", "formdata": [_dump_part(p) for p in op.body.parts]}
    if op.description:
        request["description"] = op.description
    return request


def _dump_part(part: FormPart) -> dict[str, Any]:
    item: dict[str, Any] = {"key": part.key, "type": part.kind}
    if part.kind == "file":
        item["src"] = part.value
    else:
        item["value"] = part.value
    if part.required:
        item["required"] = True
    if part.description:
        item["description"] = part.description
    return item


def load_collection(file_path: Path) -> Collection:
    """Parse a Postman Collection v2.1 file."""
    try:
        data = json.loads(Path(file_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CollaboratorUnavailable(f"Cannot read collection {file_path}: {e}") from e
    return parse_collection(data)


def parse_collection(data: Any) -> Collection:
    """Build the collection model from a decoded Postman document."""
    if not isinstance(data, dict):
        raise CollaboratorUnavailable("Collection document must be a JSON object")

    info = data.get("info") or {}
    name = info.get("name") or "Collection"
    try:
        return Collection(
            info=CollectionInfo(name=name, schema_id=info.get("schema") or COLLECTION_SCHEMA),
            root=Folder(name=name, items=_parse_items(data.get("item", [])), auth=data.get("auth")),
            variables=[
                Variable(key=v["key"], value=str(v.get("value", "")))
                for v in data.get("variable", [])
                if isinstance(v, dict) and "key" in v
            ],
        )
    except (ValidationError, TypeError, AttributeError) as e:
        raise CollaboratorUnavailable(f"Malformed collection: {e}") from e


def _parse_items(items: list[dict]) -> list[Folder | Operation]:
    """Recursively parse items (supports folders)."""
    nodes: list[Folder | Operation] = []
    for item in items:
        if "item" in item:
            nodes.append(Folder(name=item.get("name", ""), items=_parse_items(item["item"]), auth=item.get("auth")))
        elif "request" in item:
            try:
                nodes.append(_parse_request(item))
            except ValidationError as e:
                logger.warning("Skipping request %r: %s", item.get("name"), e.errors()[0]["msg"])
    return nodes


def _parse_request(item: dict) -> Operation:
    req = item["request"]
    if isinstance(req, str):
        req = {"url": req}
    method = str(req.get("method", "GET")).upper()

    body = _parse_body(req.get("body"))
    if method == "GET" and body is not None:
        logger.debug("Dropping body of GET request %r", item.get("name"))
        body = None

    description = req.get("description", "")
    if isinstance(description, dict):
        description = description.get("content", "")

    return Operation(
        name=item.get("name", ""),
        method=method,
        url=_parse_url(req.get("url", {})),
        headers=[Header(**kv) for kv in _parse_key_values(req.get("header", []))],
        body=body,
        description=description or "",
    )


def _parse_url(url: Any) -> UrlTemplate:
    # a bare string URL carries no path segments
    if isinstance(url, str):
        return UrlTemplate(raw=url, path=[])
    path = url.get("path", [])
    if isinstance(path, str):
        path = [s for s in path.split("/") if s]
    return UrlTemplate(
        raw=url.get("raw", ""),
        path=[str(s) for s in path],
        query=[QueryParam(**kv) for kv in _parse_key_values(url.get("query", []))],
        host=url.get("host") or ["{{baseUrl}}"],
    )


def _parse_key_values(entries: list[dict]) -> list[dict[str, Any]]:
    parsed = []
    for e in entries:
        if not e.get("key"):
            continue
        description = e.get("description", "")
        if isinstance(description, dict):
            description = description.get("content", "")
        parsed.append({
            "key": e["key"],
            "value": "" if e.get("value") is None else str(e["value"]),
            "enabled": not e.get("disabled", False),
            "description": description or "",
        })
    return parsed


def _parse_body(body: dict | None) -> JsonBody | MultipartBody | None:
    if not body:
        return None
    mode = body.get("mode")
    if mode == "raw":
        raw = body.get("raw") or ""
        if not raw:
            return None
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            decoded = None
        return JsonBody(fields=decoded if isinstance(decoded, dict) else {}, template=raw)
    if mode == "formdata":
        parts = []
        for fd in body.get("formdata", []):
            if not fd.get("key"):
                continue
            kind = "file" if fd.get("type") == "file" else "text"
            value = fd.get("src") if kind == "file" else fd.get("value")
            parts.append(FormPart(
                key=fd["key"],
                kind=kind,
                value="" if value is None else str(value),
                required=bool(fd.get("required")),
                description=fd.get("description", ""),
            ))
        return MultipartBody(parts=parts)
    return None
