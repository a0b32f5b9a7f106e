"""Structural checks for generated documents."""

import re
from collections import Counter
from typing import Any

from wp_api_docs.collection.base import BASE_URL_TOKEN, Collection

_TEMPLATE_PARAM_RE = re.compile(r"\{([^{}]+)\}")
_VARIABLE_RE = re.compile(r"^\{\{([^{}]+)\}\}$")


def validate_openapi(doc: dict[str, Any]) -> dict[str, str]:
    """Check an OpenAPI document for identifier and parameter consistency.

    Returns dict of {location: error_message}; empty when the document is sound.
    """
    errors = {}
    operation_ids: Counter[str] = Counter()

    for path, methods in doc.get("paths", {}).items():
        template_params = set(_TEMPLATE_PARAM_RE.findall(path))
        for method, operation in methods.items():
            location = f"{method.upper()} {path}"
            operation_ids[operation.get("operationId", "")] += 1

            params = operation.get("parameters", [])
            keys = Counter((p.get("name"), p.get("in")) for p in params)
            duplicated = sorted(f"{name} ({where})" for (name, where), n in keys.items() if n > 1)
            if duplicated:
                errors[location] = f"Duplicate parameters: {', '.join(duplicated)}"
                continue

            declared = {p.get("name"): p for p in params if p.get("in") == "path"}
            missing = sorted(template_params - set(declared))
            if missing:
                errors[location] = f"Undeclared path parameters: {', '.join(missing)}"
                continue
            extra = sorted(set(declared) - template_params)
            if extra:
                errors[location] = f"Path parameters not in path: {', '.join(extra)}"
                continue
            optional = sorted(name for name, p in declared.items() if p.get("required") is not True)
            if optional:
                errors[location] = f"Path parameters must be required: {', '.join(optional)}"

    for operation_id, n in operation_ids.items():
        if n > 1:
            errors[f"operationId {operation_id}"] = f"Used by {n} operations"
    return errors


def validate_collection(collection: Collection) -> dict[str, str]:
    """Check that every raw URL matches its path segments and that placeholders are defined.

    Returns dict of {operation_name: error_message}.
    """
    errors = {}
    variables = set(collection.variable_map())

    for op in collection.operations():
        raw_path = op.url.raw.split("?", 1)[0]
        expected = f"{BASE_URL_TOKEN}/" + "/".join(op.url.path)
        if raw_path != expected:
            errors[op.name] = f"Raw URL {raw_path!r} does not match path segments {expected!r}"
            continue

        undefined = []
        for segment in op.url.path:
            m = _VARIABLE_RE.match(segment)
            if m and m.group(1) not in variables:
                undefined.append(m.group(1))
        if undefined:
            errors[op.name] = f"Undefined variables: {', '.join(undefined)}"
    return errors
