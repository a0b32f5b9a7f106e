"""Serialize generated documents."""

import json
from typing import Any

import yaml

from wp_api_docs.errors import EncodingFailure


class _NoAliasDumper(yaml.SafeDumper):
    """Writes repeated sub-documents in full instead of as &id anchors."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def dump_json(data: Any, indent: int = 4) -> str:
    """Pretty-printed JSON, non-ASCII kept as-is."""
    try:
        return json.dumps(data, indent=indent, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise EncodingFailure(f"Cannot encode document as JSON: {e}") from e


def dump_yaml(data: Any) -> str:
    try:
        return yaml.dump(data, Dumper=_NoAliasDumper, sort_keys=False, allow_unicode=True)
    except yaml.YAMLError as e:
        raise EncodingFailure(f"Cannot encode document as YAML: {e}") from e
