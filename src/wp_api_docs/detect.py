"""Auto-detect the kind of input document."""

import json
from pathlib import Path

import yaml

from wp_api_docs.collection.base import COLLECTION_SCHEMA


def _classify(data: object) -> str | None:
    if not isinstance(data, dict):
        return None
    if "openapi" in data or "swagger" in data:
        return "openapi"
    info = data.get("info")
    if isinstance(info, dict) and (
        "_postman_id" in info or info.get("schema") == COLLECTION_SCHEMA or "item" in data
    ):
        return "collection"
    return None


def detect_format(file_path: Path) -> str:
    """Detect the format of an input file.

    Returns: 'openapi', 'collection' (Postman v2.1), or 'snapshot' (site description).
    """
    text = file_path.read_text(encoding="utf-8")

    try:
        kind = _classify(yaml.safe_load(text))
        if kind:
            return kind
    except yaml.YAMLError:
        pass

    # JSON that YAML rejects (e.g. tabs in indentation)
    try:
        kind = _classify(json.loads(text))
        if kind:
            return kind
    except ValueError:
        pass

    return "snapshot"
