"""Human-readable operation descriptions.

A source description is kept when it reads like one; otherwise a
description is synthesized from the path shape and the method.
"""

import re

MIN_DESCRIPTION_LENGTH = 10

ACTION_VERBS = ("get", "retrieve", "create", "update", "delete", "list", "fetch", "obtain", "submit", "search")

IRREGULAR_SINGULARS = {
    "pages": "page",
    "posts": "post",
    "categories": "category",
    "tags": "tag",
    "comments": "comment",
    "users": "user",
    "settings": "setting",
    "media": "media",
    "taxonomies": "taxonomy",
}

# Greek up to Cherokee (Cyrillic to Ethiopic), Khmer and Mongolian, kana, CJK, Hangul syllables
_NON_LATIN_RE = re.compile(
    "[\\u0370-\\u13ff\\u1780-\\u18af"
    "\\u3040-\\u30ff\\u3400-\\u4dbf\\u4e00-\\u9fff\\uac00-\\ud7af]"
)


def is_good_description(description: str, name: str) -> bool:
    """Whether a source description is worth keeping as-is."""
    if not description or description == name:
        return False
    if len(description) < MIN_DESCRIPTION_LENGTH:
        return False
    if _NON_LATIN_RE.search(description):
        return False
    lower = description.lower()
    return any(verb in lower for verb in ACTION_VERBS)


def singular(entity: str) -> str:
    if entity in IRREGULAR_SINGULARS:
        return IRREGULAR_SINGULARS[entity]
    if entity.endswith("ies"):
        return entity[:-3] + "y"
    if entity.endswith("es"):
        return entity[:-2]
    if entity.endswith("s"):
        return entity[:-1]
    return entity


def _segments(path: str) -> list[str]:
    return [s for s in path.strip("/").split("/") if s]


def _is_param(segment: str) -> bool:
    return segment.startswith("{")


def extract_entity(path: str) -> str:
    """Resource name of a path, skipping a trailing path parameter.

    /wp-json/wp/v2/posts/{postId} -> posts, /wp-json/wp/v2/posts/{postId}/revisions -> posts
    """
    parts = _segments(path)
    if not parts:
        return ""
    if _is_param(parts[-1]):
        return parts[-2] if len(parts) >= 2 else ""
    if len(parts) >= 2 and _is_param(parts[-2]):
        return parts[-3] if len(parts) >= 3 else ""
    return parts[-1]


def describe_operation(path: str, method: str, parameters: list[dict]) -> str:
    """Synthesize a description from the path shape, the method and the parameters."""
    parts = _segments(path)
    if not parts:
        return ""
    last = parts[-1]
    second_last = parts[-2] if len(parts) >= 2 else ""
    third_last = parts[-3] if len(parts) >= 3 else ""

    if last == "submit" and "forms" in (second_last, third_last):
        return "Submit form data" if method == "POST" else "Perform operation on form submission"
    if second_last == "forms" and not _is_param(last):
        return "Retrieve form information" if method == "GET" else "Perform operation on form"
    if last == "search":
        return "Search content across the site" if method == "GET" else "Perform search operation"
    if last == "options":
        return "Retrieve list of options pages" if method == "GET" else "Perform operation on options"
    if second_last == "options":
        return "Retrieve options page data" if method == "GET" else "Perform operation on options"

    entity = extract_entity(path)
    if not entity:
        return ""
    entity_singular = singular(entity)

    has_path_param = "{" in path
    has_search_param = any(p.get("name") == "search" and p.get("in") == "query" for p in parameters)

    if method == "GET":
        if has_search_param:
            return f"Search for {entity}"
        if has_path_param:
            return f"Retrieve a specific {entity_singular} by ID"
        return f"Retrieve a list of {entity}"
    if method == "POST":
        return f"Create a new {entity_singular}"
    if method == "PUT":
        return f"Update an existing {entity_singular}"
    if method == "PATCH":
        return f"Partially update an existing {entity_singular}"
    if method == "DELETE":
        return f"Delete a {entity_singular}"
    return f"Perform {method.lower()} operation on {entity}"


def list_or_slug_description(path: str) -> str:
    """Description for a collection GET that serves both listing and lookup by slug."""
    entity = extract_entity(path)
    if not entity:
        return "List all items or get a specific item by slug. Use slug parameter for a single item."
    return (
        f"List all {entity} with pagination. "
        f"To get a specific {singular(entity)}, use the slug parameter (e.g. slug=home)."
    )
