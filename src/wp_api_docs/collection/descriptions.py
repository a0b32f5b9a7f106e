"""Canonical descriptions for well-known query parameters, headers and body fields.

Shared by the route builders and the OpenAPI converter so the same wording
appears in both documents.
"""

from wp_api_docs.collection.base import KeyValue

QUERY = {
    "page": "Current page number. Per https://developer.wordpress.org/rest-api/using-the-rest-api/pagination/",
    "per_page": "Maximum number of items per page (max 100). Per https://developer.wordpress.org/rest-api/using-the-rest-api/pagination/",
    "offset": "Number of items to skip in result set",
    "slug": "Limit result to item(s) with specific slug(s). Use for single item by slug.",
    "_fields": "Comma-separated fields to include. Supports dot notation. Per https://developer.wordpress.org/rest-api/using-the-rest-api/global-parameters/",
    "_embed": "Include linked resources (e.g. author, wp:term). Per https://developer.wordpress.org/rest-api/using-the-rest-api/global-parameters/",
    "acf_format": "Custom fields format when a custom-fields plugin is active (e.g. standard)",
    "search": "Filter results by search string",
    "type": "Content type for search: post, page, etc.",
    "categories": "Filter posts by category ID(s). Comma-separated for multiple.",
    "parent": "Filter by parent ID. For hierarchical items (pages, categories).",
    "context": "Response scope: view, embed, or edit. Determines which fields are returned. Per https://developer.wordpress.org/rest-api/using-the-rest-api/global-parameters/",
    "order": "Sort order: asc or desc",
    "orderby": "Field to sort by: date, title, id, slug, etc. Per WP REST API.",
    "status": "Filter by post status: publish, draft, pending, private, etc.",
    "force": "Bypass Trash on delete. Use force=true for permanent deletion.",
    "after": "Limit response to resources published after a given ISO8601 date",
    "before": "Limit response to resources published before a given ISO8601 date",
    "include": "Limit result set to specific IDs",
    "exclude": "Ensure result set excludes specific IDs",
}

HEADERS = {
    "Accept-Language": "Preferred language (RFC 5646). For multilingual sites.",
    "X-WP-Nonce": "Nonce for same-origin auth. Get via wp_create_nonce('wp_rest'). Required for POST/PUT/PATCH/DELETE when logged in.",
}

REQUEST_BODY = {
    "title": "The title of the post/page",
    "content": "The content of the post/page. HTML supported.",
    "excerpt": "Short excerpt or summary",
    "status": "Post status: publish, draft, pending, private. Per WP REST API.",
}


def get_query(key: str) -> str:
    return QUERY.get(key, "")


def get_header(key: str) -> str:
    return HEADERS.get(key, "")


def get_request_body(key: str) -> str:
    return REQUEST_BODY.get(key, "")


def enrich_query_params(params: list[KeyValue]) -> list[KeyValue]:
    """Fill in missing descriptions from the query table. Mutates and returns params."""
    for p in params:
        if not p.description:
            p.description = get_query(p.key)
    return params


def enrich_headers(headers: list[KeyValue]) -> list[KeyValue]:
    """Fill in missing descriptions from the header table. Mutates and returns headers."""
    for h in headers:
        if not h.description:
            h.description = get_header(h.key)
    return headers
