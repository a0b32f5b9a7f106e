"""Shared OpenAPI components and query parameter schemas.

Schemas align with the REST API handbook:
https://developer.wordpress.org/rest-api/reference/
"""

import copy
import re
from typing import Any

HANDBOOK_URL = "https://developer.wordpress.org/rest-api/"
AUTH_DOCS_URL = "https://developer.wordpress.org/rest-api/using-the-rest-api/authentication/"

_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")

_RENDERED = {"type": "object", "properties": {"rendered": {"type": "string"}}}
_RENDERED_PROTECTED = {
    "type": "object",
    "properties": {"rendered": {"type": "string"}, "protected": {"type": "boolean"}},
}

SCHEMAS: dict[str, Any] = {
    "WP_Post": {
        "type": "object",
        "description": "Post object. See [Posts Reference](https://developer.wordpress.org/rest-api/reference/posts/).",
        "properties": {
            "id": {"type": "integer", "format": "int64", "description": "Unique identifier"},
            "slug": {"type": "string", "description": "URL-friendly slug"},
            "link": {"type": "string", "format": "uri", "description": "URL to the post"},
            "guid": {
                "type": "object",
                "properties": {"rendered": {"type": "string"}},
                "description": "Globally unique identifier for the post",
            },
            "title": _RENDERED,
            "content": _RENDERED_PROTECTED,
            "excerpt": _RENDERED_PROTECTED,
            "date": {"type": "string", "format": "date-time"},
            "date_gmt": {"type": "string", "format": "date-time"},
            "modified": {"type": "string", "format": "date-time"},
            "modified_gmt": {"type": "string", "format": "date-time"},
            "status": {"type": "string", "enum": ["publish", "future", "draft", "pending", "private"]},
            "type": {"type": "string"},
            "author": {"type": "integer"},
            "featured_media": {"type": "integer"},
            "comment_status": {"type": "string", "enum": ["open", "closed"]},
            "ping_status": {"type": "string", "enum": ["open", "closed"]},
            "sticky": {"type": "boolean"},
            "format": {"type": "string"},
            "categories": {"type": "array", "items": {"type": "integer"}},
            "tags": {"type": "array", "items": {"type": "integer"}},
            "acf": {"type": "object", "description": "Custom fields when acf_format=standard"},
            "yoast_head_json": {"type": "object", "description": "SEO metadata when the SEO plugin is active"},
        },
    },
    "WP_Page": {
        "type": "object",
        "description": "Page object. See [Pages Reference](https://developer.wordpress.org/rest-api/reference/pages/).",
        "properties": {
            "id": {"type": "integer", "format": "int64"},
            "slug": {"type": "string"},
            "link": {"type": "string", "format": "uri"},
            "title": _RENDERED,
            "content": _RENDERED_PROTECTED,
            "excerpt": {"type": "object"},
            "date": {"type": "string", "format": "date-time"},
            "modified": {"type": "string", "format": "date-time"},
            "status": {"type": "string"},
            "type": {"type": "string"},
            "parent": {"type": "integer"},
            "menu_order": {"type": "integer"},
            "template": {"type": "string"},
            "acf": {"type": "object"},
            "yoast_head_json": {"type": "object"},
        },
    },
    "WP_Term": {
        "type": "object",
        "description": "Term object (category, tag, etc.). See [Categories](https://developer.wordpress.org/rest-api/reference/categories/).",
        "properties": {
            "id": {"type": "integer", "format": "int64"},
            "slug": {"type": "string"},
            "name": {"type": "string"},
            "description": {"type": "string"},
            "count": {"type": "integer"},
            "parent": {"type": "integer"},
            "taxonomy": {"type": "string"},
        },
    },
    "WP_User": {
        "type": "object",
        "description": "User object. See [Users Reference](https://developer.wordpress.org/rest-api/reference/users/).",
        "properties": {
            "id": {"type": "integer", "format": "int64"},
            "slug": {"type": "string"},
            "name": {"type": "string"},
            "description": {"type": "string"},
            "avatar_urls": {"type": "object"},
        },
    },
    "WP_Comment": {
        "type": "object",
        "description": "Comment object. See [Comments Reference](https://developer.wordpress.org/rest-api/reference/comments/).",
        "properties": {
            "id": {"type": "integer", "format": "int64"},
            "content": {"type": "object"},
            "date": {"type": "string", "format": "date-time"},
            "parent": {"type": "integer"},
            "post": {"type": "integer"},
            "author": {"type": "integer"},
            "status": {"type": "string"},
        },
    },
    "WP_REST_Error": {
        "type": "object",
        "description": "REST API error response.",
        "properties": {
            "code": {"type": "string", "description": "Error code (e.g. rest_not_logged_in, rest_post_invalid_id)"},
            "message": {"type": "string", "description": "Human-readable error message"},
            "data": {"type": "object", "description": "Additional data (e.g. status HTTP code)"},
        },
    },
}

_ERROR_REF = {"$ref": "#/components/schemas/WP_REST_Error"}

RESPONSES: dict[str, Any] = {
    "Unauthorized": {
        "description": "Authentication required",
        "content": {
            "application/json": {
                "schema": _ERROR_REF,
                "example": {
                    "code": "rest_not_logged_in",
                    "message": "You are not currently logged in.",
                    "data": {"status": 401},
                },
            }
        },
    },
    "NotFound": {
        "description": "Resource not found",
        "content": {
            "application/json": {
                "schema": _ERROR_REF,
                "example": {
                    "code": "rest_post_invalid_id",
                    "message": "Invalid post ID.",
                    "data": {"status": 404},
                },
            }
        },
    },
    "Forbidden": {
        "description": "Insufficient permissions",
        "content": {"application/json": {"schema": _ERROR_REF}},
    },
    "ServerError": {
        "description": "Internal server error",
        "content": {"application/json": {"schema": _ERROR_REF}},
    },
}

SECURITY_SCHEMES: dict[str, Any] = {
    "cookieAuth": {
        "type": "apiKey",
        "in": "cookie",
        "name": "wordpress_logged_in",
        "description": f"Cookie auth for logged-in users. For same-origin requests, prefer the X-WP-Nonce header. Per {AUTH_DOCS_URL}",
    },
    "nonceAuth": {
        "type": "apiKey",
        "in": "header",
        "name": "X-WP-Nonce",
        "description": f"Nonce for CSRF protection, created with wp_create_nonce('wp_rest'). Per {AUTH_DOCS_URL}",
    },
    "applicationPassword": {
        "type": "http",
        "scheme": "basic",
        "description": f"Application Passwords. Use with Basic auth over HTTPS. Per {AUTH_DOCS_URL}",
    },
}

ECOMMERCE_SECURITY_SCHEME = "wcBasicAuth"
ECOMMERCE_SECURITY: dict[str, Any] = {
    "type": "http",
    "scheme": "basic",
    "description": "E-commerce REST API. Consumer Key as username, Consumer Secret as password.",
}

# OR'd alternatives for mutating operations
MUTATING_SECURITY = [{"cookieAuth": []}, {"nonceAuth": []}, {"applicationPassword": []}]

QUERY_SCHEMAS: dict[str, dict[str, Any]] = {
    "page": {"type": "integer", "default": 1, "minimum": 1},
    "per_page": {"type": "integer", "default": 10, "minimum": 1, "maximum": 100},
    "offset": {"type": "integer", "minimum": 0},
    "context": {"type": "string", "default": "view", "enum": ["view", "embed", "edit"]},
    "order": {"type": "string", "default": "desc", "enum": ["asc", "desc"]},
    "orderby": {
        "type": "string",
        "default": "date",
        "enum": [
            "author", "date", "id", "include", "modified", "parent", "relevance",
            "slug", "include_slugs", "title", "menu_order", "comment_count", "rand",
        ],
    },
    "status": {"type": "string", "default": "publish"},
    "slug": {"type": "string"},
    "_fields": {"type": "string"},
    "_embed": {"type": "string", "example": "author,wp:term"},
    "acf_format": {"type": "string", "default": "standard"},
    "search": {"type": "string"},
    "type": {"type": "string"},
    "categories": {"type": "string"},
    "parent": {"type": "string"},
    "force": {"type": "boolean", "default": False},
}

PAGINATION_HEADERS: dict[str, Any] = {
    "X-WP-Total": {
        "schema": {"type": "integer", "description": "Total number of records in collection"},
        "description": "Total number of records in the collection.",
    },
    "X-WP-TotalPages": {
        "schema": {"type": "integer", "description": "Total number of pages"},
        "description": "Total number of pages encompassing all available records.",
    },
}


def security_schemes(include_ecommerce: bool = False) -> dict[str, Any]:
    schemes = copy.deepcopy(SECURITY_SCHEMES)
    if include_ecommerce:
        schemes[ECOMMERCE_SECURITY_SCHEME] = copy.deepcopy(ECOMMERCE_SECURITY)
    return schemes


def infer_param_type(value: str) -> str:
    """integer, number, boolean or string for an example query value."""
    if value in ("true", "false"):
        return "boolean"
    if not _NUMBER_RE.match(value):
        return "string"
    return "number" if "." in value else "integer"


def param_schema(key: str, value: str = "") -> dict[str, Any]:
    """Schema for a query parameter; the example value is kept when there is no default."""
    if key in QUERY_SCHEMAS:
        schema = copy.deepcopy(QUERY_SCHEMAS[key])
    else:
        schema = {"type": infer_param_type(value) if value else "string"}
    if "default" not in schema and "example" not in schema and value != "":
        schema["example"] = value
    return schema


def default_responses(method: str) -> dict[str, Any]:
    """Success response plus the shared error references; mutating bodies add 201."""
    responses: dict[str, Any] = {
        "200": {
            "description": "Successful response",
            "content": {
                "application/json": {
                    "schema": {
                        "oneOf": [
                            {"type": "object"},
                            {"type": "array", "items": {"type": "object"}},
                        ]
                    }
                }
            },
        },
    }
    if method in ("POST", "PUT", "PATCH"):
        responses["201"] = {
            "description": "Resource created",
            "content": {"application/json": {"schema": {"type": "object"}}},
        }
    responses.update({
        "401": {"$ref": "#/components/responses/Unauthorized"},
        "403": {"$ref": "#/components/responses/Forbidden"},
        "404": {"$ref": "#/components/responses/NotFound"},
        "500": {"$ref": "#/components/responses/ServerError"},
    })
    return responses
