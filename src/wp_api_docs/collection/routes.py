"""Route catalog: request templates for the host REST API.

Builds folders for the standard entities and search, custom content types
(including forms-handler forms), option groups, selected pages, posts by
category and the optional e-commerce block, plus the collection variables.
"""

import logging
import re
from datetime import datetime
from typing import Any, Sequence

from wp_api_docs.collection import descriptions
from wp_api_docs.collection.base import (
    Folder,
    Header,
    JsonBody,
    MultipartBody,
    Operation,
    QueryParam,
    UrlTemplate,
    Variable,
)
from wp_api_docs.collection.forms import build_submit_body, parse_fields
from wp_api_docs.host import Capability, ContentType, Host, OptionGroup

logger = logging.getLogger(__name__)

API_ROOT = "wp-json"
CORE_NAMESPACE = "wp/v2"
OPTIONS_NAMESPACE = "custom/v1"
FORMS_NAMESPACE = "forms-handler/v1"
ECOMMERCE_NAMESPACE = "wc/v3"

FORMS_TYPE = "fh_forms"
FORMS_LABEL = "Forms"

BASIC_ROUTES_FOLDER = "Basic Routes"
SEARCH_FOLDER = "Search"
OPTIONS_FOLDER = "Options Pages"
SPECIFIC_PAGES_FOLDER = "Specific Pages"
CATEGORY_POSTS_FOLDER = "Posts by Categories"
ECOMMERCE_FOLDER = "WooCommerce"

EXAMPLE_GROUP_PREFIX = "example-"
NONCE_VARIABLE = "wpNonce"

# entity -> singular label, in display order
STANDARD_ENTITIES = {
    "pages": "Page",
    "posts": "Post",
    "categories": "Category",
    "tags": "Tag",
    "comments": "Comment",
    "users": "User",
    "settings": "Setting",
}
SINGLETON_ENTITIES = ("settings",)
CONTENT_ENTITIES = ("pages", "posts")

ID_DEFAULTS = {
    "Post": "1",
    "Page": "2",
    "Comment": "1",
    "User": "1",
    "Category": "1",
    "Tag": "1",
}

PAGE_FIELDS = "id,slug,title"
POST_FIELDS = "id,slug,title,date,status,excerpt,featured_media,sticky,categories,tags"
CATEGORY_FIELDS = "id,count,description,name,slug,taxonomy,parent,thumbnail,acf,meta"
DETAIL_FIELDS = "title,acf,content"
SEARCH_FIELDS = "id,slug,title,excerpt,featured_media"
SEO_FIELD = "yoast_head_json"
CUSTOM_FIELDS_FIELD = "acf"

SLUG_EXAMPLES = {"pages": "sample-page", "posts": "hello-world", "categories": "uncategorized"}

ECOMMERCE_AUTH = {
    "type": "basic",
    "basic": [
        {"key": "username", "value": "{{wcConsumerKey}}", "type": "string"},
        {"key": "password", "value": "{{wcConsumerSecret}}", "type": "string"},
    ],
}


def query(key: str, value: str = "", enabled: bool = True) -> QueryParam:
    """Query parameter with its knowledge-base description."""
    return QueryParam(key=key, value=value, enabled=enabled, description=descriptions.get_query(key))


def header(key: str, value: str, enabled: bool = True) -> Header:
    """Header with its knowledge-base description."""
    return Header(key=key, value=value, enabled=enabled, description=descriptions.get_header(key))


def json_header() -> Header:
    return Header(key="Content-Type", value="application/json")


def ns_path(namespace: str, *segments: str) -> list[str]:
    """Path segments below the API root for a `group/version` namespace."""
    return [API_ROOT, *namespace.split("/"), *segments]


def id_variable(singular_label: str) -> str:
    """Variable name holding an example ID, e.g. `PostID`."""
    return re.sub(r"[^A-Za-z0-9]", "", singular_label) + "ID"


def ucfirst(text: str) -> str:
    return text[:1].upper() + text[1:]


class RouteCatalog:
    """Builds request folders from host content and capabilities."""

    def __init__(self, host: Host, now: datetime | None = None):
        self.host = host
        self.now = now  # clock for form date samples; current UTC time when None

    def _active(self, capability: Capability) -> bool:
        return self.host.is_capability_active(capability)

    def _rich(self, opted_in: bool) -> bool:
        return opted_in and self._active(Capability.CUSTOM_FIELDS)

    # -- shared parameters and headers ----------------------------------------

    def fields_param(self) -> str:
        fields = PAGE_FIELDS
        if self._active(Capability.SEO_METADATA):
            fields += f",{SEO_FIELD}"
        return fields

    def detail_fields_param(self) -> str:
        fields = DETAIL_FIELDS
        if self._active(Capability.SEO_METADATA):
            fields += f",{SEO_FIELD}"
        return fields

    def default_headers(self) -> list[Header]:
        """Headers for read requests: a disabled Accept-Language for the site locale."""
        locale = self.host.get_default_locale().replace("_", "-")
        return [header("Accept-Language", locale, enabled=False)]

    def auth_headers(self) -> list[Header]:
        """Disabled nonce placeholder carried by every mutating request."""
        return [header("X-WP-Nonce", "{{%s}}" % NONCE_VARIABLE, enabled=False)]

    def pagination_params(self) -> list[QueryParam]:
        return [
            query("page", "1", enabled=False),
            query("per_page", "10", enabled=False),
            query("offset", "0", enabled=False),
        ]

    def list_extra_params(self, entity: str) -> list[QueryParam]:
        params = [
            query("context", "view", enabled=False),
            query("search", "", enabled=False),
            query("order", "desc", enabled=False),
            query("orderby", "date", enabled=False),
            query("_embed", "", enabled=False),
        ]
        if entity in CONTENT_ENTITIES:
            params.insert(2, query("status", "publish", enabled=False))
        return params

    def get_extra_params(self) -> list[QueryParam]:
        return [
            query("context", "view", enabled=False),
            query("_embed", "", enabled=False),
        ]

    def delete_params(self) -> list[QueryParam]:
        return [query("force", "false", enabled=False)]

    def _get(self, name: str, path: list[str], params: list[QueryParam] | None, description: str) -> Operation:
        return Operation(
            name=name,
            method="GET",
            url=UrlTemplate.build(path, params),
            headers=self.default_headers(),
            description=description,
        )

    # -- standard entities ----------------------------------------------------

    def basic_routes(
        self,
        entities: Sequence[str] | None = None,
        rich_pages: bool = False,
        rich_posts: bool = False,
    ) -> Folder:
        """Folder with one sub-folder per selected standard entity, followed by Search."""
        selected = list(STANDARD_ENTITIES) if entities is None else list(entities)
        for unknown in set(selected) - set(STANDARD_ENTITIES):
            logger.warning("Ignoring unknown entity %r", unknown)

        items: list[Folder] = []
        for entity, singular in STANDARD_ENTITIES.items():
            if entity not in selected:
                continue
            rich = self._rich(rich_pages if entity == "pages" else rich_posts if entity == "posts" else False)
            items.append(self.entity_folder(entity, singular, rich))
        items.append(self.search_folder())
        return Folder(name=BASIC_ROUTES_FOLDER, items=items)

    def entity_folder(self, entity: str, singular: str, rich: bool = False) -> Folder:
        if entity in SINGLETON_ENTITIES:
            return Folder(name=ucfirst(entity), items=[self._singleton_operation(entity)])

        list_params: list[QueryParam] = []
        if entity == "posts":
            fields = POST_FIELDS
            if rich:
                fields += f",{CUSTOM_FIELDS_FIELD}"
                list_params.append(query("acf_format", "standard"))
            list_params.append(query("_fields", fields))
            list_params.append(query("categories", "1", enabled=False))
        elif entity == "categories":
            list_params.append(query("_fields", CATEGORY_FIELDS))
        elif entity == "pages":
            fields = self.fields_param()
            if rich:
                fields += f",{CUSTOM_FIELDS_FIELD}"
                list_params.append(query("acf_format", "standard"))
            list_params.append(query("_fields", fields))
        list_params += self.list_extra_params(entity) + self.pagination_params()

        detailed = entity in CONTENT_ENTITIES
        slug_params = [query("slug", SLUG_EXAMPLES.get(entity, "example"))]
        id_params: list[QueryParam] = []
        if detailed:
            detail = [query("acf_format", "standard"), query("_fields", self.detail_fields_param())]
            slug_params += detail
            id_params += [query("acf_format", "standard"), query("_fields", self.detail_fields_param())]
        elif entity == "categories":
            slug_params.append(query("parent", "1", enabled=False))
            id_params.append(query("parent", "1", enabled=False))

        return Folder(
            name=ucfirst(entity),
            items=self._crud_operations(
                rest_base=entity,
                plural=ucfirst(entity),
                singular=singular,
                list_params=list_params,
                slug_params=slug_params + self.get_extra_params(),
                id_params=id_params + self.get_extra_params(),
                list_description=f"Get list of all {entity}",
                detail_suffix=" with custom fields" if detailed else "",
            ),
        )

    def _singleton_operation(self, entity: str) -> Operation:
        return self._get(
            f"Get {ucfirst(entity)}",
            ns_path(CORE_NAMESPACE, entity),
            None,
            f"Get site {entity}",
        )

    def _crud_operations(
        self,
        rest_base: str,
        plural: str,
        singular: str,
        list_params: list[QueryParam],
        slug_params: list[QueryParam],
        id_params: list[QueryParam],
        list_description: str,
        detail_suffix: str = "",
    ) -> list[Operation]:
        """List, by slug, by ID, create, update and delete for one REST base."""
        collection_path = ns_path(CORE_NAMESPACE, rest_base)
        item_path = collection_path + ["{{%s}}" % id_variable(singular)]
        write_headers = self.auth_headers() + [json_header()]

        return [
            self._get(f"List of {plural}", collection_path, list_params, list_description),
            self._get(
                f"{singular} by Slug",
                collection_path,
                slug_params,
                f"Get specific {singular} by slug{detail_suffix}",
            ),
            self._get(
                f"{singular} by ID",
                item_path,
                id_params,
                f"Get specific {singular} by ID{detail_suffix}",
            ),
            Operation(
                name=f"Create {singular}",
                method="POST",
                url=UrlTemplate.build(collection_path),
                headers=write_headers,
                body=JsonBody(fields={
                    "title": f"Sample {singular} Title",
                    "content": f"Sample {singular} content here.",
                    "excerpt": f"Sample {singular} excerpt.",
                    "status": "draft",
                }),
                description=f"Create new {singular}",
            ),
            Operation(
                name=f"Update {singular}",
                method="POST",
                url=UrlTemplate.build(item_path),
                headers=self.auth_headers() + [json_header()],
                body=JsonBody(fields={
                    "title": f"Updated {singular} Title",
                    "content": f"Updated {singular} content here.",
                    "excerpt": f"Updated {singular} excerpt.",
                }),
                description=f"Update existing {singular} by ID",
            ),
            Operation(
                name=f"Delete {singular}",
                method="DELETE",
                url=UrlTemplate.build(item_path, self.delete_params()),
                headers=self.auth_headers(),
                description=f"Delete {singular} by ID. Add ?force=true to bypass Trash.",
            ),
        ]

    def search_folder(self) -> Folder:
        return Folder(
            name=SEARCH_FOLDER,
            items=[
                self._search_operation("Search Posts", "post", 'Search for posts with keyword "example"'),
                self._search_operation("Search Pages", "page", 'Search for pages with keyword "example"'),
                self._search_operation("Search All", None, 'Search across all content types with keyword "example"'),
            ],
        )

    def _search_operation(self, name: str, content_type: str | None, description: str) -> Operation:
        params = [
            query("search", "example"),
            query("_fields", SEARCH_FIELDS),
            query("context", "view", enabled=False),
            query("_embed", "", enabled=False),
        ]
        if content_type is not None:
            params.insert(0, query("type", content_type))
        return self._get(name, ns_path(CORE_NAMESPACE, "search"), params, description)

    # -- option groups --------------------------------------------------------

    def options_routes(self, groups: Sequence[OptionGroup]) -> list[Operation]:
        """One GET per real option group, preceded by the group listing.

        Groups whose slug marks them as examples are skipped; with no real
        group left the result is empty.
        """
        items = []
        for group in groups:
            if group.slug.startswith(EXAMPLE_GROUP_PREFIX):
                continue
            title = group.title or ucfirst(group.slug.replace("-", " "))
            items.append(self._get(
                title,
                ns_path(OPTIONS_NAMESPACE, "options", group.slug),
                None,
                f"Get options for {title}",
            ))

        if items:
            items.insert(0, self._get(
                "List of Options Pages",
                ns_path(OPTIONS_NAMESPACE, "options"),
                None,
                "Get list of all available options pages",
            ))
        return items

    # -- custom content types -------------------------------------------------

    def custom_type_routes(self, content_types: Sequence[ContentType], rich_types: Sequence[str] = ()) -> list[Folder]:
        folders = []
        for content_type in content_types:
            if content_type.name == FORMS_TYPE:
                label = FORMS_LABEL
                items = self.forms_routes(label)
            else:
                label = content_type.label
                items = self._custom_type_operations(content_type, self._rich(content_type.name in rich_types))

            # forms produce nothing while the handler is inactive
            if items:
                folders.append(Folder(name=label, items=items))
        return folders

    def _custom_type_operations(self, content_type: ContentType, rich: bool) -> list[Operation]:
        fields = self.fields_param()
        list_params: list[QueryParam] = []
        if rich:
            fields += f",{CUSTOM_FIELDS_FIELD}"
            list_params.append(query("acf_format", "standard"))
        list_params.append(query("_fields", fields))
        list_params += self.list_extra_params(content_type.rest_base) + self.pagination_params()

        return self._crud_operations(
            rest_base=content_type.rest_base,
            plural=content_type.label,
            singular=content_type.singular_label,
            list_params=list_params,
            slug_params=[query("slug", "example")] + self.get_extra_params(),
            id_params=self.get_extra_params(),
            list_description=f"Get list of all {content_type.label}" + (" with custom fields" if rich else ""),
        )

    def forms_routes(self, label: str = FORMS_LABEL) -> list[Operation | Folder]:
        """Form listing plus an info/submit sub-folder per published form."""
        if not self._active(Capability.FORMS_HANDLER):
            return []

        items: list[Operation | Folder] = [
            self._get(
                f"List of {label}",
                ns_path(FORMS_NAMESPACE, "forms"),
                self.pagination_params(),
                f"Get list of all {label}",
            )
        ]

        for form in self.host.list_content_items(FORMS_TYPE, {"status": "publish"}):
            title = form.title or form.slug
            fields = parse_fields(form.meta.get("fields_config"))
            body = build_submit_body(fields, self.now)
            submit_headers = [] if isinstance(body, MultipartBody) else [json_header()]

            items.append(Folder(
                name=title,
                items=[
                    self._get(
                        f"Get Form Info - {title}",
                        ns_path(FORMS_NAMESPACE, "forms", form.slug),
                        None,
                        f"Get form info for '{title}'",
                    ),
                    Operation(
                        name=f"Submit Form - {title}",
                        method="POST",
                        url=UrlTemplate.build(ns_path(FORMS_NAMESPACE, "forms", form.slug, "submit")),
                        headers=submit_headers,
                        body=body,
                        description=f"Submit form data for '{title}'",
                    ),
                ],
            ))
        return items

    # -- selected pages and categories ----------------------------------------

    def individual_page_routes(self, slugs: Sequence[str]) -> list[Folder]:
        if not slugs:
            return []

        items = []
        for slug in slugs:
            found = self.host.list_content_items("page", {"slug": slug})
            title = found[0].title if found and found[0].title else slug
            params = [
                query("slug", slug),
                query("acf_format", "standard"),
                query("_fields", self.detail_fields_param()),
            ]
            items.append(self._get(
                title,
                ns_path(CORE_NAMESPACE, "pages"),
                params,
                f"Get {title} by slug with custom fields",
            ))
        return [Folder(name=SPECIFIC_PAGES_FOLDER, items=items)]

    def posts_by_categories_routes(self, slugs: Sequence[str]) -> list[Operation]:
        items = []
        for slug in slugs:
            found = self.host.list_content_items("category", {"slug": slug})
            if found:
                name = found[0].title or slug
                term_id = str(found[0].id)
                suffix = f" (ID {term_id})"
            else:
                logger.info("Category %r not found, using the CategoryID placeholder", slug)
                name = slug
                term_id = "{{%s}}" % id_variable("Category")
                suffix = ""

            params = [query("_fields", POST_FIELDS), query("categories", term_id)]
            params += self.list_extra_params("posts") + self.pagination_params()
            items.append(self._get(
                f"Posts in {name}",
                ns_path(CORE_NAMESPACE, "posts"),
                params,
                f'Get posts filtered by category "{name}"{suffix}',
            ))
        return items

    # -- e-commerce -----------------------------------------------------------

    def ecommerce_routes(self) -> list[Folder]:
        """Products, product categories and orders of the e-commerce extension."""
        if not self._active(Capability.ECOMMERCE):
            return []

        products = self._ecommerce_resource(
            ["products"], "Product", "Products",
            filters=[
                ("search", ""), ("after", ""), ("before", ""), ("exclude", ""), ("include", ""),
                ("slug", ""), ("status", "publish"), ("type", "simple"), ("category", ""),
                ("tag", ""), ("orderby", "date"), ("order", "desc"),
            ],
            create_body={
                "name": "Sample Product",
                "type": "simple",
                "regular_price": "29.99",
                "description": "Product description.",
                "short_description": "Short description.",
                "status": "draft",
            },
            update_body={"name": "Updated Product Name", "regular_price": "39.99"},
        )
        categories = self._ecommerce_resource(
            ["products", "categories"], "Product Category", "Product Categories",
            filters=[
                ("search", ""), ("exclude", ""), ("include", ""), ("slug", ""),
                ("parent", "0"), ("orderby", "name"), ("order", "asc"),
            ],
            create_body={
                "name": "Sample Category",
                "slug": "sample-category",
                "description": "Category description.",
                "parent": 0,
            },
            update_body={"name": "Updated Category", "slug": "updated-category"},
        )
        orders = self._ecommerce_resource(
            ["orders"], "Order", "Orders",
            filters=[
                ("search", ""), ("after", ""), ("before", ""), ("status", "any"),
                ("customer", ""), ("product", ""), ("orderby", "date"), ("order", "desc"),
            ],
            create_body={
                "payment_method": "bacs",
                "billing": {
                    "first_name": "John",
                    "last_name": "Doe",
                    "address_1": "123 Main St",
                    "city": "Anytown",
                    "postcode": "12345",
                    "country": "US",
                    "email": "john@example.com",
                },
                "line_items": [{"product_id": 1, "quantity": 1}],
            },
            update_body={"status": "processing"},
        )

        return [Folder(
            name=ECOMMERCE_FOLDER,
            auth=ECOMMERCE_AUTH,
            items=[
                Folder(name="Products", items=products),
                Folder(name="Product Categories", items=categories),
                Folder(name="Orders", items=orders),
            ],
        )]

    def _ecommerce_resource(
        self,
        segments: list[str],
        singular: str,
        plural: str,
        filters: list[tuple[str, str]],
        create_body: dict[str, Any],
        update_body: dict[str, Any],
    ) -> list[Operation]:
        collection_path = ns_path(ECOMMERCE_NAMESPACE, *segments)
        item_path = collection_path + ["{{%s}}" % id_variable(singular)]
        list_params = [query("page", "1", enabled=False), query("per_page", "10", enabled=False)]
        list_params.append(query("context", "view", enabled=False))
        list_params += [query(key, value, enabled=False) for key, value in filters]

        return [
            self._get(f"List {plural}", collection_path, list_params, f"List all {plural.lower()}."),
            self._get(
                f"{singular} by ID",
                item_path,
                [query("context", "view", enabled=False)],
                f"Get {singular.lower()} by ID.",
            ),
            Operation(
                name=f"Create {singular}",
                method="POST",
                url=UrlTemplate.build(collection_path),
                headers=[json_header()],
                body=JsonBody(fields=create_body),
                description=f"Create new {singular.lower()}.",
            ),
            Operation(
                name=f"Update {singular}",
                method="PUT",
                url=UrlTemplate.build(item_path),
                headers=[json_header()],
                body=JsonBody(fields=update_body),
                description=f"Update {singular.lower()} by ID.",
            ),
            Operation(
                name=f"Delete {singular}",
                method="DELETE",
                url=UrlTemplate.build(item_path, [query("force", "true", enabled=False)]),
                description=f"Delete {singular.lower()}. Use force=true for permanent delete.",
            ),
        ]

    # -- variables ------------------------------------------------------------

    def variables(self, content_types: Sequence[ContentType], include_ecommerce: bool = False) -> list[Variable]:
        """Base URL, nonce placeholder and one example ID per entity and custom type."""
        variables = [
            Variable(key="baseUrl", value=self.host.resolve_base_url()),
            Variable(key=NONCE_VARIABLE, value=""),
        ]
        variables += [Variable(key=id_variable(singular), value=value) for singular, value in ID_DEFAULTS.items()]

        if include_ecommerce and self._active(Capability.ECOMMERCE):
            variables += [
                Variable(key="wcConsumerKey", value=""),
                Variable(key="wcConsumerSecret", value=""),
                Variable(key=id_variable("Product"), value="1"),
                Variable(key=id_variable("Product Category"), value="1"),
                Variable(key=id_variable("Order"), value="1"),
            ]

        seen = {v.key for v in variables}
        for content_type in content_types:
            key = id_variable(content_type.singular_label)
            if key not in seen:
                seen.add(key)
                variables.append(Variable(key=key, value="1"))
        return variables
