"""Assemble route catalog and registered routes into one collection."""

import logging
from datetime import datetime
from typing import Callable, Iterable

from pydantic import BaseModel

from wp_api_docs.collection.base import Collection, CollectionInfo, Folder, Operation, path_key
from wp_api_docs.collection.registered import NamespaceFilter, RouteDiscoverer
from wp_api_docs.collection.routes import CATEGORY_POSTS_FOLDER, OPTIONS_FOLDER, RouteCatalog
from wp_api_docs.host import BUILTIN_TYPES, Capability, ContentType, Host, OptionGroup

logger = logging.getLogger(__name__)

CollectionTransform = Callable[[Collection], Collection]


class Selection(BaseModel):
    """What the caller asked to include.

    `entities=None` selects every standard entity and `option_groups=None`
    every configured group; the other lists select nothing when empty.
    """

    entities: list[str] | None = None
    custom_types: list[str] = []
    page_slugs: list[str] = []
    category_slugs: list[str] = []
    option_groups: list[str] | None = None
    namespaces: list[str] = []
    rich_pages: bool = False
    rich_posts: bool = False
    rich_types: list[str] = []
    include_ecommerce: bool = False


def existing_path_methods(nodes: Iterable[Folder | Operation]) -> dict[str, set[str]]:
    """Normalized path -> methods already present anywhere below `nodes`."""
    existing: dict[str, set[str]] = {}
    for node in nodes:
        operations = node.operations() if isinstance(node, Folder) else [node]
        for op in operations:
            existing.setdefault(path_key(op.url.path), set()).add(op.method)
    return existing


class CollectionAssembler:
    def __init__(self, host: Host, namespace_filter: NamespaceFilter | None = None, now: datetime | None = None):
        self.host = host
        self.catalog = RouteCatalog(host, now=now)
        self.discoverer = RouteDiscoverer(host, namespace_filter=namespace_filter)

    def custom_types(self) -> list[ContentType]:
        """Public content types other than the built-in page, post and attachment."""
        return [t for t in self.host.list_content_types() if t.name not in BUILTIN_TYPES]

    def option_groups(self, slugs: list[str] | None) -> list[OptionGroup]:
        configured = list(self.host.get_option_groups())
        if slugs is None:
            return configured
        by_slug = {g.slug: g for g in configured}
        return [by_slug.get(slug) or OptionGroup(slug=slug) for slug in slugs]

    def assemble(self, selection: Selection | None = None, transform: CollectionTransform | None = None) -> Collection:
        """Build the collection for a selection, then apply `transform` to the result."""
        selection = selection or Selection()
        catalog = self.catalog

        items: list[Folder | Operation] = [
            catalog.basic_routes(selection.entities, selection.rich_pages, selection.rich_posts)
        ]

        if selection.include_ecommerce:
            items += catalog.ecommerce_routes()

        options = catalog.options_routes(self.option_groups(selection.option_groups))
        if options:
            items.append(Folder(name=OPTIONS_FOLDER, items=options))

        discovered = self.custom_types()
        by_name = {t.name: t for t in discovered}
        chosen = []
        for name in selection.custom_types:
            if name in by_name:
                chosen.append(by_name[name])
            else:
                logger.warning("Custom type %r is not registered on the host", name)
        items += catalog.custom_type_routes(chosen, selection.rich_types)

        items += catalog.individual_page_routes(selection.page_slugs)

        category_posts = catalog.posts_by_categories_routes(selection.category_slugs)
        if category_posts:
            items.append(Folder(name=CATEGORY_POSTS_FOLDER, items=category_posts))

        if selection.namespaces:
            registered = self.discoverer.build_folder(selection.namespaces, existing_path_methods(items))
            if registered.items:
                items.append(registered)

        name = self.host.site_name()
        collection = Collection(
            info=CollectionInfo(name=name),
            root=Folder(name=name, items=items),
            variables=catalog.variables(
                discovered,
                include_ecommerce=selection.include_ecommerce and self.host.is_capability_active(Capability.ECOMMERCE),
            ),
        )
        logger.info("Assembled collection %r with %d operations", name, sum(1 for _ in collection.operations()))

        if transform is not None:
            collection = transform(collection)
        return collection
