"""Operations discovered from the host's live REST route registry.

Route patterns are regular expressions such as
`/myplugin/v1/items/(?P<id>[\\d]+)`; they are turned into readable paths
(`/myplugin/v1/items/:id`), grouped by namespace (the first two segments)
and emitted under a single "Registered Routes" folder.
"""

import logging
import re
from typing import Any, Callable, Iterable, Mapping

from pydantic import BaseModel, ValidationError

from wp_api_docs.collection.base import BODY_METHODS, MUTATING_METHODS, SUPPORTED_METHODS, Folder, JsonBody, Operation, UrlTemplate, path_key
from wp_api_docs.collection.routes import API_ROOT, RouteCatalog, json_header
from wp_api_docs.errors import CollaboratorUnavailable
from wp_api_docs.host import Host

logger = logging.getLogger(__name__)

REGISTERED_FOLDER = "Registered Routes"

HIDDEN_NAMESPACES = (
    "wp/v2",
    "wc/v3",
    "batch/v1",
    "wp-abilities/v1",
    "wp-block-editor/v1",
    "wp-site-health/v1",
)
INTERNAL_PREFIX = "wp-"

METHOD_BITS = {"GET": 1, "POST": 2, "PUT": 4, "PATCH": 8, "DELETE": 16}

_NAMED_GROUP_RE = re.compile(r"\(\?P<([^>]+)>[^)]+\)")
_GROUP_RE = re.compile(r"\([^)]+\)")
_PATH_PARAM_RE = re.compile(r":(\w+)")

NamespaceFilter = Callable[[list[str]], Iterable[str]]


class RegisteredRoute(BaseModel):
    """One endpoint of a registry route pattern."""

    pattern: str
    namespace: str
    methods: list[str]
    args: dict[str, Any] = {}
    visible: bool = True

    @property
    def path(self) -> str:
        return route_pattern_to_path(self.pattern)


def route_pattern_to_path(pattern: str) -> str:
    """Readable path for a route pattern: named groups become `:name`, other groups and anchors go."""
    path = pattern.strip("/")
    path = _NAMED_GROUP_RE.sub(lambda m: ":" + m.group(1), path)
    path = _GROUP_RE.sub("", path)
    path = re.sub(r"#.*$", "", path)
    path = path.lstrip("^").rstrip("$")
    return "/" + "/".join(s for s in path.split("/") if s)


def namespace_from_pattern(pattern: str) -> str:
    """`/myplugin/v1/items` -> `myplugin/v1`; empty when the pattern is shorter."""
    parts = [p for p in pattern.strip("/").split("/") if p]
    if len(parts) < 2:
        return ""
    return f"{parts[0]}/{parts[1]}"


def is_includable_namespace(namespace: str) -> bool:
    """False for core and internal namespaces."""
    if namespace in HIDDEN_NAMESPACES:
        return False
    first = namespace.split("/")[0]
    return first != "" and not first.startswith(INTERNAL_PREFIX)


def normalize_methods(raw: Any) -> list[str]:
    """Supported method names from a comma string, list, `{METHOD: true}` mapping or bitmask."""
    if isinstance(raw, bool):
        names: list[Any] = []
    elif isinstance(raw, int):
        names = [m for m, bit in METHOD_BITS.items() if raw & bit]
    elif isinstance(raw, str):
        names = raw.split(",")
    elif isinstance(raw, Mapping):
        names = [k for k, enabled in raw.items() if enabled]
    elif isinstance(raw, (list, tuple, set)):
        names = list(raw)
    elif raw is None:
        names = []
    else:
        raise CollaboratorUnavailable(f"Unrecognized route methods: {raw!r}")

    methods = []
    for name in names:
        method = str(name).strip().upper()
        if method in SUPPORTED_METHODS and method not in methods:
            methods.append(method)
    return methods


def arg_example(schema: Mapping[str, Any]) -> Any:
    """Example value for one declared route argument."""
    if "default" in schema:
        return schema["default"]
    enum = schema.get("enum")
    if isinstance(enum, list) and enum:
        return enum[0]
    arg_type = schema.get("type", "string")
    if arg_type in ("integer", "number"):
        return 0
    if arg_type == "boolean":
        return False
    if arg_type == "array":
        return []
    if arg_type == "object":
        return {}
    return ""


def args_to_body(args: Mapping[str, Any], path: str) -> dict[str, Any]:
    """Example JSON body from declared arguments, leaving out path parameters."""
    path_params = set(_PATH_PARAM_RE.findall(path))
    return {
        key: arg_example(schema)
        for key, schema in args.items()
        if isinstance(schema, Mapping) and key not in path_params
    }


class RouteDiscoverer:
    """Reads the route registry and turns selected namespaces into a folder.

    The registry is read on every call; nothing is cached between generations.
    """

    def __init__(self, host: Host, namespace_filter: NamespaceFilter | None = None):
        self.host = host
        self.namespace_filter = namespace_filter
        self.catalog = RouteCatalog(host)

    def routes(self) -> list[RegisteredRoute]:
        registry = self.host.get_registered_routes()
        if not isinstance(registry, Mapping):
            raise CollaboratorUnavailable("Route registry must be a mapping of pattern to endpoints")

        routes = []
        for pattern, endpoints in registry.items():
            if isinstance(endpoints, Mapping):
                endpoints = [endpoints]
            if not isinstance(endpoints, list):
                raise CollaboratorUnavailable(f"Malformed endpoints for route {pattern}")

            namespace = namespace_from_pattern(pattern)
            for endpoint in endpoints:
                if not isinstance(endpoint, Mapping):
                    raise CollaboratorUnavailable(f"Malformed endpoint for route {pattern}: {endpoint!r}")
                methods = normalize_methods(endpoint.get("methods"))
                if not namespace or not methods:
                    continue
                try:
                    routes.append(RegisteredRoute(
                        pattern=pattern,
                        namespace=namespace,
                        methods=methods,
                        args=endpoint.get("args") or {},
                        visible=endpoint.get("show_in_index", True) is not False,
                    ))
                except ValidationError as e:
                    raise CollaboratorUnavailable(f"Malformed endpoint for route {pattern}: {e}") from e
        return routes

    def available_namespaces(self) -> list[str]:
        """Sorted namespaces that have at least one visible endpoint."""
        return sorted({r.namespace for r in self.routes() if r.visible})

    def includable_namespaces(self) -> list[str]:
        """Available namespaces minus core and internal ones, reduced by the namespace filter."""
        candidates = [ns for ns in self.available_namespaces() if is_includable_namespace(ns)]
        if self.namespace_filter is not None:
            allowed = set(self.namespace_filter(list(candidates)))
            candidates = [ns for ns in candidates if ns in allowed]
        return candidates

    def build_folder(self, namespaces: Iterable[str], existing: Mapping[str, Iterable[str]] | None = None) -> Folder:
        """Folder of operations for the selected namespaces.

        `existing` maps a normalized path (see `path_key`) to the methods other
        folders already cover; those pairs are skipped, as are repeats within
        this pass.
        """
        selected = set(namespaces)
        existing = existing or {}
        by_namespace: dict[str, list[Operation]] = {}
        added: set[tuple[str, str]] = set()

        if selected:
            for route in self.routes():
                if not route.visible or route.namespace not in selected:
                    continue
                readable = route.path
                key = path_key(f"/{API_ROOT}{readable}")
                for method in route.methods:
                    if method in existing.get(key, ()) or (key, method) in added:
                        logger.debug("Skipping duplicate %s %s", method, readable)
                        continue
                    added.add((key, method))
                    by_namespace.setdefault(route.namespace, []).append(
                        self._operation(route, method, readable)
                    )

        return Folder(
            name=REGISTERED_FOLDER,
            items=[Folder(name=ns, items=by_namespace[ns]) for ns in sorted(by_namespace)],
        )

    def _operation(self, route: RegisteredRoute, method: str, readable: str) -> Operation:
        headers = self.catalog.default_headers()
        if method in MUTATING_METHODS:
            headers += self.catalog.auth_headers()

        body = None
        if method in BODY_METHODS:
            headers.append(json_header())
            body = JsonBody(fields=args_to_body(route.args, readable))

        return Operation(
            name=f"{method} {readable}",
            method=method,
            url=UrlTemplate.build(f"/{API_ROOT}{readable}"),
            headers=headers,
            body=body,
            description=f"Registered route: {method} {readable} (namespace {route.namespace}).",
        )
