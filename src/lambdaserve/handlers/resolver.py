from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from typing import Iterable

from lambdaserve.domain.errors import DuplicateRouteError, InvalidHandlerError
from lambdaserve.handlers.naming import to_camel_case

_NON_IDENT = re.compile(r"[^A-Za-z0-9]+")
_ROUTE_SEGMENT = re.compile(r"[A-Za-z0-9._~-]+")


def _normalize(path_name: str) -> str:
    # rooted at ".", forward slashes, never absolute
    p = (path_name or "").replace("\\", "/")
    return posixpath.normpath("./" + p.lstrip("/"))


@dataclass(frozen=True)
class HandlerRef:
    """One handler source file and the names generated for it."""

    path_name: str

    def without_extension(self) -> str:
        # only the final segment loses its suffix: v1.2/index.js -> v1.2/index
        head, name = posixpath.split(self.path_name)
        dot = name.rfind(".")
        if dot > 0:
            name = name[:dot]
        return posixpath.join(head, name) if head else name

    @property
    def route_name(self) -> str:
        parent = posixpath.basename(posixpath.dirname(self.path_name) or ".")
        if parent != ".":
            return parent
        return posixpath.basename(self.without_extension())

    @property
    def binding_name(self) -> str:
        # uppercase/index.js -> "uppercasehandler", my-func/index.js -> "myFunchandler"
        name = to_camel_case(_NON_IDENT.sub("_", self.route_name) + "Handler")
        if name[:1].isdigit():
            name = "handler" + name
        return name

    @property
    def import_path(self) -> str:
        return self.without_extension()

    def import_line(self) -> str:
        return (
            f'const {self.binding_name} = resolveHandler('
            f'require("./{self.import_path}"), "{self.import_path}");\n'
        )


def resolve(path_name: str) -> HandlerRef:
    return HandlerRef(path_name=_normalize(path_name))


def _is_route_segment(name: str) -> bool:
    return bool(name.strip(".")) and _ROUTE_SEGMENT.fullmatch(name) is not None


def clean_route_name(route: str) -> str:
    """
    Strip one leading "/" and check the rest is a single URL path segment.
    Raises InvalidHandlerError for empty, dot-only or non [A-Za-z0-9._~-] names.
    """
    name = (route or "").strip()
    if name.startswith("/"):
        name = name[1:]
    if not _is_route_segment(name):
        raise InvalidHandlerError(f"Not a usable route name: {route!r}")
    return name


def validate_routes(handlers: Iterable[HandlerRef]) -> list[HandlerRef]:
    """
    Reject handlers that would produce an unusable HTTP route:
      - empty, dot-only or non URL-safe route names (e.g. "../index.js", "my dir/index.js")
      - two handlers bound to the same route
    """
    out: list[HandlerRef] = []
    by_route: dict[str, list[str]] = {}

    for h in handlers:
        route = h.route_name
        if not _is_route_segment(route):
            raise InvalidHandlerError(f"Cannot derive a route name from path: {h.path_name}")
        by_route.setdefault(route, []).append(h.path_name)
        out.append(h)

    for route, paths in by_route.items():
        if len(paths) > 1:
            raise DuplicateRouteError(route, paths)
    return out
