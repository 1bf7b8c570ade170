"""
Routing - path recognition and URL generation.

Routes are patterns of literal and ``:param`` segments with defaults::

    router = Router()
    router.connect("/about", controller="pages", action="about")
    router.connect("/:controller/:action/:id", action="index", id=None)

Generation is the inverse of recognition and is what makes page cache
paths and action cache keys canonical: the same options always produce
the same path, whichever request is current.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote, unquote, urlencode

from ..faults import RoutingError

DEFAULT_ROUTE = "/:controller/:action/:id"


class Route:
    """
    Single route.

    Defaults naming a segment make that segment optional (``None`` means
    optional without a value). Defaults naming no segment are fixed
    requirements, e.g. ``controller="pages"`` on ``/about``.
    """

    def __init__(self, pattern: str, **defaults: Any):
        self.pattern = pattern
        self.segments = [s for s in pattern.strip("/").split("/") if s]
        self.defaults = defaults
        self.param_names = [s[1:] for s in self.segments if s.startswith(":")]

    def recognize(self, path: str) -> Optional[Dict[str, Any]]:
        parts = [unquote(p) for p in path.split("?", 1)[0].strip("/").split("/") if p]
        if len(parts) > len(self.segments):
            return None

        params: Dict[str, Any] = {k: v for k, v in self.defaults.items() if v is not None}
        for index, segment in enumerate(self.segments):
            if index < len(parts):
                if segment.startswith(":"):
                    params[segment[1:]] = parts[index]
                elif segment != parts[index]:
                    return None
            elif not (segment.startswith(":") and segment[1:] in self.defaults):
                return None

        if "controller" not in params or "action" not in params:
            return None
        return params

    def generate(self, options: Dict[str, Any]) -> Optional[str]:
        for key, value in self.defaults.items():
            if key in self.param_names:
                continue
            if str(options.get(key)) != str(value):
                return None

        values: List[Any] = []
        for segment in self.segments:
            if segment.startswith(":"):
                name = segment[1:]
                value = options.get(name, self.defaults.get(name))
                if value is None and name not in self.defaults:
                    return None
                values.append(value)
            else:
                values.append(segment)

        # Trailing segments holding their default are implied.
        while values and self.segments[len(values) - 1].startswith(":"):
            name = self.segments[len(values) - 1][1:]
            value = values[-1]
            if value is None or (name in self.defaults and str(value) == str(self.defaults[name])):
                values.pop()
            else:
                break
        if any(v is None for v in values):
            return None

        path = "/" + "/".join(quote(str(v), safe="") for v in values)
        extras = sorted(
            (k, v) for k, v in options.items()
            if k not in self.param_names and k not in self.defaults and v is not None
        )
        if extras:
            path += "?" + urlencode([(k, str(v)) for k, v in extras])
        return path

    def __repr__(self) -> str:
        return f"<Route {self.pattern} {self.defaults}>"


class Router:
    """Ordered route table. The first route to match or generate wins."""

    def __init__(self):
        self.routes: List[Route] = []

    @classmethod
    def with_default_route(cls) -> "Router":
        router = cls()
        router.connect_default()
        return router

    def connect(self, pattern: str, **defaults: Any) -> Route:
        route = Route(pattern, **defaults)
        self.routes.append(route)
        return route

    def connect_default(self) -> Route:
        """Add the catch-all ``/:controller/:action/:id`` route."""
        return self.connect(DEFAULT_ROUTE, action="index", id=None)

    def recognize(self, path: str) -> Dict[str, Any]:
        for route in self.routes:
            params = route.recognize(path)
            if params is not None:
                return params
        raise RoutingError(f"No route matches {path!r}", path=path)

    def generate(self, options: Dict[str, Any]) -> str:
        for route in self.routes:
            path = route.generate(options)
            if path is not None:
                return path
        raise RoutingError(f"No route generates {options!r}", options=dict(options))
