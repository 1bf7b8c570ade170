"""
Controller Base Class

A controller instance serves exactly one request. Besides running the
action it owns every caching decision for that request:

- fragment caching: ``read_fragment`` / ``write_fragment`` / ``expire_fragment``
- action caching: actions listed in ``caches_action`` are served from and
  stored into the fragment store under a URL-derived key
- page caching: actions listed in ``caches_page`` hand their body to the
  application's :class:`~cacheprobe.pages.PageCache`

All helpers are no-ops unless ``perform_caching`` is on.
"""

from __future__ import annotations

import inspect
import logging
import re
from typing import Any, Dict, Mapping, Optional, Sequence, Union, TYPE_CHECKING

from ..cache.patterns import KeyPattern
from ..faults import RoutingError
from ..refs import ActionName, QualifiedAction, normalize_action
from .http import Request, Response

if TYPE_CHECKING:
    from .app import Application

logger = logging.getLogger("cacheprobe.web.controller")

FragmentName = Union[str, ActionName, QualifiedAction, Mapping[str, Any]]


class Controller:
    """
    Base Controller class.

    Subclass attributes:
        name:           Controller name used in routes (default: class name
                        without ``Controller``, snake_cased)
        caches_page:    Actions whose output is page cached
        caches_action:  Actions whose output is action cached

    Usage::

        class NewsController(Controller):
            caches_page = ("list",)

            async def list(self):
                return await self.render("news/list.html", items=ITEMS)

            async def create(self):
                ...
                self.expire_page(action="list")
                return Response.redirect("/news/list")
    """

    name: Optional[str] = None
    caches_page: Sequence[str] = ()
    caches_action: Sequence[str] = ()

    def __init__(self, app: "Application", request: Request, path_params: Dict[str, Any]):
        self.app = app
        self.request = request
        self.path_params = dict(path_params)
        self.params: Dict[str, Any] = {**request.query, **self.path_params}
        self.controller_name = self.controller_path()
        self.action_name: Optional[str] = self.path_params.get("action")

    @classmethod
    def controller_path(cls) -> str:
        if cls.name:
            return cls.name
        base = cls.__name__
        if base.endswith("Controller") and base != "Controller":
            base = base[: -len("Controller")]
        return re.sub(r"(?<!^)(?=[A-Z])", "_", base).lower()

    @property
    def perform_caching(self) -> bool:
        return self.app.config.perform_caching

    @property
    def cache_store(self):
        return self.app.cache_store

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def url_for(self, **options: Any) -> str:
        """
        Generate a URL from route options.

        Controller and action default to the current ones; naming another
        controller defaults the action to ``index``. ``only_path`` drops
        scheme and host, ``skip_relative_url_root`` drops the mount point.
        """
        only_path = options.pop("only_path", False)
        skip_root = options.pop("skip_relative_url_root", False)

        controller = options.get("controller")
        if controller is None or str(controller) == self.controller_name:
            options["controller"] = self.controller_name
            if options.get("action") is None:
                options["action"] = self.action_name or "index"
        elif options.get("action") is None:
            options["action"] = "index"

        path = self.app.router.generate(options)
        if not skip_root:
            path = self.app.config.relative_url_root.rstrip("/") + path
        if only_path:
            return path
        return f"http://{self.app.config.host}{path}"

    # ------------------------------------------------------------------
    # Fragment caching
    # ------------------------------------------------------------------

    def fragment_cache_key(self, name: FragmentName) -> str:
        """
        Derive the store key for a fragment.

        A plain string is a free-form fragment name (``views/sidebar``).
        An action reference or option mapping is expanded to a URL for this
        controller (``views/test.host/news/list``).
        """
        namespace = self.app.config.fragment_namespace
        if isinstance(name, str):
            return f"{namespace}/{name}"
        ref = normalize_action(name)
        url = self.url_for(**ref.to_options())
        return f"{namespace}/{url.split('://', 1)[-1]}"

    async def read_fragment(self, name: FragmentName, options: Optional[Dict[str, Any]] = None) -> Any:
        if not self.perform_caching:
            return None
        key = self.fragment_cache_key(name)
        content = await self.cache_store.read(key, options)
        logger.debug(f"Fragment read: {key} ({'hit' if content is not None else 'miss'})")
        return content

    async def write_fragment(self, name: FragmentName, content: Any, options: Optional[Dict[str, Any]] = None) -> Any:
        if not self.perform_caching:
            return content
        key = self.fragment_cache_key(name)
        await self.cache_store.write(key, content, options)
        logger.debug(f"Cached fragment: {key}")
        return content

    async def expire_fragment(
        self,
        name: Union[FragmentName, KeyPattern, "re.Pattern[str]"],
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Expire one fragment, or every fragment whose key matches a pattern.

        Pass a :class:`~cacheprobe.cache.patterns.KeyPattern` or a compiled
        regular expression for the bulk form.
        """
        if not self.perform_caching:
            return
        if isinstance(name, (KeyPattern, re.Pattern)):
            await self.cache_store.delete_matched(name, options)
            logger.debug(f"Expired fragments matching: {name!r}")
            return
        key = self.fragment_cache_key(name)
        await self.cache_store.delete(key, options)
        logger.debug(f"Expired fragment: {key}")

    async def fragment_exist(self, name: FragmentName, options: Optional[Dict[str, Any]] = None) -> bool:
        if not self.perform_caching:
            return False
        return await self.cache_store.exist(self.fragment_cache_key(name), options)

    async def expire_action(self, *targets: Any) -> None:
        """Expire cached actions, e.g. ``expire_action("list", {"action": "show", "id": 1})``."""
        for target in targets:
            await self.expire_fragment(normalize_action(target))

    # ------------------------------------------------------------------
    # Page caching
    # ------------------------------------------------------------------

    def _page_path(self, options: Union[None, str, Mapping[str, Any]]) -> str:
        if isinstance(options, str):
            return options
        if options is None:
            options = self.path_params
        return self.url_for(only_path=True, skip_relative_url_root=True, **dict(options))

    def cache_page(self, content: Union[str, bytes], options: Union[None, str, Mapping[str, Any]] = None) -> None:
        """Page cache *content* under the current path, or under *options*."""
        if not self.perform_caching:
            return
        self.app.page_cache.cache_page(content, self._page_path(options))

    def expire_page(self, options: Union[None, str, Mapping[str, Any]] = None, **route: Any) -> None:
        """Expire a page given as a path, an option mapping, or keyword route options."""
        if not self.perform_caching:
            return
        self.app.page_cache.expire_page(self._page_path(route if options is None and route else options))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    async def render(self, template_name: str, status: int = 200, **context: Any) -> Response:
        html = await self.app.views.render(template_name, context, controller=self)
        return Response.html(html, status=status)

    async def render_string(self, source: str, status: int = 200, **context: Any) -> Response:
        html = await self.app.views.render_string(source, context, controller=self)
        return Response.html(html, status=status)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _action_method(self, action: str):
        if action.startswith("_") or action in _BASE_ATTRIBUTES:
            raise RoutingError(f"{self.controller_name}#{action} is not an action", action=action)
        method = getattr(self, action, None)
        if not callable(method):
            raise RoutingError(f"No action {action!r} on {self.controller_name}", action=action)
        return method

    def _action_cache_ref(self, action: str) -> QualifiedAction:
        extras = tuple(sorted(
            (k, v) for k, v in self.path_params.items() if k not in ("controller", "action")
        ))
        return QualifiedAction(action=action, controller=self.controller_name, params=extras)

    async def process(self, action: str) -> Response:
        """Run *action* with the action and page caching filters applied."""
        method = self._action_method(action)
        self.action_name = action

        action_cached = action in self.caches_action and self.request.is_get
        if action_cached:
            content = await self.read_fragment(self._action_cache_ref(action))
            if content is not None:
                return Response.html(content)

        result = method()
        if inspect.isawaitable(result):
            result = await result
        response = result if isinstance(result, Response) else Response.html(str(result or ""))

        if response.is_success and self.request.is_get:
            if action_cached:
                await self.write_fragment(self._action_cache_ref(action), response.text_body)
            if action in self.caches_page:
                self.cache_page(response.content)
        return response

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.controller_name}#{self.action_name}>"


_BASE_ATTRIBUTES = frozenset(dir(Controller))
