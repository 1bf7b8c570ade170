"""
Application - ASGI entry point of the host framework.

Owns the shared collaborators every controller reaches for: config,
router, fragment cache store, page cache and view renderer. Anything that
wants to observe request handling (the test harness, instrumentation)
registers a dispatch listener and is handed each controller instance
before its action runs.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, Union

from ..cache.store import CacheStore, MemoryStore
from ..config import ProbeConfig
from ..faults import RoutingError
from ..pages import PageCache
from .controller import Controller
from .http import Request, Response
from .routing import Router
from .views import ViewRenderer

logger = logging.getLogger("cacheprobe.web.app")

DispatchListener = Callable[[Controller], Any]


class Application:
    """
    Host application.

    Args:
        controllers: Controller classes to register
        config: Caching configuration (default: :class:`ProbeConfig`)
        router: Route table (default: the ``/:controller/:action/:id`` route)
        cache_store: Fragment/action cache store (default: :class:`MemoryStore`)
        page_cache: Page cache (default: built from config)
        templates: In-memory templates for :class:`ViewRenderer`
        template_dir: Template directory for :class:`ViewRenderer`

    Usage::

        app = Application([NewsController], templates={"news/list.html": "..."})
        # serve with any ASGI server, or drive with cacheprobe.testing.TestClient
    """

    def __init__(
        self,
        controllers: Iterable[Type[Controller]] = (),
        *,
        config: Optional[ProbeConfig] = None,
        router: Optional[Router] = None,
        cache_store: Optional[CacheStore] = None,
        page_cache: Optional[PageCache] = None,
        templates: Optional[Dict[str, str]] = None,
        template_dir: Optional[Union[str, Path]] = None,
    ):
        self.config = config or ProbeConfig()
        logging.getLogger("cacheprobe").setLevel(self.config.log_level.upper())
        self.router = router or Router.with_default_route()
        self.cache_store: CacheStore = cache_store or MemoryStore()
        self.page_cache = page_cache or PageCache(
            self.config.page_cache_directory,
            self.config.page_cache_extension,
        )
        self.views = ViewRenderer(templates=templates, directory=template_dir)
        self._controllers: Dict[str, Type[Controller]] = {}
        self._dispatch_listeners: List[DispatchListener] = []
        for controller_cls in controllers:
            self.register(controller_cls)

    # -- Registration ----------------------------------------------------

    def register(self, controller_cls: Type[Controller]) -> Type[Controller]:
        self._controllers[controller_cls.controller_path()] = controller_cls
        return controller_cls

    @property
    def controllers(self) -> Dict[str, Type[Controller]]:
        return dict(self._controllers)

    def add_dispatch_listener(self, listener: DispatchListener) -> None:
        if listener not in self._dispatch_listeners:
            self._dispatch_listeners.append(listener)

    def remove_dispatch_listener(self, listener: DispatchListener) -> None:
        if listener in self._dispatch_listeners:
            self._dispatch_listeners.remove(listener)

    # -- Request handling ------------------------------------------------

    async def handle(self, request: Request) -> Response:
        try:
            params = self.router.recognize(request.path)
        except RoutingError as fault:
            logger.debug(f"{request.method} {request.path} -> 404 ({fault.message})")
            return Response.text("Not Found", status=404)

        controller_cls = self._controllers.get(params["controller"])
        if controller_cls is None:
            logger.debug(f"{request.method} {request.path} -> 404 (no controller {params['controller']!r})")
            return Response.text("Not Found", status=404)

        controller = controller_cls(self, request, params)
        for listener in list(self._dispatch_listeners):
            listener(controller)

        logger.debug(f"{request.method} {request.path} -> {controller.controller_name}#{params['action']}")
        try:
            return await controller.process(params["action"])
        except RoutingError as fault:
            logger.debug(f"{request.method} {request.path} -> 404 ({fault.message})")
            return Response.text("Not Found", status=404)

    async def __call__(self, scope: dict, receive, send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        if scope["type"] != "http":
            raise RuntimeError(f"Unsupported ASGI scope type {scope['type']!r}")

        request = await Request.from_asgi(scope, receive)
        response = await self.handle(request)
        await response.send(send)

    async def _lifespan(self, receive, send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
