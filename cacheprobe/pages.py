"""
CacheProbe - Page caching.

``PageCache`` is the host framework's page cache: it turns a request path
into a static file under the public directory and announces every cache
and expire call to its subscribers.

``PageCacheRegistry`` is the subscriber the test harness installs. It keeps
the paths that were cached and the paths that were expired, independent of
any controller instance, until ``reset_cache()``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Protocol, Tuple, Union, runtime_checkable

logger = logging.getLogger("cacheprobe.pages")


@runtime_checkable
class PageCacheObserver(Protocol):
    """Notification points of the page cache lifecycle."""

    def on_page_cached(self, path: str) -> None:
        ...

    def on_page_expired(self, path: str) -> None:
        ...


class PageCache:
    """
    Static page cache.

    Args:
        directory: Root of the public directory pages are written to
        extension: Suffix appended to extension-less paths
        write_files: When False, cache/expire only log and notify
    """

    def __init__(
        self,
        directory: Union[str, Path] = "public",
        extension: str = ".html",
        write_files: bool = True,
    ):
        self.directory = Path(directory)
        self.extension = extension
        self.write_files = write_files
        self._observers: List[PageCacheObserver] = []

    # -- Observers -------------------------------------------------------

    def subscribe(self, observer: PageCacheObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: PageCacheObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def observers(self) -> Tuple[PageCacheObserver, ...]:
        return tuple(self._observers)

    # -- Paths -----------------------------------------------------------

    def page_cache_file(self, path: str) -> str:
        """
        Map a request path to the relative file it is cached in.

        ``/`` becomes ``/index.html``; ``/news/list`` becomes
        ``/news/list.html``; ``/feed.xml`` stays as is.
        """
        name = path.split("?", 1)[0].rstrip("/") or "/index"
        if "." not in name.rsplit("/", 1)[-1]:
            name += self.extension
        return name

    def page_cache_path(self, path: str) -> Path:
        return self.directory / self.page_cache_file(path).lstrip("/")

    # -- Lifecycle -------------------------------------------------------

    def cache_page(self, content: Union[str, bytes], path: str) -> None:
        logger.info(f"Cached page: {self.page_cache_file(path)}")
        if self.write_files:
            target = self.page_cache_path(path)
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        for observer in list(self._observers):
            observer.on_page_cached(path)

    def expire_page(self, path: str) -> None:
        logger.info(f"Expired page: {self.page_cache_file(path)}")
        if self.write_files:
            self.page_cache_path(path).unlink(missing_ok=True)
        for observer in list(self._observers):
            observer.on_page_expired(path)


class PageCacheRegistry:
    """
    Records page cache activity.

    Both sequences are append-only between resets; membership tests are
    plain containment checks, so caching the same path twice is harmless.
    """

    def __init__(self):
        self._cached: List[str] = []
        self._expired: List[str] = []

    # PageCacheObserver
    def on_page_cached(self, path: str) -> None:
        self._cached.append(path)

    def on_page_expired(self, path: str) -> None:
        self._expired.append(path)

    def cached(self, path: str) -> bool:
        return path in self._cached

    def expired(self, path: str) -> bool:
        return path in self._expired

    def reset_cache(self) -> None:
        self._cached.clear()
        self._expired.clear()

    @property
    def cached_paths(self) -> Tuple[str, ...]:
        return tuple(self._cached)

    @property
    def expired_paths(self) -> Tuple[str, ...]:
        return tuple(self._expired)

    # -- Per-controller convenience --------------------------------------

    def cached_for(self, controller: Any, **options: Any) -> bool:
        """Was the page for a route description cached, e.g. ``action="show", id=1``."""
        return self.cached(_canonical_path(controller, options))

    def expired_for(self, controller: Any, **options: Any) -> bool:
        return self.expired(_canonical_path(controller, options))

    def __repr__(self) -> str:
        return f"<PageCacheRegistry cached={len(self._cached)} expired={len(self._expired)}>"


def _canonical_path(controller: Any, options: dict) -> str:
    return controller.url_for(only_path=True, skip_relative_url_root=True, **options)
