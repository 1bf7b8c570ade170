"""
CacheProbe - Recording cache store.

Wraps a real store, remembers every key written or deleted and every
pattern handed to a bulk delete, so a test can ask afterwards whether a
fragment was cached or expired without looking inside the real store.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from .patterns import KeyPattern, PatternLike, coerce_pattern
from .store import CacheStore, MemoryStore

logger = logging.getLogger("cacheprobe.cache.recorder")


class RecordingCacheStore(CacheStore):
    """
    Spy store.

    ``write`` and ``delete`` are recorded and then forwarded, so real
    caching still happens. ``delete_matched`` is recorded only: the bulk
    delete is observed, never executed against the wrapped store.

    Usage::

        store = RecordingCacheStore(MemoryStore())
        await store.write("home", "<html>")
        assert store.written("home")
        await store.reset()
        assert not store.written("home")
    """

    def __init__(self, wrapped: Optional[CacheStore] = None):
        self._wrapped = wrapped if wrapped is not None else MemoryStore()
        self._written: List[str] = []
        self._deleted: List[str] = []
        self._deleted_matchers: List[KeyPattern] = []

    @property
    def name(self) -> str:
        return f"recording:{self._wrapped.name}"

    @property
    def wrapped(self) -> CacheStore:
        return self._wrapped

    # -- Recorded operations ---------------------------------------------

    async def write(self, key: str, value: Any, options: Optional[Dict[str, Any]] = None) -> None:
        self._written.append(key)
        logger.debug(f"recorded write {key}")
        await self._wrapped.write(key, value, options)

    async def delete(self, key: str, options: Optional[Dict[str, Any]] = None) -> bool:
        self._deleted.append(key)
        logger.debug(f"recorded delete {key}")
        return await self._wrapped.delete(key, options)

    async def delete_matched(self, pattern: PatternLike, options: Optional[Dict[str, Any]] = None) -> int:
        matcher = coerce_pattern(pattern)
        self._deleted_matchers.append(matcher)
        logger.debug(f"recorded delete_matched {matcher!r} (not forwarded)")
        return 0

    # -- Pass-through operations -----------------------------------------

    async def read(self, key: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._wrapped.read(key, options)

    async def exist(self, key: str, options: Optional[Dict[str, Any]] = None) -> bool:
        return await self._wrapped.exist(key, options)

    async def clear(self) -> int:
        return await self._wrapped.clear()

    async def keys(self) -> List[str]:
        return await self._wrapped.keys()

    # -- Observation -----------------------------------------------------

    async def reset(self) -> None:
        """Forget every recorded operation and empty the wrapped store."""
        self._written.clear()
        self._deleted.clear()
        self._deleted_matchers.clear()
        await self._wrapped.clear()

    def written(self, key: str) -> bool:
        return key in self._written

    def deleted(self, key: str) -> bool:
        if key in self._deleted:
            return True
        return any(matcher.matches(key) for matcher in self._deleted_matchers)

    @property
    def written_keys(self) -> Tuple[str, ...]:
        return tuple(self._written)

    @property
    def deleted_keys(self) -> Tuple[str, ...]:
        return tuple(self._deleted)

    @property
    def deleted_matchers(self) -> Tuple[KeyPattern, ...]:
        return tuple(self._deleted_matchers)

    def __repr__(self) -> str:
        return (
            f"<RecordingCacheStore wrapped={self._wrapped.name} "
            f"written={len(self._written)} deleted={len(self._deleted)} "
            f"matchers={len(self._deleted_matchers)}>"
        )
