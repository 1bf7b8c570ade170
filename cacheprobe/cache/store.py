"""
CacheProbe - Fragment/object cache store contract.

Defines the storage capability the host framework writes fragments and
action output through, plus the in-memory reference store used when no
other backend is configured.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .patterns import PatternLike, coerce_pattern

logger = logging.getLogger("cacheprobe.cache.store")


class CacheStore(ABC):
    """
    Abstract cache store.

    Keys are opaque strings derived by the controller. ``options`` is
    passed through untouched so backends may honour expiry hints.
    """

    @abstractmethod
    async def read(self, key: str, options: Optional[Dict[str, Any]] = None) -> Any:
        """Return the stored value, or None on a miss."""
        ...

    @abstractmethod
    async def write(self, key: str, value: Any, options: Optional[Dict[str, Any]] = None) -> None:
        """Store *value* under *key*."""
        ...

    @abstractmethod
    async def delete(self, key: str, options: Optional[Dict[str, Any]] = None) -> bool:
        """
        Delete entry by key.

        Returns True if the key existed.
        """
        ...

    @abstractmethod
    async def delete_matched(self, pattern: PatternLike, options: Optional[Dict[str, Any]] = None) -> int:
        """
        Delete every key matching *pattern*.

        Returns number of entries deleted.
        """
        ...

    @abstractmethod
    async def clear(self) -> int:
        """Drop all entries. Returns number of entries cleared."""
        ...

    @abstractmethod
    async def keys(self) -> List[str]:
        """List stored keys."""
        ...

    async def exist(self, key: str, options: Optional[Dict[str, Any]] = None) -> bool:
        """Check if key is present."""
        return await self.read(key, options) is not None

    @property
    def name(self) -> str:
        """Store name for diagnostics."""
        return self.__class__.__name__


class MemoryStore(CacheStore):
    """
    Dict-backed store.

    Single event loop, no eviction, no TTL. Good enough to back fragment
    caching in tests and small deployments.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}

    @property
    def name(self) -> str:
        return "memory"

    @property
    def data(self) -> Dict[str, Any]:
        """Direct access to the underlying dict for assertions."""
        return self._data

    async def read(self, key: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._data.get(key)

    async def write(self, key: str, value: Any, options: Optional[Dict[str, Any]] = None) -> None:
        logger.debug(f"write {key}")
        self._data[key] = value

    async def delete(self, key: str, options: Optional[Dict[str, Any]] = None) -> bool:
        logger.debug(f"delete {key}")
        if key not in self._data:
            return False
        del self._data[key]
        return True

    async def delete_matched(self, pattern: PatternLike, options: Optional[Dict[str, Any]] = None) -> int:
        matcher = coerce_pattern(pattern)
        doomed = [key for key in self._data if matcher.matches(key)]
        for key in doomed:
            del self._data[key]
        logger.debug(f"delete_matched {matcher!r} removed {len(doomed)} entries")
        return len(doomed)

    async def clear(self) -> int:
        count = len(self._data)
        self._data.clear()
        return count

    async def keys(self) -> List[str]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)
