"""
CacheProbe cache layer - store contract, reference store, key patterns
and the recording spy store.
"""

from .patterns import KeyPattern, GlobPattern, RegexPattern, coerce_pattern
from .store import CacheStore, MemoryStore
from .recorder import RecordingCacheStore

__all__ = [
    "KeyPattern",
    "GlobPattern",
    "RegexPattern",
    "coerce_pattern",
    "CacheStore",
    "MemoryStore",
    "RecordingCacheStore",
]
