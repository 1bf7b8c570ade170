"""
CacheProbe - Key patterns for bulk deletes.

A bulk delete invalidates every key matching a pattern. Patterns are
explicit value objects with a single ``matches(key)`` contract so the
recorder can answer "was this key swept?" without executing the delete.
"""

from __future__ import annotations

import fnmatch
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Union


class KeyPattern(ABC):
    """Abstract match pattern over cache keys."""

    @abstractmethod
    def matches(self, key: Any) -> bool:
        """Return True if *key* falls under this pattern."""
        ...


@dataclass(frozen=True)
class GlobPattern(KeyPattern):
    """
    Shell-style glob (``views/news/*``).

    ``*`` spans ``/`` as well, so ``views/*`` covers nested fragment keys.
    Matching is case-sensitive on every platform.
    """
    pattern: str

    def matches(self, key: Any) -> bool:
        return fnmatch.fnmatchcase(str(key), self.pattern)

    def __repr__(self) -> str:
        return f"GlobPattern({self.pattern!r})"


@dataclass(frozen=True)
class RegexPattern(KeyPattern):
    """Unanchored regular expression, searched anywhere in the key."""
    pattern: str
    flags: int = 0

    def __post_init__(self):
        # Validate eagerly; the compiled object is cached by ``re``.
        re.compile(self.pattern, self.flags)

    def matches(self, key: Any) -> bool:
        return re.search(self.pattern, str(key), self.flags) is not None

    def __repr__(self) -> str:
        return f"RegexPattern({self.pattern!r})"


PatternLike = Union[KeyPattern, "re.Pattern[str]", str]


def coerce_pattern(value: PatternLike) -> KeyPattern:
    """
    Normalize anything accepted by ``delete_matched`` into a KeyPattern.

    - ``KeyPattern`` is returned as is
    - compiled regular expressions become :class:`RegexPattern`
    - plain strings are globs
    """
    if isinstance(value, KeyPattern):
        return value
    if isinstance(value, re.Pattern):
        # str patterns always carry re.UNICODE once compiled
        return RegexPattern(value.pattern, value.flags & ~re.UNICODE)
    if isinstance(value, str):
        return GlobPattern(value)
    raise TypeError(f"Cannot use {type(value).__name__} as a cache key pattern")
