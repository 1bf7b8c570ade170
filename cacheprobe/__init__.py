"""
CacheProbe - observe page, action and fragment caching from tests.

A recording cache store and a page cache registry sit between a web
application and its caches. Test assertions reset them, run a block of
request-triggering code, and check by key which entries the block
wrote or deleted.

Usage::

    from cacheprobe.testing import CacheTestCase

    class TestNews(CacheTestCase):
        controller_name = "news"

        def create_app(self):
            return build_app()

        async def test_create_expires_list(self):
            await self.assert_expire_pages(
                "/news/list",
                block=lambda *urls: self.client.post("/news/create"),
            )
"""

__version__ = "0.1.0"

from .config import ConfigError, ConfigLoader, ProbeConfig, load_config
from .faults import (
    CacheAssertionFault,
    Fault,
    FaultDomain,
    MissingBlockFault,
    NoControllerDefinedFault,
    NoRequestInBlockFault,
    ProbeFault,
    ProbeSetupFault,
    RoutingError,
    Severity,
)
from .cache import (
    CacheStore,
    GlobPattern,
    KeyPattern,
    MemoryStore,
    RecordingCacheStore,
    RegexPattern,
    coerce_pattern,
)
from .pages import PageCache, PageCacheObserver, PageCacheRegistry
from .refs import ActionName, QualifiedAction, normalize_action

__all__ = [
    # Config
    "ConfigError",
    "ConfigLoader",
    "ProbeConfig",
    "load_config",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ProbeFault",
    "ProbeSetupFault",
    "NoRequestInBlockFault",
    "MissingBlockFault",
    "NoControllerDefinedFault",
    "CacheAssertionFault",
    "RoutingError",
    # Cache
    "CacheStore",
    "MemoryStore",
    "RecordingCacheStore",
    "KeyPattern",
    "GlobPattern",
    "RegexPattern",
    "coerce_pattern",
    # Pages
    "PageCache",
    "PageCacheObserver",
    "PageCacheRegistry",
    # Action references
    "ActionName",
    "QualifiedAction",
    "normalize_action",
]
