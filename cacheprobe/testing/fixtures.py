"""
CacheProbe Testing - Pytest fixtures.

Import the fixtures into your ``conftest.py``::

    from cacheprobe.testing.fixtures import (  # noqa: F401
        recording_store,
        page_registry,
        probe_context,
        cache_probe,
    )

``cache_probe`` needs an ``app`` fixture returning the
:class:`~cacheprobe.web.app.Application` under test.
"""

from __future__ import annotations

import pytest

from ..cache.recorder import RecordingCacheStore
from ..cache.store import MemoryStore
from ..pages import PageCacheRegistry
from .assertions import CacheProbe
from .context import ProbeContext


def cacheprobe_fixtures():
    """
    Register the fixtures below by importing this module.

    Call it in ``conftest.py`` so the import is not flagged as unused::

        from cacheprobe.testing.fixtures import cacheprobe_fixtures
        cacheprobe_fixtures()
    """
    pass


@pytest.fixture
def recording_store():
    """A :class:`RecordingCacheStore` wrapping a fresh :class:`MemoryStore`."""
    return RecordingCacheStore(MemoryStore())


@pytest.fixture
def page_registry():
    """An empty :class:`PageCacheRegistry`."""
    registry = PageCacheRegistry()
    yield registry
    registry.reset_cache()


@pytest.fixture
def probe_context():
    """A :class:`ProbeContext` not yet installed into any application."""
    context = ProbeContext()
    yield context
    context.uninstall()


@pytest.fixture
def cache_probe(app):
    """
    A :class:`CacheProbe` installed into the ``app`` fixture.

    Usage::

        @pytest.mark.asyncio
        async def test_about_is_cached(cache_probe):
            await cache_probe.assert_cache_pages("/about")
    """
    probe = CacheProbe(app)
    yield probe
    probe.close()


@pytest.fixture
def integration_probe(app):
    """Like ``cache_probe`` but targets must name their controller."""
    probe = CacheProbe(app, integration=True)
    yield probe
    probe.close()
