"""
CacheProbe Testing - verify cache side effects of request handling.

Components:
    - ProbeContext:             Observed state for one test run
    - CacheAssertions:          The six cache assertions (mixin)
    - CacheProbe:               Assertions bound to an app, for pytest
    - CacheTestCase:            unittest case, one controller under test
    - IntegrationCacheTestCase: unittest case, several controllers
    - TestClient:               In-process ASGI client
"""

from .client import TestClient, TestResponse
from .context import ProbeContext
from .assertions import CacheAssertions, CacheProbe
from .cases import CacheTestCase, IntegrationCacheTestCase
from .utils import make_test_scope, make_test_receive

__all__ = [
    "TestClient",
    "TestResponse",
    "ProbeContext",
    "CacheAssertions",
    "CacheProbe",
    "CacheTestCase",
    "IntegrationCacheTestCase",
    "make_test_scope",
    "make_test_receive",
]
