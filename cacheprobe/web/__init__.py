"""
CacheProbe host framework - the minimal web layer the cache probe observes:
routing, per-request controllers with fragment/action/page caching,
Jinja2 views and an ASGI application.
"""

from .http import Request, Response
from .routing import Route, Router
from .controller import Controller
from .views import FragmentCacheExtension, ViewRenderer
from .app import Application

__all__ = [
    "Request",
    "Response",
    "Route",
    "Router",
    "Controller",
    "FragmentCacheExtension",
    "ViewRenderer",
    "Application",
]
