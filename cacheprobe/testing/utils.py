"""
CacheProbe Testing - ASGI factories.

Builds scopes and receive callables for driving an application in
process.
"""

from __future__ import annotations

from typing import List, Optional


def make_test_scope(
    method: str = "GET",
    path: str = "/",
    query_string: str = "",
    headers: Optional[List[tuple]] = None,
    scheme: str = "http",
    server: Optional[tuple] = None,
    root_path: str = "",
) -> dict:
    """
    Build a minimal ASGI HTTP scope for testing.

    Args:
        method: HTTP method.
        path: Request path (a ``?query`` suffix is split off).
        query_string: Raw query string (without ``?``).
        headers: List of ``(name, value)`` tuples (strings or bytes).
        scheme: URL scheme.
        server: ``(host, port)`` tuple.
        root_path: ASGI root path.
    """
    if "?" in path and not query_string:
        path, query_string = path.split("?", 1)

    raw_headers: list[tuple[bytes, bytes]] = []
    if headers:
        for name, value in headers:
            raw_headers.append((
                name.encode("latin-1") if isinstance(name, str) else name,
                value.encode("latin-1") if isinstance(value, str) else value,
            ))

    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method.upper(),
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": query_string.encode("utf-8"),
        "headers": raw_headers,
        "scheme": scheme,
        "server": server or ("test.host", 80),
        "client": ("127.0.0.1", 12345),
        "root_path": root_path,
    }


def make_test_receive(body: bytes = b""):
    """Create an ASGI receive callable delivering *body* in one message."""
    messages = [{"type": "http.request", "body": body, "more_body": False}]
    idx = 0

    async def receive():
        nonlocal idx
        if idx < len(messages):
            msg = messages[idx]
            idx += 1
            return msg
        return {"type": "http.disconnect"}

    return receive
