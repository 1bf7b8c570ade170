"""
Request and Response primitives for the host framework.

Deliberately small: the cache layer only needs method, path, query
parameters and a response body it can store.
"""

from __future__ import annotations

import json as stdlib_json
from typing import Any, Dict, List, Optional, Union
from urllib.parse import parse_qsl


class Request:
    """HTTP request built from an ASGI scope and its fully read body."""

    __slots__ = ("method", "path", "query_string", "headers", "body", "scope")

    def __init__(
        self,
        method: str = "GET",
        path: str = "/",
        query_string: str = "",
        headers: Optional[Dict[str, str]] = None,
        body: bytes = b"",
        scope: Optional[dict] = None,
    ):
        self.method = method.upper()
        self.path = path or "/"
        self.query_string = query_string
        self.headers = headers or {}
        self.body = body
        self.scope = scope or {}

    @classmethod
    async def from_asgi(cls, scope: dict, receive) -> "Request":
        chunks: List[bytes] = []
        while True:
            message = await receive()
            if message["type"] != "http.request":
                break
            chunks.append(message.get("body", b""))
            if not message.get("more_body", False):
                break
        headers = {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in scope.get("headers", [])
        }
        query = scope.get("query_string", b"")
        return cls(
            method=scope.get("method", "GET"),
            path=scope.get("path", "/"),
            query_string=query.decode("latin-1") if isinstance(query, bytes) else query,
            headers=headers,
            body=b"".join(chunks),
            scope=scope,
        )

    @property
    def query(self) -> Dict[str, str]:
        """Query parameters; the last value wins for repeated names."""
        return dict(parse_qsl(self.query_string, keep_blank_values=True))

    @property
    def is_get(self) -> bool:
        return self.method in ("GET", "HEAD")

    def json(self) -> Any:
        return stdlib_json.loads(self.body or b"null")

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.path}>"


class Response:
    """HTTP response with a fully materialized body."""

    def __init__(
        self,
        content: Union[str, bytes] = b"",
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
        media_type: str = "text/html",
    ):
        self.content = content.encode("utf-8") if isinstance(content, str) else content
        self.status = status
        self.headers: Dict[str, str] = dict(headers or {})
        self.headers.setdefault("content-type", f"{media_type}; charset=utf-8")

    @classmethod
    def html(cls, content: str, status: int = 200, **kwargs) -> "Response":
        return cls(content, status=status, media_type="text/html", **kwargs)

    @classmethod
    def text(cls, content: str, status: int = 200, **kwargs) -> "Response":
        return cls(content, status=status, media_type="text/plain", **kwargs)

    @classmethod
    def redirect(cls, location: str, status: int = 302) -> "Response":
        return cls(b"", status=status, headers={"location": location})

    @property
    def text_body(self) -> str:
        return self.content.decode("utf-8")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    async def send(self, send) -> None:
        headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self.headers.items()
        ]
        headers.append((b"content-length", str(len(self.content)).encode("latin-1")))
        await send({"type": "http.response.start", "status": self.status, "headers": headers})
        await send({"type": "http.response.body", "body": self.content})

    def __repr__(self) -> str:
        return f"<Response [{self.status}] {len(self.content)}B>"
