"""Conditional request caching for the transport chain.

Responses to ``GET`` requests that carry an ``ETag`` or ``Last-Modified``
validator are remembered per URL. Later requests for the same URL are sent
with ``If-None-Match`` / ``If-Modified-Since``; a ``304 Not Modified`` answer
is replaced by the remembered response, marked with ``X-From-Cache: 1``.
Entries are dropped when a non-``GET`` request targets the same URL. There is
no eviction.
"""

from __future__ import annotations

import dataclasses
import http
import typing as typ

import httpx

from .logging import get_logger, log_debug

logger = get_logger(__name__)

FROM_CACHE_HEADER = "X-From-Cache"


@dataclasses.dataclass(frozen=True, slots=True)
class _CachedResponse:
    status_code: int
    headers: list[tuple[bytes, bytes]]
    content: bytes
    etag: str | None
    last_modified: str | None

    def to_response(self, request: httpx.Request) -> httpx.Response:
        response = httpx.Response(
            status_code=self.status_code,
            headers=self.headers,
            content=self.content,
            request=request,
        )
        response.headers[FROM_CACHE_HEADER] = "1"
        return response


class ConditionalRequestTransport(httpx.AsyncBaseTransport):
    """Revalidate cached ``GET`` responses with conditional requests."""

    def __init__(self, inner: httpx.AsyncBaseTransport) -> None:
        """Wrap ``inner`` with an empty cache."""
        self._inner = inner
        self._entries: dict[str, _CachedResponse] = {}

    def __len__(self) -> int:
        """Return the number of cached URLs."""
        return len(self._entries)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Serve ``request``, revalidating against the cache where possible."""
        key = str(request.url)
        if request.method != "GET":
            self._entries.pop(key, None)
            return await self._inner.handle_async_request(request)

        entry = self._entries.get(key)
        if entry is not None:
            if entry.etag and "If-None-Match" not in request.headers:
                request.headers["If-None-Match"] = entry.etag
            if entry.last_modified and "If-Modified-Since" not in request.headers:
                request.headers["If-Modified-Since"] = entry.last_modified

        response = await self._inner.handle_async_request(request)
        if entry is not None and response.status_code == http.HTTPStatus.NOT_MODIFIED:
            await response.aclose()
            log_debug(logger, "[cache.hit] url=%s", key)
            return entry.to_response(request)

        etag = response.headers.get("ETag")
        last_modified = response.headers.get("Last-Modified")
        if response.status_code != http.HTTPStatus.OK or not (etag or last_modified):
            return response

        stream = typ.cast("httpx.AsyncByteStream", response.stream)
        content = b"".join([chunk async for chunk in stream])
        await response.aclose()
        stored = _CachedResponse(
            status_code=response.status_code,
            headers=list(response.headers.raw),
            content=content,
            etag=etag,
            last_modified=last_modified,
        )
        self._entries[key] = stored
        return httpx.Response(
            status_code=stored.status_code,
            headers=stored.headers,
            content=stored.content,
            request=request,
            extensions=response.extensions,
        )

    async def aclose(self) -> None:
        """Drop cached entries and close the wrapped transport."""
        self._entries.clear()
        await self._inner.aclose()


def conditional_requests(inner: httpx.AsyncBaseTransport) -> httpx.AsyncBaseTransport:
    """Chainable transport enabling conditional request caching."""
    return ConditionalRequestTransport(inner)


__all__ = [
    "FROM_CACHE_HEADER",
    "ConditionalRequestTransport",
    "conditional_requests",
]
