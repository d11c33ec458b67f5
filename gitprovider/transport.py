"""Composition of HTTP transport middleware.

A *chainable transport* is a callable that receives the transport beneath it
and returns a transport wrapping it. Clients are built from an ordered chain
whose first entry sits directly on top of the default network transport::

    pre-chain hook -> authentication -> conditional requests -> post-chain hook

so the post-chain hook sees every request first and the pre-chain hook sees it
last before it reaches the network. The resulting :class:`httpx.AsyncClient`
is built once and shared by every call of a provider client; its connection
pool is safe for concurrent use.
"""

from __future__ import annotations

import enum
import typing as typ

import httpx

from .errors import InvalidClientOptionsError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

type ChainableTransport = cabc.Callable[
    [httpx.AsyncBaseTransport], httpx.AsyncBaseTransport
]


class TokenType(enum.StrEnum):
    """How an access token is presented to the backend."""

    OAUTH2 = "oauth2"
    PRIVATE = "private"


class TokenAuthTransport(httpx.AsyncBaseTransport):
    """Add an access token to every request before delegating."""

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        token: str,
        *,
        token_type: TokenType = TokenType.OAUTH2,
    ) -> None:
        """Wrap ``inner`` with ``token`` presented according to ``token_type``."""
        if not token:
            raise InvalidClientOptionsError.empty("token")
        self._inner = inner
        self._token = token
        self._token_type = token_type

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Attach the credential header and forward ``request``."""
        if self._token_type is TokenType.PRIVATE:
            request.headers["Private-Token"] = self._token
        else:
            request.headers["Authorization"] = f"Bearer {self._token}"
        return await self._inner.handle_async_request(request)

    async def aclose(self) -> None:
        """Close the wrapped transport."""
        await self._inner.aclose()


def token_auth(
    token: str, *, token_type: TokenType = TokenType.OAUTH2
) -> ChainableTransport:
    """Return a chainable transport authenticating with ``token``."""
    if not token:
        raise InvalidClientOptionsError.empty("token")

    def _wrap(inner: httpx.AsyncBaseTransport) -> httpx.AsyncBaseTransport:
        return TokenAuthTransport(inner, token, token_type=token_type)

    return _wrap


def build_transport_chain(
    chain: cabc.Sequence[ChainableTransport],
    *,
    base: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncBaseTransport:
    """Compose ``chain`` on top of ``base``.

    Parameters
    ----------
    chain
        Chainable transports, innermost first. An empty chain yields ``base``
        itself.
    base
        Transport performing network I/O. Defaults to a new
        :class:`httpx.AsyncHTTPTransport`.

    Returns
    -------
    httpx.AsyncBaseTransport
        The outermost transport of the chain.

    Raises
    ------
    InvalidClientOptionsError
        If a chain entry does not return a transport.

    """
    transport: httpx.AsyncBaseTransport = base or httpx.AsyncHTTPTransport()
    for position, wrap in enumerate(chain):
        wrapped = wrap(transport)
        if not isinstance(wrapped, httpx.AsyncBaseTransport):
            msg = f"transport chain entry {position} did not return a transport"
            raise InvalidClientOptionsError(msg)
        transport = wrapped
    return transport


def build_client_from_transport_chain(
    chain: cabc.Sequence[ChainableTransport],
    *,
    base: httpx.AsyncBaseTransport | None = None,
    **client_kwargs: typ.Any,  # noqa: ANN401
) -> httpx.AsyncClient:
    """Return an :class:`httpx.AsyncClient` sending through ``chain``."""
    return httpx.AsyncClient(
        transport=build_transport_chain(chain, base=base), **client_kwargs
    )


__all__ = [
    "ChainableTransport",
    "TokenAuthTransport",
    "TokenType",
    "build_client_from_transport_chain",
    "build_transport_chain",
    "token_auth",
]
