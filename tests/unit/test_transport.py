"""Unit tests for transport middleware composition."""

from __future__ import annotations

import httpx
import pytest

from gitprovider.errors import InvalidClientOptionsError
from gitprovider.transport import (
    ChainableTransport,
    TokenType,
    build_client_from_transport_chain,
    build_transport_chain,
    token_auth,
)


class _Recorder(httpx.AsyncBaseTransport):
    """Append a marker header then forward to the wrapped transport."""

    def __init__(self, inner: httpx.AsyncBaseTransport, name: str) -> None:
        self._inner = inner
        self._name = name

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        seen = request.headers.get("X-Chain", "")
        request.headers["X-Chain"] = f"{seen},{self._name}".lstrip(",")
        return await self._inner.handle_async_request(request)


def _recorder(name: str) -> ChainableTransport:
    return lambda inner: _Recorder(inner, name)


def _echo_headers(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=dict(request.headers))


@pytest.mark.asyncio
async def test_outermost_entry_sees_the_request_first() -> None:
    """Chains are listed innermost first."""
    client = build_client_from_transport_chain(
        [_recorder("inner"), _recorder("outer")],
        base=httpx.MockTransport(_echo_headers),
    )
    async with client:
        response = await client.get("https://example.com/")

    assert response.json()["x-chain"] == "outer,inner"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("token_type", "header", "value"),
    [
        (TokenType.OAUTH2, "authorization", "Bearer s3cret"),
        (TokenType.PRIVATE, "private-token", "s3cret"),
    ],
)
async def test_token_auth_sets_the_credential_header(
    token_type: TokenType, header: str, value: str
) -> None:
    """Each token type uses its own header."""
    client = build_client_from_transport_chain(
        [token_auth("s3cret", token_type=token_type)],
        base=httpx.MockTransport(_echo_headers),
    )
    async with client:
        response = await client.get("https://example.com/")

    assert response.json()[header] == value


def test_token_auth_rejects_empty_tokens() -> None:
    """An empty token is a configuration error."""
    with pytest.raises(InvalidClientOptionsError):
        token_auth("")


def test_empty_chain_returns_the_base_transport() -> None:
    """Nothing wraps the base when no middleware is configured."""
    base = httpx.MockTransport(_echo_headers)

    assert build_transport_chain([], base=base) is base


def test_chain_entries_must_return_transports() -> None:
    """A misbehaving hook is reported at build time."""
    with pytest.raises(InvalidClientOptionsError):
        build_transport_chain(
            [lambda _inner: None],  # type: ignore[list-item, return-value]
            base=httpx.MockTransport(_echo_headers),
        )
