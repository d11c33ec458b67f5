"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest
import pytest_asyncio

from gitprovider.github import new_github_client
from gitprovider.options import ClientOptionsBuilder
from gitprovider.stash import new_stash_client
from tests.helpers.fake_github import FakeGitHub
from tests.helpers.fake_stash import FakeStash

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from gitprovider.github import GitHubClient
    from gitprovider.stash import StashClient


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Return an empty in-memory GitHub."""
    return FakeGitHub()


@pytest.fixture
def fake_stash() -> FakeStash:
    """Return an empty in-memory Bitbucket Server."""
    return FakeStash()


@pytest_asyncio.fixture
async def github_client(
    fake_github: FakeGitHub,
) -> cabc.AsyncIterator[GitHubClient]:
    """Yield a token-authenticated client talking to ``fake_github``."""
    options = ClientOptionsBuilder().with_oauth2_token("test-token").build()
    client = new_github_client(options, base_transport=fake_github.transport())
    try:
        yield client
    finally:
        await client.aclose()


@pytest_asyncio.fixture
async def stash_client(fake_stash: FakeStash) -> cabc.AsyncIterator[StashClient]:
    """Yield a token-authenticated client talking to ``fake_stash``."""
    options = ClientOptionsBuilder().with_oauth2_token("test-token").build()
    client = new_stash_client(options, base_transport=fake_stash.transport())
    try:
        yield client
    finally:
        await client.aclose()
