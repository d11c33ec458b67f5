"""Unit tests for GitHub deploy keys."""

from __future__ import annotations

import asyncio
import typing as typ

import httpx
import pytest

from gitprovider.errors import AlreadyExistsError, NotFoundError, UnexpectedEventError
from gitprovider.github.api import GitHubAPIClient
from gitprovider.github.deploykeys import GitHubDeployKey
from gitprovider.github.models import Key
from gitprovider.models import DeployKeyInfo
from gitprovider.refs import UserRef, UserRepositoryRef

if typ.TYPE_CHECKING:
    from gitprovider.github import GitHubClient, GitHubDeployKeyClient
    from tests.helpers.fake_github import FakeGitHub

HELLO = UserRepositoryRef(
    owner=UserRef(domain="github.com", user_login="octocat"), repository_name="hello"
)
KEY = b"ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIG9jdG8 ci@example.com"
STORED_KEY = b"ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIG9jdG8"


async def _keys(fake: FakeGitHub, client: GitHubClient) -> GitHubDeployKeyClient:
    fake.add_repo("octocat", "hello")
    repo = await client.user_repositories().get(HELLO)
    return repo.deploy_keys()


@pytest.mark.asyncio
async def test_create_defaults_to_read_only(
    fake_github: FakeGitHub, github_client: GitHubClient
) -> None:
    """Keys are read only unless asked otherwise."""
    keys = await _keys(fake_github, github_client)

    key = await keys.create(DeployKeyInfo(name="ci", key=KEY))

    stored = fake_github.keys["octocat", "hello"]
    assert [(k["title"], k["read_only"]) for k in stored] == [("ci", True)]
    assert key.get() == DeployKeyInfo(name="ci", key=STORED_KEY, read_only=True)
    assert key.repository() is HELLO


@pytest.mark.asyncio
async def test_create_duplicate_key_material(
    fake_github: FakeGitHub, github_client: GitHubClient
) -> None:
    """Registering the same public key twice collides."""
    keys = await _keys(fake_github, github_client)
    fake_github.add_key("octocat", "hello", "old", KEY.decode())

    with pytest.raises(AlreadyExistsError):
        await keys.create(DeployKeyInfo(name="ci", key=KEY))


@pytest.mark.asyncio
async def test_get_finds_keys_by_title(
    fake_github: FakeGitHub, github_client: GitHubClient
) -> None:
    """Lookups match on the key title."""
    keys = await _keys(fake_github, github_client)
    stored = fake_github.add_key(
        "octocat", "hello", "ci", KEY.decode(), read_only=False
    )

    key = await keys.get("ci")

    assert key.api_object().id == stored["id"]
    assert key.get().read_only is False
    with pytest.raises(NotFoundError):
        await keys.get("missing")


@pytest.mark.asyncio
async def test_list_returns_every_key(
    fake_github: FakeGitHub, github_client: GitHubClient
) -> None:
    """All keys of the repository are listed."""
    keys = await _keys(fake_github, github_client)
    fake_github.add_key("octocat", "hello", "ci", "ssh-ed25519 AAAA1")
    fake_github.add_key("octocat", "hello", "deploy", "ssh-ed25519 AAAA2")

    listed = await keys.list()

    assert [key.get().name for key in listed] == ["ci", "deploy"]


@pytest.mark.asyncio
async def test_set_then_update_replaces_the_key(
    fake_github: FakeGitHub, github_client: GitHubClient
) -> None:
    """Updating deletes the old key and creates a new one."""
    keys = await _keys(fake_github, github_client)
    original = fake_github.add_key("octocat", "hello", "ci", KEY.decode())
    key = await keys.get("ci")

    key.set(DeployKeyInfo(name="ci", key=KEY, read_only=False))
    await key.update()

    assert fake_github.calls("DELETE") == [
        f"DELETE /repos/octocat/hello/keys/{original['id']}"
    ]
    stored = fake_github.keys["octocat", "hello"]
    assert [k["read_only"] for k in stored] == [False]
    assert key.api_object().id != original["id"], "Expected the new key's ID."


@pytest.mark.asyncio
async def test_delete(fake_github: FakeGitHub, github_client: GitHubClient) -> None:
    """Deleting removes the key by ID."""
    keys = await _keys(fake_github, github_client)
    fake_github.add_key("octocat", "hello", "ci", KEY.decode())
    key = await keys.get("ci")

    await key.delete()

    assert fake_github.keys["octocat", "hello"] == []


@pytest.mark.asyncio
async def test_reconcile_creates_flips_and_converges(
    fake_github: FakeGitHub, github_client: GitHubClient
) -> None:
    """Reconcile creates, replaces on change and is a no-op when equal."""
    keys = await _keys(fake_github, github_client)

    _, created = await keys.reconcile(DeployKeyInfo(name="ci", key=KEY))
    writable = DeployKeyInfo(name="ci", key=KEY, read_only=False)
    _, flipped = await keys.reconcile(writable)
    writes_before = len(fake_github.calls("POST")) + len(fake_github.calls("DELETE"))
    _, unchanged = await keys.reconcile(writable)
    writes_after = len(fake_github.calls("POST")) + len(fake_github.calls("DELETE"))

    assert (created, flipped, unchanged) == (True, True, False)
    assert writes_before == writes_after == 3
    stored = fake_github.keys["octocat", "hello"]
    assert [(k["title"], k["read_only"]) for k in stored] == [("ci", False)]


@pytest.mark.asyncio
async def test_update_without_server_id(fake_github: FakeGitHub) -> None:
    """A key that was never fetched cannot be replaced."""
    async with httpx.AsyncClient(transport=fake_github.transport()) as http_client:
        api = GitHubAPIClient(http_client)
        key = GitHubDeployKey(api, HELLO, Key(title="ci", key=KEY.decode()))

        with pytest.raises(UnexpectedEventError):
            await key.update()

    assert fake_github.requests == []


@pytest.mark.asyncio
async def test_reconcile_ignores_key_comment(
    fake_github: FakeGitHub, github_client: GitHubClient
) -> None:
    """A key read from a .pub file converges with the stored copy."""
    keys = await _keys(fake_github, github_client)
    info = DeployKeyInfo(name="ci", key=KEY + b"\n")

    _, created = await keys.reconcile(info)
    _, unchanged = await keys.reconcile(info)

    assert (created, unchanged) == (True, False)
    assert fake_github.keys["octocat", "hello"][0]["key"] == STORED_KEY.decode()
    assert len(fake_github.calls("POST")) == 1
    assert fake_github.calls("DELETE") == []


@pytest.mark.asyncio
async def test_cancelled_reconcile_keeps_held_key(fake_github: FakeGitHub) -> None:
    """Cancelling the create leaves the held key untouched."""
    fake_github.add_repo("octocat", "hello")
    started = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            started.set()
            await asyncio.Event().wait()
        return fake_github.handle(request)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as http_client:
        key = GitHubDeployKey(
            GitHubAPIClient(http_client),
            HELLO,
            Key(title="ci", key=KEY.decode(), read_only=True),
        )
        held = key.api_object()
        task = asyncio.create_task(key.reconcile())
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    assert key.api_object() is held
    assert key.api_object().id is None
    assert fake_github.keys.get(("octocat", "hello"), []) == []
