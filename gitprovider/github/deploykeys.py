"""Deploy keys of GitHub repositories.

GitHub deploy keys cannot be edited in place, so updating a key deletes it
and creates it again from the held state. Keys are identified by title.
"""

from __future__ import annotations

import typing as typ

from gitprovider.errors import NotFoundError, UnexpectedEventError
from gitprovider.reconcile import reconcile_resource
from gitprovider.spec import project_spec

from .models import KEY_SPEC_FIELDS, Key, normalize_public_key

if typ.TYPE_CHECKING:
    from gitprovider.models import DeployKeyInfo
    from gitprovider.refs import RepositoryRef

    from .api import GitHubAPIClient


class GitHubDeployKey:
    """A deploy key held together with the client that fetched it."""

    def __init__(self, api: GitHubAPIClient, ref: RepositoryRef, key: Key) -> None:
        """Wrap ``key`` of repository ``ref``."""
        self._api = api
        self._ref = ref
        self._key = key

    def get(self) -> DeployKeyInfo:
        """Return the key's desired-state view."""
        return self._key.to_info()

    def set(self, info: DeployKeyInfo) -> None:
        """Validate ``info`` and merge it into the held key."""
        info.validate()
        self._key.merge_info(info)

    def api_object(self) -> Key:
        """Return the held wire object."""
        return self._key

    def repository(self) -> RepositoryRef:
        """Return the owning repository's reference."""
        return self._ref

    async def update(self) -> None:
        """Replace the key on the server with the held state.

        Raises
        ------
        UnexpectedEventError
            If the held key has no server ID.
        NotFoundError
            If the key no longer exists.

        """
        await self._delete_by_id(self._key.id)
        await self.create()

    async def delete(self) -> None:
        """Remove the key from the repository."""
        await self._delete_by_id(self._key.id)

    async def reconcile(self) -> bool:
        """Create or replace the key so the server matches the held state."""
        return await reconcile_resource(self)

    async def _delete_by_id(self, key_id: int | None) -> None:
        if key_id is None:
            msg = f"deploy key {self._key.title!r} has no ID"
            raise UnexpectedEventError(msg)
        await self._api.delete_key(
            self._ref.identity, self._ref.repository_name, key_id
        )

    # Reconciliation hooks

    def describe(self) -> str:
        """Return ``owner/repo/keys/title``."""
        return f"{self._ref.slug}/keys/{self._key.title}"

    def desired_object(self) -> Key:
        """Return the held key."""
        return self._key

    def project_spec(self, obj: Key) -> Key:
        """Project ``obj`` onto title, key material and read-only flag.

        Key material is compared without its comment, which GitHub drops.
        """
        spec = project_spec(obj, KEY_SPEC_FIELDS)
        if spec.key is not None:
            spec.key = normalize_public_key(spec.key)
        return spec

    async def fetch_actual(self) -> Key:
        """Return the server's key with the held title."""
        return await _find_key(self._api, self._ref, self._key.title or "")

    async def create(self) -> None:
        """Create the key and hold the server's response."""
        self._key = await self._api.create_key(
            self._ref.identity, self._ref.repository_name, self._key
        )

    async def update_from(self, actual: Key) -> None:
        """Delete ``actual`` and recreate it from the held state."""
        await self._delete_by_id(actual.id)
        await self.create()


async def _find_key(api: GitHubAPIClient, ref: RepositoryRef, name: str) -> Key:
    for key in await api.list_keys(ref.identity, ref.repository_name):
        if key.title == name:
            return key
    raise NotFoundError.named("deploy key", name)


class GitHubDeployKeyClient:
    """Operations on the deploy keys of one GitHub repository."""

    def __init__(self, api: GitHubAPIClient, ref: RepositoryRef) -> None:
        """Operate on the keys of repository ``ref``."""
        self._api = api
        self._ref = ref

    async def get(self, name: str) -> GitHubDeployKey:
        """Return the key titled ``name``.

        GitHub has no lookup by title, so the repository's keys are listed
        and searched.

        Raises
        ------
        NotFoundError
            If no key has that title.

        """
        key = await _find_key(self._api, self._ref, name)
        return GitHubDeployKey(self._api, self._ref, key)

    async def list(self) -> list[GitHubDeployKey]:
        """Return every deploy key of the repository."""
        keys = await self._api.list_keys(self._ref.identity, self._ref.repository_name)
        return [GitHubDeployKey(self._api, self._ref, key) for key in keys]

    async def create(self, info: DeployKeyInfo) -> GitHubDeployKey:
        """Create a deploy key, read-only unless ``info`` says otherwise.

        Raises
        ------
        AlreadyExistsError
            If the key material is already registered.

        """
        deploy_key = GitHubDeployKey(self._api, self._ref, _key_from_info(info))
        await deploy_key.create()
        return deploy_key

    async def reconcile(self, info: DeployKeyInfo) -> tuple[GitHubDeployKey, bool]:
        """Create or replace the key titled ``info.name`` to match ``info``."""
        deploy_key = GitHubDeployKey(self._api, self._ref, _key_from_info(info))
        changed = await deploy_key.reconcile()
        return deploy_key, changed


def _key_from_info(info: DeployKeyInfo) -> Key:
    info.validate()
    key = Key()
    key.merge_info(info.with_defaults())
    return key


__all__ = ["GitHubDeployKey", "GitHubDeployKeyClient"]
