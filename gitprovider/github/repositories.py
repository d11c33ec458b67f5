"""GitHub repositories owned by users and organizations.

An organization repository is a user repository plus team access control: it
composes a :class:`GitHubUserRepository` and delegates every shared operation
to it.
"""

from __future__ import annotations

import typing as typ

import msgspec

from gitprovider.errors import NotFoundError
from gitprovider.reconcile import reconcile_against, reconcile_resource
from gitprovider.refs import OrgRepositoryRef, UserRepositoryRef, validate_ref
from gitprovider.spec import project_spec

from .api import PROVIDER_ID
from .deploykeys import GitHubDeployKeyClient
from .models import REPOSITORY_SPEC_FIELDS, Repository
from .teamaccess import GitHubTeamAccessClient

if typ.TYPE_CHECKING:
    from gitprovider.models import RepositoryInfo
    from gitprovider.refs import OrganizationRef, RepositoryRef, UserRef

    from .api import GitHubAPIClient


class GitHubUserRepository:
    """A repository held together with the client that fetched it."""

    def __init__(
        self, api: GitHubAPIClient, ref: RepositoryRef, repo: Repository
    ) -> None:
        """Wrap ``repo`` addressed by ``ref``."""
        self._api = api
        self._ref = ref
        self._repo = repo

    def get(self) -> RepositoryInfo:
        """Return the repository's desired-state view."""
        return self._repo.to_info()

    def set(self, info: RepositoryInfo) -> None:
        """Validate ``info`` and merge its specified fields into the held object."""
        info.validate()
        self._repo.merge_info(info)

    def api_object(self) -> Repository:
        """Return the held wire object."""
        return self._repo

    def repository(self) -> RepositoryRef:
        """Return the reference of this repository."""
        return self._ref

    def deploy_keys(self) -> GitHubDeployKeyClient:
        """Return a client for the repository's deploy keys."""
        return GitHubDeployKeyClient(self._api, self._ref)

    async def update(self) -> None:
        """Apply the held spec fields and hold the server's response.

        Raises
        ------
        NotFoundError
            If the repository does not exist.

        """
        self._repo = await self._api.update_repository(
            self._ref.identity, self._ref.repository_name, self._repo
        )

    async def delete(self) -> None:
        """Delete the repository and all of its data.

        Raises
        ------
        DestructiveCallDisallowedError
            Unless the client was built with destructive API calls enabled.

        """
        await self._api.delete_repository(
            self._ref.identity, self._ref.repository_name
        )

    async def reconcile(self) -> bool:
        """Create or update the repository so it matches the held state."""
        return await reconcile_resource(self)

    # Reconciliation hooks

    def describe(self) -> str:
        """Return the repository slug."""
        return self._ref.slug

    def desired_object(self) -> Repository:
        """Return the held repository."""
        return self._repo

    def project_spec(self, obj: Repository) -> Repository:
        """Project ``obj`` onto the fields a create or update request sends."""
        return project_spec(obj, REPOSITORY_SPEC_FIELDS)

    async def fetch_actual(self) -> Repository:
        """Return the repository as currently stored on the server."""
        return await self._api.get_repository(
            self._ref.identity, self._ref.repository_name
        )

    async def create(self) -> None:
        """Create the repository and hold the server's response."""
        org = None
        if isinstance(self._ref, OrgRepositoryRef):
            org = self._ref.owner.organization
        self._repo = await self._api.create_repository(self._repo, org=org)

    async def update_from(self, actual: Repository) -> None:  # noqa: ARG002
        """Apply the held spec fields over ``actual``."""
        await self.update()


class GitHubOrgRepository:
    """An organization repository with team access control."""

    def __init__(
        self, api: GitHubAPIClient, ref: OrgRepositoryRef, repo: Repository
    ) -> None:
        """Wrap ``repo`` addressed by ``ref``."""
        self._repository = GitHubUserRepository(api, ref, repo)
        self._team_access = GitHubTeamAccessClient(api, ref)
        self._ref = ref

    def get(self) -> RepositoryInfo:
        """Return the repository's desired-state view."""
        return self._repository.get()

    def set(self, info: RepositoryInfo) -> None:
        """Validate ``info`` and merge its specified fields into the held object."""
        self._repository.set(info)

    def api_object(self) -> Repository:
        """Return the held wire object."""
        return self._repository.api_object()

    def repository(self) -> OrgRepositoryRef:
        """Return the reference of this repository."""
        return self._ref

    def deploy_keys(self) -> GitHubDeployKeyClient:
        """Return a client for the repository's deploy keys."""
        return self._repository.deploy_keys()

    def team_access(self) -> GitHubTeamAccessClient:
        """Return a client for the teams with access to this repository."""
        return self._team_access

    async def update(self) -> None:
        """Apply the held spec fields and hold the server's response."""
        await self._repository.update()

    async def delete(self) -> None:
        """Delete the repository; requires destructive API calls."""
        await self._repository.delete()

    async def reconcile(self) -> bool:
        """Create or update the repository so it matches the held state."""
        return await self._repository.reconcile()


def _repository_from_info(name: str, info: RepositoryInfo) -> Repository:
    info.validate()
    repo = Repository(name=name)
    repo.merge_info(info.with_defaults())
    return repo


class GitHubOrgRepositoriesClient:
    """Operations on repositories owned by GitHub organizations."""

    def __init__(self, api: GitHubAPIClient, domain: str) -> None:
        """Serve references on ``domain``."""
        self._api = api
        self._domain = domain

    def _validate(self, ref: OrgRepositoryRef | OrganizationRef) -> None:
        validate_ref(ref, self._domain, provider=PROVIDER_ID)

    async def get(self, ref: OrgRepositoryRef) -> GitHubOrgRepository:
        """Return the repository named by ``ref``.

        Raises
        ------
        NotFoundError
            If the repository does not exist or is not visible.

        """
        self._validate(ref)
        repo = await self._api.get_repository(ref.identity, ref.repository_name)
        return GitHubOrgRepository(self._api, ref, repo)

    async def list(self, ref: OrganizationRef) -> list[GitHubOrgRepository]:
        """Return every repository of organization ``ref``."""
        self._validate(ref)
        repos = await self._api.list_org_repositories(ref.organization)
        return [
            GitHubOrgRepository(
                self._api,
                OrgRepositoryRef(owner=ref, repository_name=repo.name or ""),
                repo,
            )
            for repo in repos
        ]

    async def create(
        self, ref: OrgRepositoryRef, info: RepositoryInfo
    ) -> GitHubOrgRepository:
        """Create a repository, private with branch ``main`` unless specified.

        Raises
        ------
        AlreadyExistsError
            If the organization already has a repository of that name.

        """
        self._validate(ref)
        created = GitHubUserRepository(
            self._api, ref, _repository_from_info(ref.repository_name, info)
        )
        await created.create()
        return GitHubOrgRepository(self._api, ref, created.api_object())

    async def reconcile(
        self, ref: OrgRepositoryRef, info: RepositoryInfo
    ) -> tuple[GitHubOrgRepository, bool]:
        """Create the repository, or update the fields ``info`` specifies."""
        self._validate(ref)
        desired, actual = await _desired_repository(self._api, ref, info)
        repository = GitHubUserRepository(self._api, ref, desired)
        changed = await reconcile_against(repository, actual)
        return GitHubOrgRepository(self._api, ref, repository.api_object()), changed


class GitHubUserRepositoriesClient:
    """Operations on repositories owned by GitHub users."""

    def __init__(self, api: GitHubAPIClient, domain: str) -> None:
        """Serve references on ``domain``."""
        self._api = api
        self._domain = domain

    def _validate(self, ref: UserRepositoryRef | UserRef) -> None:
        validate_ref(ref, self._domain, provider=PROVIDER_ID)

    async def get(self, ref: UserRepositoryRef) -> GitHubUserRepository:
        """Return the repository named by ``ref``."""
        self._validate(ref)
        repo = await self._api.get_repository(ref.identity, ref.repository_name)
        return GitHubUserRepository(self._api, ref, repo)

    async def list(self, ref: UserRef) -> list[GitHubUserRepository]:
        """Return every repository owned by user ``ref``."""
        self._validate(ref)
        repos = await self._api.list_user_repositories(ref.user_login)
        return [
            GitHubUserRepository(
                self._api,
                UserRepositoryRef(owner=ref, repository_name=repo.name or ""),
                repo,
            )
            for repo in repos
        ]

    async def create(
        self, ref: UserRepositoryRef, info: RepositoryInfo
    ) -> GitHubUserRepository:
        """Create a repository for the authenticated user.

        GitHub only creates user repositories for the account owning the
        token, so ``ref`` should name that account.
        """
        self._validate(ref)
        repository = GitHubUserRepository(
            self._api, ref, _repository_from_info(ref.repository_name, info)
        )
        await repository.create()
        return repository

    async def reconcile(
        self, ref: UserRepositoryRef, info: RepositoryInfo
    ) -> tuple[GitHubUserRepository, bool]:
        """Create the repository, or update the fields ``info`` specifies."""
        self._validate(ref)
        desired, actual = await _desired_repository(self._api, ref, info)
        repository = GitHubUserRepository(self._api, ref, desired)
        changed = await reconcile_against(repository, actual)
        return repository, changed


async def _desired_repository(
    api: GitHubAPIClient, ref: RepositoryRef, info: RepositoryInfo
) -> tuple[Repository, Repository | None]:
    """Return the state ``info`` asks for and the server's current object.

    An existing repository keeps every field ``info`` leaves unspecified, so
    only the specified fields can trigger an update. A missing one gets the
    creation defaults and ``None`` as its current object.
    """
    info.validate()
    try:
        actual = await api.get_repository(ref.identity, ref.repository_name)
    except NotFoundError:
        return _repository_from_info(ref.repository_name, info), None
    desired = msgspec.structs.replace(actual)
    desired.merge_info(info)
    return desired, actual


__all__ = [
    "GitHubOrgRepositoriesClient",
    "GitHubOrgRepository",
    "GitHubUserRepositoriesClient",
    "GitHubUserRepository",
]
