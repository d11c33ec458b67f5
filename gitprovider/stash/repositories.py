"""Bitbucket Server repositories in projects and personal projects."""

from __future__ import annotations

import typing as typ

import msgspec

from gitprovider.errors import NotFoundError
from gitprovider.reconcile import reconcile_against, reconcile_resource
from gitprovider.refs import (
    OrgRepositoryRef,
    UserRef,
    UserRepositoryRef,
    validate_ref,
)
from gitprovider.spec import project_spec

from .api import PROVIDER_ID, user_project_key
from .models import REPOSITORY_SPEC_FIELDS, Repository
from .unsupported import StashDeployKeyClient, StashTeamAccessClient

if typ.TYPE_CHECKING:
    from gitprovider.models import RepositoryInfo
    from gitprovider.refs import OrganizationRef, RepositoryRef

    from .api import StashAPIClient


def project_key(ref: RepositoryRef | OrganizationRef | UserRef) -> str:
    """Return the key of the project holding ``ref``'s repositories."""
    owner = ref.owner if isinstance(ref, OrgRepositoryRef | UserRepositoryRef) else ref
    if isinstance(owner, UserRef):
        return user_project_key(owner.user_login)
    return owner.organization


class StashUserRepository:
    """A repository held together with the client that fetched it."""

    def __init__(
        self, api: StashAPIClient, ref: RepositoryRef, repo: Repository
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

    def deploy_keys(self) -> StashDeployKeyClient:
        """Return the deploy keys client, which raises ``NoProviderSupportError``."""
        return StashDeployKeyClient(self._ref)

    async def update(self) -> None:
        """Apply the held spec fields and hold the server's response."""
        self._repo = await self._api.update_repository(
            project_key(self._ref), self._slug(), self._repo
        )

    async def delete(self) -> None:
        """Delete the repository; requires destructive API calls."""
        await self._api.delete_repository(project_key(self._ref), self._slug())

    async def reconcile(self) -> bool:
        """Create or update the repository so it matches the held state."""
        return await reconcile_resource(self)

    def _slug(self) -> str:
        return self._repo.slug or self._ref.repository_name

    # Reconciliation hooks

    def describe(self) -> str:
        """Return ``project/slug``."""
        return f"{project_key(self._ref)}/{self._ref.repository_name}"

    def desired_object(self) -> Repository:
        """Return the held repository."""
        return self._repo

    def project_spec(self, obj: Repository) -> Repository:
        """Project ``obj`` onto the fields an update request sends."""
        return project_spec(obj, REPOSITORY_SPEC_FIELDS)

    async def fetch_actual(self) -> Repository:
        """Return the repository as currently stored on the server."""
        return await self._api.get_repository(project_key(self._ref), self._slug())

    async def create(self) -> None:
        """Create the repository and hold the server's response."""
        self._repo = await self._api.create_repository(
            project_key(self._ref), self._repo
        )

    async def update_from(self, actual: Repository) -> None:  # noqa: ARG002
        """Apply the held spec fields over ``actual``."""
        await self.update()


class StashOrgRepository:
    """A project repository; team access is not supported."""

    def __init__(
        self, api: StashAPIClient, ref: OrgRepositoryRef, repo: Repository
    ) -> None:
        """Wrap ``repo`` addressed by ``ref``."""
        self._repository = StashUserRepository(api, ref, repo)
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

    def deploy_keys(self) -> StashDeployKeyClient:
        """Return the deploy keys client, which raises ``NoProviderSupportError``."""
        return self._repository.deploy_keys()

    def team_access(self) -> StashTeamAccessClient:
        """Return the team access client, which raises ``NoProviderSupportError``."""
        return StashTeamAccessClient(self._ref)

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


async def _desired_repository(
    api: StashAPIClient, ref: RepositoryRef, info: RepositoryInfo
) -> tuple[Repository, Repository | None]:
    info.validate()
    try:
        actual = await api.get_repository(project_key(ref), ref.repository_name)
    except NotFoundError:
        return _repository_from_info(ref.repository_name, info), None
    desired = msgspec.structs.replace(actual)
    desired.merge_info(info)
    return desired, actual


class StashOrgRepositoriesClient:
    """Operations on repositories in Bitbucket Server projects."""

    def __init__(self, api: StashAPIClient, domain: str) -> None:
        """Serve references on ``domain``."""
        self._api = api
        self._domain = domain

    async def get(self, ref: OrgRepositoryRef) -> StashOrgRepository:
        """Return the repository named by ``ref``."""
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        repo = await self._api.get_repository(project_key(ref), ref.repository_name)
        return StashOrgRepository(self._api, ref, repo)

    async def list(self, ref: OrganizationRef) -> list[StashOrgRepository]:
        """Return every repository of project ``ref``."""
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        repos = await self._api.list_repositories(project_key(ref))
        return [
            StashOrgRepository(
                self._api,
                OrgRepositoryRef(owner=ref, repository_name=repo.slug or ""),
                repo,
            )
            for repo in repos
        ]

    async def create(
        self, ref: OrgRepositoryRef, info: RepositoryInfo
    ) -> StashOrgRepository:
        """Create a repository, private unless ``info`` says otherwise.

        Raises
        ------
        AlreadyExistsError
            If the project already has a repository of that name.

        """
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        created = StashUserRepository(
            self._api, ref, _repository_from_info(ref.repository_name, info)
        )
        await created.create()
        return StashOrgRepository(self._api, ref, created.api_object())

    async def reconcile(
        self, ref: OrgRepositoryRef, info: RepositoryInfo
    ) -> tuple[StashOrgRepository, bool]:
        """Create the repository, or update the fields ``info`` specifies."""
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        desired, actual = await _desired_repository(self._api, ref, info)
        repository = StashUserRepository(self._api, ref, desired)
        changed = await reconcile_against(repository, actual)
        return StashOrgRepository(self._api, ref, repository.api_object()), changed


class StashUserRepositoriesClient:
    """Operations on repositories in personal projects."""

    def __init__(self, api: StashAPIClient, domain: str) -> None:
        """Serve references on ``domain``."""
        self._api = api
        self._domain = domain

    async def get(self, ref: UserRepositoryRef) -> StashUserRepository:
        """Return the repository named by ``ref``."""
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        repo = await self._api.get_repository(project_key(ref), ref.repository_name)
        return StashUserRepository(self._api, ref, repo)

    async def list(self, ref: UserRef) -> list[StashUserRepository]:
        """Return every repository in the personal project of ``ref``."""
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        repos = await self._api.list_repositories(project_key(ref))
        return [
            StashUserRepository(
                self._api,
                UserRepositoryRef(owner=ref, repository_name=repo.slug or ""),
                repo,
            )
            for repo in repos
        ]

    async def create(
        self, ref: UserRepositoryRef, info: RepositoryInfo
    ) -> StashUserRepository:
        """Create a repository in the personal project of ``ref.owner``."""
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        repository = StashUserRepository(
            self._api, ref, _repository_from_info(ref.repository_name, info)
        )
        await repository.create()
        return repository

    async def reconcile(
        self, ref: UserRepositoryRef, info: RepositoryInfo
    ) -> tuple[StashUserRepository, bool]:
        """Create the repository, or update the fields ``info`` specifies."""
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        desired, actual = await _desired_repository(self._api, ref, info)
        repository = StashUserRepository(self._api, ref, desired)
        changed = await reconcile_against(repository, actual)
        return repository, changed


__all__ = [
    "StashOrgRepositoriesClient",
    "StashOrgRepository",
    "StashUserRepositoriesClient",
    "StashUserRepository",
    "project_key",
]
