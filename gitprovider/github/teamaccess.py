"""Team access to GitHub organization repositories."""

from __future__ import annotations

import typing as typ

from gitprovider.errors import NotFoundError
from gitprovider.reconcile import reconcile_resource
from gitprovider.spec import project_spec

from .models import TEAM_ACCESS_SPEC_FIELDS, TeamAccess

if typ.TYPE_CHECKING:
    from gitprovider.models import TeamAccessInfo
    from gitprovider.refs import OrgRepositoryRef

    from .api import GitHubAPIClient


async def _find_access(
    api: GitHubAPIClient, ref: OrgRepositoryRef, name: str
) -> TeamAccess:
    for team in await api.list_repository_teams(ref.identity, ref.repository_name):
        if name in (team.slug, team.name):
            return TeamAccess.from_team(team)
    raise NotFoundError.named("team access", name)


class GitHubTeamAccess:
    """The access one team has to an organization repository."""

    def __init__(
        self, api: GitHubAPIClient, ref: OrgRepositoryRef, access: TeamAccess
    ) -> None:
        """Wrap ``access`` on repository ``ref``."""
        self._api = api
        self._ref = ref
        self._access = access

    def get(self) -> TeamAccessInfo:
        """Return the access's desired-state view."""
        return self._access.to_info()

    def set(self, info: TeamAccessInfo) -> None:
        """Validate ``info`` and merge it into the held access.

        An access read from the server keeps its team slug, so ``info.name``
        may give the slug or the display name.
        """
        info.validate()
        slug = self._access.name
        self._access.merge_info(info)
        if slug:
            self._access.name = slug

    def api_object(self) -> TeamAccess:
        """Return the held wire object."""
        return self._access

    def repository(self) -> OrgRepositoryRef:
        """Return the repository's reference."""
        return self._ref

    async def update(self) -> None:
        """Grant the held permission and hold the confirmed state."""
        await self.create()

    async def delete(self) -> None:
        """Revoke the team's access to the repository."""
        await self._api.remove_team(
            self._ref.owner.organization,
            self._access.name or "",
            self._ref.identity,
            self._ref.repository_name,
        )

    async def reconcile(self) -> bool:
        """Grant or change the team's permission to match the held state."""
        return await reconcile_resource(self)

    # Reconciliation hooks

    def describe(self) -> str:
        """Return ``owner/repo/teams/name``."""
        return f"{self._ref.slug}/teams/{self._access.name}"

    def desired_object(self) -> TeamAccess:
        """Return the held access."""
        return self._access

    def project_spec(self, obj: TeamAccess) -> TeamAccess:
        """Project ``obj`` onto team name and permission."""
        return project_spec(obj, TEAM_ACCESS_SPEC_FIELDS)

    async def fetch_actual(self) -> TeamAccess:
        """Return the team's current access, if it has any.

        The held name is replaced by the team's slug, which every write
        addresses.
        """
        actual = await _find_access(self._api, self._ref, self._access.name or "")
        self._access.name = actual.name
        return actual

    async def create(self) -> None:
        """Apply the held permission, then hold the server's view of it."""
        name = self._access.name or ""
        await self._api.set_team_permission(
            self._ref.owner.organization,
            name,
            self._ref.identity,
            self._ref.repository_name,
            self._access.permission or "",
        )
        self._access = await _find_access(self._api, self._ref, name)

    async def update_from(self, actual: TeamAccess) -> None:  # noqa: ARG002
        """Overwrite the actual permission with the held one."""
        await self.create()


class GitHubTeamAccessClient:
    """Operations on the teams with access to one organization repository."""

    def __init__(self, api: GitHubAPIClient, ref: OrgRepositoryRef) -> None:
        """Operate on the team access list of repository ``ref``."""
        self._api = api
        self._ref = ref

    async def get(self, name: str) -> GitHubTeamAccess:
        """Return the access of team ``name`` (slug or display name).

        The returned access is keyed by the team's slug.

        Raises
        ------
        NotFoundError
            If the team has no access to the repository.

        """
        access = await _find_access(self._api, self._ref, name)
        return GitHubTeamAccess(self._api, self._ref, access)

    async def list(self) -> list[GitHubTeamAccess]:
        """Return every team with access to the repository."""
        teams = await self._api.list_repository_teams(
            self._ref.identity, self._ref.repository_name
        )
        return [
            GitHubTeamAccess(self._api, self._ref, TeamAccess.from_team(team))
            for team in teams
        ]

    async def create(self, info: TeamAccessInfo) -> GitHubTeamAccess:
        """Grant team ``info.name`` access, ``pull`` unless specified."""
        access = GitHubTeamAccess(self._api, self._ref, _access_from_info(info))
        await access.create()
        return access

    async def reconcile(self, info: TeamAccessInfo) -> tuple[GitHubTeamAccess, bool]:
        """Grant or change the access of team ``info.name`` to match ``info``."""
        access = GitHubTeamAccess(self._api, self._ref, _access_from_info(info))
        changed = await access.reconcile()
        return access, changed


def _access_from_info(info: TeamAccessInfo) -> TeamAccess:
    info.validate()
    access = TeamAccess()
    access.merge_info(info.with_defaults())
    return access


__all__ = ["GitHubTeamAccess", "GitHubTeamAccessClient"]
