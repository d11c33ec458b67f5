"""GitHub organizations and their teams."""

from __future__ import annotations

import asyncio
import typing as typ

from gitprovider.errors import NoProviderSupportError
from gitprovider.models import TeamInfo
from gitprovider.refs import OrganizationRef, validate_ref

from .api import PROVIDER_ID

if typ.TYPE_CHECKING:
    from gitprovider.models import OrganizationInfo

    from .api import GitHubAPIClient
    from .models import Account, Organization, Team


class GitHubTeam:
    """A team of a GitHub organization with its members."""

    def __init__(
        self, ref: OrganizationRef, team: Team, members: list[Account]
    ) -> None:
        """Wrap ``team`` of organization ``ref``."""
        self._ref = ref
        self._team = team
        self._members = members

    def get(self) -> TeamInfo:
        """Return the team's name and member logins."""
        return TeamInfo(
            name=self._team.slug or self._team.name or "",
            members=tuple(member.login or "" for member in self._members),
        )

    def api_object(self) -> Team:
        """Return the held wire object."""
        return self._team

    def organization(self) -> OrganizationRef:
        """Return the owning organization's reference."""
        return self._ref


class GitHubTeamsClient:
    """Operations on the teams of one GitHub organization."""

    def __init__(self, api: GitHubAPIClient, ref: OrganizationRef) -> None:
        """Operate on the teams of organization ``ref``."""
        self._api = api
        self._ref = ref

    async def _with_members(self, team: Team) -> GitHubTeam:
        members = await self._api.list_team_members(
            self._ref.organization, team.slug or ""
        )
        return GitHubTeam(self._ref, team, members)

    async def get(self, name: str) -> GitHubTeam:
        """Return the team with slug ``name``.

        Raises
        ------
        NotFoundError
            If the organization has no such team.

        """
        team = await self._api.get_team(self._ref.organization, name)
        return await self._with_members(team)

    async def list(self) -> list[GitHubTeam]:
        """Return every team of the organization, members included."""
        teams = await self._api.list_teams(self._ref.organization)
        return list(await asyncio.gather(*(self._with_members(t) for t in teams)))


class GitHubOrganization:
    """A GitHub organization."""

    def __init__(
        self, api: GitHubAPIClient, ref: OrganizationRef, org: Organization
    ) -> None:
        """Wrap ``org`` addressed by ``ref``."""
        self._api = api
        self._ref = ref
        self._org = org

    def get(self) -> OrganizationInfo:
        """Return the organization's name and description."""
        return self._org.to_info()

    def api_object(self) -> Organization:
        """Return the held wire object."""
        return self._org

    def organization(self) -> OrganizationRef:
        """Return the reference of this organization."""
        return self._ref

    def teams(self) -> GitHubTeamsClient:
        """Return a client for the organization's teams."""
        return GitHubTeamsClient(self._api, self._ref)


class GitHubOrganizationsClient:
    """Operations on GitHub organizations."""

    def __init__(self, api: GitHubAPIClient, domain: str) -> None:
        """Serve references on ``domain``."""
        self._api = api
        self._domain = domain

    async def get(self, ref: OrganizationRef) -> GitHubOrganization:
        """Return the organization named by ``ref``.

        Raises
        ------
        NotFoundError
            If the organization does not exist.
        NoProviderSupportError
            If ``ref`` names a sub-organization.

        """
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        org = await self._api.get_organization(ref.organization)
        return GitHubOrganization(self._api, ref, org)

    async def list(self) -> list[GitHubOrganization]:
        """Return the organizations the authenticated user belongs to."""
        orgs = await self._api.list_organizations()
        return [
            GitHubOrganization(
                self._api,
                OrganizationRef(domain=self._domain, organization=org.login or ""),
                org,
            )
            for org in orgs
        ]

    async def children(
        self,
        ref: OrganizationRef,  # noqa: ARG002
    ) -> list[GitHubOrganization]:
        """GitHub has no sub-organizations.

        Raises
        ------
        NoProviderSupportError
            Always.

        """
        raise NoProviderSupportError.for_operation(PROVIDER_ID, "sub-organizations")


__all__ = [
    "GitHubOrganization",
    "GitHubOrganizationsClient",
    "GitHubTeam",
    "GitHubTeamsClient",
]
