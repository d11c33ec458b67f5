"""Bitbucket Server projects exposed as organizations."""

from __future__ import annotations

import typing as typ

from gitprovider.errors import NoProviderSupportError
from gitprovider.refs import OrganizationRef, validate_ref

from .api import PROVIDER_ID
from .unsupported import StashTeamsClient

if typ.TYPE_CHECKING:
    from gitprovider.models import OrganizationInfo

    from .api import StashAPIClient
    from .models import Project


class StashProject:
    """A project, addressed by its key."""

    def __init__(self, ref: OrganizationRef, project: Project) -> None:
        """Wrap ``project`` addressed by ``ref``."""
        self._ref = ref
        self._project = project

    def get(self) -> OrganizationInfo:
        """Return the project's name and description."""
        return self._project.to_info()

    def api_object(self) -> Project:
        """Return the held wire object."""
        return self._project

    def organization(self) -> OrganizationRef:
        """Return the reference of this project."""
        return self._ref

    def teams(self) -> StashTeamsClient:
        """Return the teams client, which raises ``NoProviderSupportError``."""
        return StashTeamsClient(self._ref)


class StashOrganizationsClient:
    """Operations on Bitbucket Server projects."""

    def __init__(self, api: StashAPIClient, domain: str) -> None:
        """Serve references on ``domain``."""
        self._api = api
        self._domain = domain

    async def get(self, ref: OrganizationRef) -> StashProject:
        """Return the project whose key is ``ref.organization``.

        Raises
        ------
        NotFoundError
            If no such project exists.

        """
        validate_ref(ref, self._domain, provider=PROVIDER_ID)
        project = await self._api.get_project(ref.organization)
        return StashProject(ref, project)

    async def list(self) -> list[StashProject]:
        """Return every project visible to the caller."""
        projects = await self._api.list_projects()
        return [
            StashProject(
                OrganizationRef(domain=self._domain, organization=project.key or ""),
                project,
            )
            for project in projects
        ]

    async def children(
        self,
        ref: OrganizationRef,  # noqa: ARG002
    ) -> list[StashProject]:
        """Projects do not nest; always raises ``NoProviderSupportError``."""
        raise NoProviderSupportError.for_operation(PROVIDER_ID, "sub-organizations")


__all__ = ["StashOrganizationsClient", "StashProject"]
