"""Caller-facing interfaces shared by every backend.

Backends implement these protocols structurally. Resource objects expose the
same surface for every resource type:

- ``get()`` returns the provider-neutral ``Info`` view of the held object;
- ``set(info)`` validates ``info`` and merges it into the held object;
- ``api_object()`` returns the live wire object for fields not covered by
  ``Info`` (changes made through it bypass spec/status separation);
- ``update()``, ``delete()`` and ``reconcile()`` talk to the backend.

Capabilities a backend lacks raise ``NoProviderSupportError``.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import httpx

    from .models import (
        DeployKeyInfo,
        OrganizationInfo,
        RepositoryInfo,
        TeamAccessInfo,
        TeamInfo,
    )
    from .refs import (
        OrganizationRef,
        OrgRepositoryRef,
        RepositoryRef,
        UserRef,
        UserRepositoryRef,
    )


class Organization(typ.Protocol):
    """An organization and its teams."""

    def get(self) -> OrganizationInfo:
        """Return the organization's description."""
        ...

    def api_object(self) -> object:
        """Return the backend-native organization object."""
        ...

    def organization(self) -> OrganizationRef:
        """Return the reference this organization was resolved from."""
        ...

    def teams(self) -> TeamsClient:
        """Return a client for the organization's teams."""
        ...


class Team(typ.Protocol):
    """A team of an organization."""

    def get(self) -> TeamInfo:
        """Return the team's name and members."""
        ...

    def api_object(self) -> object:
        """Return the backend-native team object."""
        ...

    def organization(self) -> OrganizationRef:
        """Return the owning organization's reference."""
        ...


class DeployKey(typ.Protocol):
    """A deploy key of a repository."""

    def get(self) -> DeployKeyInfo:
        """Return the key's desired-state view."""
        ...

    def set(self, info: DeployKeyInfo) -> None:
        """Validate ``info`` and merge it into the held object."""
        ...

    def api_object(self) -> object:
        """Return the backend-native key object."""
        ...

    def repository(self) -> RepositoryRef:
        """Return the reference of the owning repository."""
        ...

    async def update(self) -> None:
        """Apply the held state to the backend."""
        ...

    async def delete(self) -> None:
        """Remove the key from the repository."""
        ...

    async def reconcile(self) -> bool:
        """Converge the backend to the held state."""
        ...


class TeamAccess(typ.Protocol):
    """The access of one team to a repository."""

    def get(self) -> TeamAccessInfo:
        """Return the team access's desired-state view."""
        ...

    def set(self, info: TeamAccessInfo) -> None:
        """Validate ``info`` and merge it into the held object."""
        ...

    def api_object(self) -> object:
        """Return the backend-native team access object."""
        ...

    def repository(self) -> RepositoryRef:
        """Return the reference of the repository."""
        ...

    async def update(self) -> None:
        """Apply the held state to the backend."""
        ...

    async def delete(self) -> None:
        """Revoke the team's access."""
        ...

    async def reconcile(self) -> bool:
        """Converge the backend to the held state."""
        ...


class UserRepository(typ.Protocol):
    """A repository and its deploy keys."""

    def get(self) -> RepositoryInfo:
        """Return the repository's desired-state view."""
        ...

    def set(self, info: RepositoryInfo) -> None:
        """Validate ``info`` and merge it into the held object."""
        ...

    def api_object(self) -> object:
        """Return the backend-native repository object."""
        ...

    def repository(self) -> RepositoryRef:
        """Return the reference of this repository."""
        ...

    def deploy_keys(self) -> DeployKeyClient:
        """Return a client for the repository's deploy keys."""
        ...

    async def update(self) -> None:
        """Apply the held state to the backend."""
        ...

    async def delete(self) -> None:
        """Delete the repository irreversibly."""
        ...

    async def reconcile(self) -> bool:
        """Converge the backend to the held state."""
        ...


class OrgRepository(UserRepository, typ.Protocol):
    """A repository owned by an organization, with team access control."""

    def team_access(self) -> TeamAccessClient:
        """Return a client for the teams with access to this repository."""
        ...


class OrganizationsClient(typ.Protocol):
    """Operations on organizations."""

    async def get(self, ref: OrganizationRef) -> Organization:
        """Return the organization named by ``ref``."""
        ...

    async def list(self) -> list[Organization]:
        """Return every organization visible to the caller."""
        ...

    async def children(self, ref: OrganizationRef) -> list[Organization]:
        """Return the sub-organizations of ``ref``."""
        ...


class TeamsClient(typ.Protocol):
    """Operations on the teams of one organization."""

    async def get(self, name: str) -> Team:
        """Return the team called ``name``."""
        ...

    async def list(self) -> list[Team]:
        """Return every team of the organization."""
        ...


class OrgRepositoriesClient(typ.Protocol):
    """Operations on organization repositories."""

    async def get(self, ref: OrgRepositoryRef) -> OrgRepository:
        """Return the repository named by ``ref``."""
        ...

    async def list(self, ref: OrganizationRef) -> list[OrgRepository]:
        """Return every repository of the organization."""
        ...

    async def create(
        self, ref: OrgRepositoryRef, info: RepositoryInfo
    ) -> OrgRepository:
        """Create a repository."""
        ...

    async def reconcile(
        self, ref: OrgRepositoryRef, info: RepositoryInfo
    ) -> tuple[OrgRepository, bool]:
        """Create or update a repository to match ``info``."""
        ...


class UserRepositoriesClient(typ.Protocol):
    """Operations on user repositories."""

    async def get(self, ref: UserRepositoryRef) -> UserRepository:
        """Return the repository named by ``ref``."""
        ...

    async def list(self, ref: UserRef) -> list[UserRepository]:
        """Return every repository of the user."""
        ...

    async def create(
        self, ref: UserRepositoryRef, info: RepositoryInfo
    ) -> UserRepository:
        """Create a repository."""
        ...

    async def reconcile(
        self, ref: UserRepositoryRef, info: RepositoryInfo
    ) -> tuple[UserRepository, bool]:
        """Create or update a repository to match ``info``."""
        ...


class DeployKeyClient(typ.Protocol):
    """Operations on the deploy keys of one repository."""

    async def get(self, name: str) -> DeployKey:
        """Return the key titled ``name``."""
        ...

    async def list(self) -> list[DeployKey]:
        """Return every deploy key of the repository."""
        ...

    async def create(self, info: DeployKeyInfo) -> DeployKey:
        """Create a deploy key."""
        ...

    async def reconcile(self, info: DeployKeyInfo) -> tuple[DeployKey, bool]:
        """Create or replace a deploy key to match ``info``."""
        ...


class TeamAccessClient(typ.Protocol):
    """Operations on the team access list of one repository."""

    async def get(self, name: str) -> TeamAccess:
        """Return the access of team ``name``."""
        ...

    async def list(self) -> list[TeamAccess]:
        """Return every team with access to the repository."""
        ...

    async def create(self, info: TeamAccessInfo) -> TeamAccess:
        """Grant a team access."""
        ...

    async def reconcile(self, info: TeamAccessInfo) -> tuple[TeamAccess, bool]:
        """Grant or change a team's access to match ``info``."""
        ...


class Client(typ.Protocol):
    """Entry point to one backend instance."""

    def supported_domain(self) -> str:
        """Return the domain references must use."""
        ...

    def provider_id(self) -> str:
        """Return the backend's identifier, e.g. ``"github"``."""
        ...

    def raw_client(self) -> httpx.AsyncClient:
        """Return the HTTP client built from the transport chain."""
        ...

    def organizations(self) -> OrganizationsClient:
        """Return the organizations client."""
        ...

    def org_repositories(self) -> OrgRepositoriesClient:
        """Return the organization repositories client."""
        ...

    def user_repositories(self) -> UserRepositoriesClient:
        """Return the user repositories client."""
        ...

    async def aclose(self) -> None:
        """Release owned HTTP resources."""
        ...


__all__ = [
    "Client",
    "DeployKey",
    "DeployKeyClient",
    "OrgRepositoriesClient",
    "OrgRepository",
    "Organization",
    "OrganizationsClient",
    "Team",
    "TeamAccess",
    "TeamAccessClient",
    "TeamsClient",
    "UserRepositoriesClient",
    "UserRepository",
]
