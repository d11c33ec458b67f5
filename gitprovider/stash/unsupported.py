"""Capabilities Bitbucket Server does not offer through this library.

The clients below exist so callers can reach them through the same
interfaces as on other backends and detect the missing feature by catching
``NoProviderSupportError``.
"""

from __future__ import annotations

import typing as typ

from gitprovider.errors import NoProviderSupportError

from .api import PROVIDER_ID

if typ.TYPE_CHECKING:
    from gitprovider.models import DeployKeyInfo, TeamAccessInfo
    from gitprovider.protocol import DeployKey, Team, TeamAccess
    from gitprovider.refs import OrganizationRef, RepositoryRef


def _unsupported(operation: str) -> NoProviderSupportError:
    return NoProviderSupportError.for_operation(PROVIDER_ID, operation)


class StashDeployKeyClient:
    """Deploy keys; every operation raises ``NoProviderSupportError``."""

    def __init__(self, ref: RepositoryRef) -> None:
        """Bind to repository ``ref``."""
        self._ref = ref

    async def get(self, name: str) -> DeployKey:  # noqa: ARG002
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("deploy keys")

    async def list(self) -> list[DeployKey]:
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("deploy keys")

    async def create(self, info: DeployKeyInfo) -> DeployKey:  # noqa: ARG002
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("deploy keys")

    async def reconcile(
        self,
        info: DeployKeyInfo,  # noqa: ARG002
    ) -> tuple[DeployKey, bool]:
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("deploy keys")


class StashTeamAccessClient:
    """Team access; every operation raises ``NoProviderSupportError``."""

    def __init__(self, ref: RepositoryRef) -> None:
        """Bind to repository ``ref``."""
        self._ref = ref

    async def get(self, name: str) -> TeamAccess:  # noqa: ARG002
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("team access")

    async def list(self) -> list[TeamAccess]:
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("team access")

    async def create(self, info: TeamAccessInfo) -> TeamAccess:  # noqa: ARG002
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("team access")

    async def reconcile(
        self,
        info: TeamAccessInfo,  # noqa: ARG002
    ) -> tuple[TeamAccess, bool]:
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("team access")


class StashTeamsClient:
    """Project teams; every operation raises ``NoProviderSupportError``."""

    def __init__(self, ref: OrganizationRef) -> None:
        """Bind to project ``ref``."""
        self._ref = ref

    async def get(self, name: str) -> Team:  # noqa: ARG002
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("teams")

    async def list(self) -> list[Team]:
        """Raise ``NoProviderSupportError``."""
        raise _unsupported("teams")


__all__ = ["StashDeployKeyClient", "StashTeamAccessClient", "StashTeamsClient"]
