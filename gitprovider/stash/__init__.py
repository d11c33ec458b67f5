"""Bitbucket Server (formerly Stash) backend."""

from __future__ import annotations

from .api import STASH_DOMAIN, StashAPIClient
from .client import StashClient, new_stash_client
from .organizations import StashOrganizationsClient, StashProject
from .repositories import (
    StashOrgRepositoriesClient,
    StashOrgRepository,
    StashUserRepositoriesClient,
    StashUserRepository,
)
from .unsupported import StashDeployKeyClient, StashTeamAccessClient, StashTeamsClient

__all__ = [
    "STASH_DOMAIN",
    "StashAPIClient",
    "StashClient",
    "StashDeployKeyClient",
    "StashOrgRepositoriesClient",
    "StashOrgRepository",
    "StashOrganizationsClient",
    "StashProject",
    "StashTeamAccessClient",
    "StashTeamsClient",
    "StashUserRepositoriesClient",
    "StashUserRepository",
    "new_stash_client",
]
