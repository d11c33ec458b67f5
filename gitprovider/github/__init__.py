"""GitHub and GitHub Enterprise Server backend."""

from __future__ import annotations

from .api import GITHUB_DOMAIN, GitHubAPIClient
from .client import GitHubClient, new_github_client
from .deploykeys import GitHubDeployKey, GitHubDeployKeyClient
from .organizations import (
    GitHubOrganization,
    GitHubOrganizationsClient,
    GitHubTeam,
    GitHubTeamsClient,
)
from .repositories import (
    GitHubOrgRepositoriesClient,
    GitHubOrgRepository,
    GitHubUserRepositoriesClient,
    GitHubUserRepository,
)
from .teamaccess import GitHubTeamAccess, GitHubTeamAccessClient

__all__ = [
    "GITHUB_DOMAIN",
    "GitHubAPIClient",
    "GitHubClient",
    "GitHubDeployKey",
    "GitHubDeployKeyClient",
    "GitHubOrgRepositoriesClient",
    "GitHubOrgRepository",
    "GitHubOrganization",
    "GitHubOrganizationsClient",
    "GitHubTeam",
    "GitHubTeamAccess",
    "GitHubTeamAccessClient",
    "GitHubTeamsClient",
    "GitHubUserRepositoriesClient",
    "GitHubUserRepository",
    "new_github_client",
]
