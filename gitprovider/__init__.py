"""Provider-agnostic access to Git hosting services.

Callers describe organizations, repositories, deploy keys and team access
with provider-neutral ``Info`` values and references, and reconcile them
against GitHub or Bitbucket Server through the same interfaces.
"""

from __future__ import annotations

from .errors import (
    AlreadyExistsError,
    DestructiveCallDisallowedError,
    DomainUnsupportedError,
    GitProviderError,
    HTTPError,
    InvalidArgumentError,
    InvalidClientOptionsError,
    InvalidCredentialsError,
    InvalidServerDataError,
    NoProviderSupportError,
    NotFoundError,
    UnexpectedEventError,
    ValidationError,
)
from .logging import configure_logging
from .models import (
    DeployKeyInfo,
    OrganizationInfo,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
    TeamInfo,
)
from .options import ClientOptions, ClientOptionsBuilder
from .refs import (
    CloneTransport,
    IdentityType,
    OrganizationRef,
    OrgRepositoryRef,
    UserRef,
    UserRepositoryRef,
    parse_org_repository_url,
    parse_organization_url,
    parse_user_repository_url,
    parse_user_url,
)

__all__ = [
    "AlreadyExistsError",
    "ClientOptions",
    "ClientOptionsBuilder",
    "CloneTransport",
    "DeployKeyInfo",
    "DestructiveCallDisallowedError",
    "DomainUnsupportedError",
    "GitProviderError",
    "HTTPError",
    "IdentityType",
    "InvalidArgumentError",
    "InvalidClientOptionsError",
    "InvalidCredentialsError",
    "InvalidServerDataError",
    "NoProviderSupportError",
    "NotFoundError",
    "OrgRepositoryRef",
    "OrganizationInfo",
    "OrganizationRef",
    "RepositoryInfo",
    "RepositoryPermission",
    "RepositoryVisibility",
    "TeamAccessInfo",
    "TeamInfo",
    "UnexpectedEventError",
    "UserRef",
    "UserRepositoryRef",
    "ValidationError",
    "configure_logging",
    "parse_org_repository_url",
    "parse_organization_url",
    "parse_user_repository_url",
    "parse_user_url",
]
