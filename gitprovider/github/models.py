"""Wire types for the GitHub REST API.

Every field is optional so the same struct can describe a full server object,
a partial ``PATCH`` body or a spec projection. Unknown response fields are
ignored on decode.
"""

from __future__ import annotations

import msgspec

from gitprovider.models import (
    DeployKeyInfo,
    OrganizationInfo,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
)

# Fields a create or update request sends; everything else is server status.
REPOSITORY_SPEC_FIELDS = (
    "name",
    "description",
    "homepage",
    "default_branch",
    "visibility",
    "has_issues",
    "has_projects",
    "has_wiki",
    "is_template",
    "allow_squash_merge",
    "allow_merge_commit",
    "allow_rebase_merge",
    "delete_branch_on_merge",
)
KEY_SPEC_FIELDS = ("title", "key", "read_only")
TEAM_ACCESS_SPEC_FIELDS = ("name", "permission")


def normalize_public_key(key: str) -> str:
    """Return an OpenSSH public key reduced to its type and base64 body.

    GitHub stores deploy keys without the trailing comment or newline of a
    ``.pub`` file, so only these two tokens identify the key.
    """
    return " ".join(key.split()[:2])


class Account(msgspec.Struct, kw_only=True, omit_defaults=True):
    """A user or organization as embedded in other objects."""

    login: str | None = None
    id: int | None = None
    type: str | None = None


class Organization(msgspec.Struct, kw_only=True, omit_defaults=True):
    """An organization returned by ``/orgs/{org}`` or ``/user/orgs``."""

    login: str | None = None
    id: int | None = None
    name: str | None = None
    description: str | None = None
    html_url: str | None = None

    def to_info(self) -> OrganizationInfo:
        """Return the provider-neutral view."""
        return OrganizationInfo(name=self.name, description=self.description)


class Team(msgspec.Struct, kw_only=True, omit_defaults=True):
    """A team, optionally carrying its permission on a repository."""

    id: int | None = None
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    permission: str | None = None


class Repository(msgspec.Struct, kw_only=True, omit_defaults=True):
    """A repository."""

    id: int | None = None
    node_id: str | None = None
    name: str | None = None
    full_name: str | None = None
    owner: Account | None = None
    description: str | None = None
    homepage: str | None = None
    private: bool | None = None
    visibility: str | None = None
    default_branch: str | None = None
    has_issues: bool | None = None
    has_projects: bool | None = None
    has_wiki: bool | None = None
    is_template: bool | None = None
    archived: bool | None = None
    allow_squash_merge: bool | None = None
    allow_merge_commit: bool | None = None
    allow_rebase_merge: bool | None = None
    delete_branch_on_merge: bool | None = None
    html_url: str | None = None
    clone_url: str | None = None
    ssh_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None

    def to_info(self) -> RepositoryInfo:
        """Return the provider-neutral view."""
        visibility = None
        if self.visibility in set(RepositoryVisibility):
            visibility = RepositoryVisibility(self.visibility)
        elif self.private is not None:
            visibility = (
                RepositoryVisibility.PRIVATE
                if self.private
                else RepositoryVisibility.PUBLIC
            )
        return RepositoryInfo(
            description=self.description,
            default_branch=self.default_branch,
            visibility=visibility,
        )

    def merge_info(self, info: RepositoryInfo) -> None:
        """Copy the fields ``info`` specifies onto this object."""
        if info.description is not None:
            self.description = info.description
        if info.default_branch is not None:
            self.default_branch = info.default_branch
        if info.visibility is not None:
            self.visibility = str(info.visibility)


class Key(msgspec.Struct, kw_only=True, omit_defaults=True):
    """A deploy key."""

    id: int | None = None
    title: str | None = None
    key: str | None = None
    read_only: bool | None = None
    verified: bool | None = None
    url: str | None = None
    created_at: str | None = None

    def to_info(self) -> DeployKeyInfo:
        """Return the provider-neutral view."""
        return DeployKeyInfo(
            name=self.title or "",
            key=(self.key or "").encode(),
            read_only=self.read_only,
        )

    def merge_info(self, info: DeployKeyInfo) -> None:
        """Copy the fields ``info`` specifies onto this object."""
        self.title = info.name
        self.key = info.key.decode()
        if info.read_only is not None:
            self.read_only = info.read_only


class TeamAccess(msgspec.Struct, kw_only=True, omit_defaults=True):
    """A team's permission on one repository.

    GitHub has no object for this relationship; it is assembled from the
    repository's team listing and keyed by team slug.
    """

    name: str | None = None
    permission: str | None = None

    @classmethod
    def from_team(cls, team: Team) -> TeamAccess:
        """Build from a team listed under ``/repos/{owner}/{repo}/teams``."""
        return cls(name=team.slug or team.name, permission=team.permission)

    def to_info(self) -> TeamAccessInfo:
        """Return the provider-neutral view."""
        permission = None
        if self.permission in set(RepositoryPermission):
            permission = RepositoryPermission(self.permission)
        return TeamAccessInfo(name=self.name or "", permission=permission)

    def merge_info(self, info: TeamAccessInfo) -> None:
        """Copy the fields ``info`` specifies onto this object."""
        self.name = info.name
        if info.permission is not None:
            self.permission = str(info.permission)


__all__ = [
    "KEY_SPEC_FIELDS",
    "REPOSITORY_SPEC_FIELDS",
    "TEAM_ACCESS_SPEC_FIELDS",
    "Account",
    "Key",
    "Organization",
    "Repository",
    "Team",
    "TeamAccess",
    "normalize_public_key",
]
