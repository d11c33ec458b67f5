"""Wire types for the Bitbucket Server REST API (``/rest/api/1.0``).

Field names are camel-cased on the wire. Projects play the role of
organizations; a user's personal project is addressed as ``~<login>``.
"""

from __future__ import annotations

import msgspec

from gitprovider.models import (
    OrganizationInfo,
    RepositoryInfo,
    RepositoryVisibility,
)

REPOSITORY_SPEC_FIELDS = (
    "name",
    "description",
    "public",
    "forkable",
    "default_branch",
)
DEFAULT_SCM_ID = "git"


class Page(msgspec.Struct, kw_only=True, rename="camel"):
    """One page of a paged collection; values are decoded by the caller."""

    values: list[msgspec.Raw] = msgspec.field(default_factory=list)
    is_last_page: bool = True
    next_page_start: int | None = None


class Project(msgspec.Struct, kw_only=True, omit_defaults=True, rename="camel"):
    """A project."""

    id: int | None = None
    key: str | None = None
    name: str | None = None
    description: str | None = None
    public: bool | None = None
    type: str | None = None

    def to_info(self) -> OrganizationInfo:
        """Return the provider-neutral view."""
        return OrganizationInfo(name=self.name, description=self.description)


class Repository(msgspec.Struct, kw_only=True, omit_defaults=True, rename="camel"):
    """A repository."""

    id: int | None = None
    slug: str | None = None
    name: str | None = None
    description: str | None = None
    scm_id: str | None = None
    state: str | None = None
    forkable: bool | None = None
    public: bool | None = None
    default_branch: str | None = None
    project: Project | None = None

    def to_info(self) -> RepositoryInfo:
        """Return the provider-neutral view."""
        visibility = None
        if self.public is not None:
            visibility = (
                RepositoryVisibility.PUBLIC
                if self.public
                else RepositoryVisibility.PRIVATE
            )
        return RepositoryInfo(
            description=self.description,
            default_branch=self.default_branch,
            visibility=visibility,
        )

    def merge_info(self, info: RepositoryInfo) -> None:
        """Copy the fields ``info`` specifies onto this object.

        Bitbucket Server only distinguishes public from non-public
        repositories, so ``internal`` is stored as not public.
        """
        if info.description is not None:
            self.description = info.description
        if info.default_branch is not None:
            self.default_branch = info.default_branch
        if info.visibility is not None:
            self.public = info.visibility == RepositoryVisibility.PUBLIC


__all__ = [
    "DEFAULT_SCM_ID",
    "REPOSITORY_SPEC_FIELDS",
    "Page",
    "Project",
    "Repository",
]
