"""Provider-neutral desired-state values.

Each ``*Info`` type holds only the fields meaningful to a caller's intent. They
are validated before being merged into a backend wire object and are never
persisted themselves. ``None`` means "not specified": merging an ``Info`` into
a wire object leaves unspecified fields untouched.
"""

from __future__ import annotations

import dataclasses
import enum

from .validation import Validator

DEFAULT_BRANCH = "main"


class RepositoryVisibility(enum.StrEnum):
    """Visibility of a repository."""

    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"


class RepositoryPermission(enum.StrEnum):
    """Access level a team can be granted on a repository."""

    PULL = "pull"
    TRIAGE = "triage"
    PUSH = "push"
    MAINTAIN = "maintain"
    ADMIN = "admin"


@dataclasses.dataclass(frozen=True, slots=True)
class OrganizationInfo:
    """Read-only description of an organization."""

    name: str | None = None
    description: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class TeamInfo:
    """Read-only description of a team and its members."""

    name: str
    members: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True, slots=True)
class RepositoryInfo:
    """Desired configuration of a repository."""

    description: str | None = None
    default_branch: str | None = None
    visibility: RepositoryVisibility | None = None

    def validate(self) -> None:
        """Raise a validation error for unsupported field values."""
        validator = Validator("RepositoryInfo")
        if self.visibility is not None and self.visibility not in set(
            RepositoryVisibility
        ):
            validator.invalid("visibility", self.visibility, *RepositoryVisibility)
        if self.default_branch is not None and not self.default_branch.strip():
            validator.invalid("default_branch", self.default_branch)
        if (err := validator.error()) is not None:
            raise err

    def with_defaults(self) -> RepositoryInfo:
        """Return a copy with unspecified fields set to creation defaults."""
        return dataclasses.replace(
            self,
            default_branch=self.default_branch or DEFAULT_BRANCH,
            visibility=self.visibility or RepositoryVisibility.PRIVATE,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class DeployKeyInfo:
    """Desired configuration of a repository deploy key.

    Attributes
    ----------
    name
        Title of the key; deploy keys are looked up by this name.
    key
        Public key material, e.g. ``b"ssh-ed25519 AAAA..."``.
    read_only
        Whether the key is refused push access. Defaults to ``True`` on
        creation.

    """

    name: str
    key: bytes
    read_only: bool | None = None

    def validate(self) -> None:
        """Raise a validation error when name or key material are missing."""
        validator = Validator("DeployKeyInfo")
        if not self.name:
            validator.required("name")
        if not self.key:
            validator.required("key")
        if (err := validator.error()) is not None:
            raise err

    def with_defaults(self) -> DeployKeyInfo:
        """Return a copy with ``read_only`` defaulted to ``True``."""
        if self.read_only is not None:
            return self
        return dataclasses.replace(self, read_only=True)


@dataclasses.dataclass(frozen=True, slots=True)
class TeamAccessInfo:
    """Desired access of one team to a repository."""

    name: str
    permission: RepositoryPermission | None = None

    def validate(self) -> None:
        """Raise a validation error for a missing name or unknown permission."""
        validator = Validator("TeamAccessInfo")
        if not self.name:
            validator.required("name")
        if self.permission is not None and self.permission not in set(
            RepositoryPermission
        ):
            validator.invalid("permission", self.permission, *RepositoryPermission)
        if (err := validator.error()) is not None:
            raise err

    def with_defaults(self) -> TeamAccessInfo:
        """Return a copy with ``permission`` defaulted to ``pull``."""
        if self.permission is not None:
            return self
        return dataclasses.replace(self, permission=RepositoryPermission.PULL)


__all__ = [
    "DEFAULT_BRANCH",
    "DeployKeyInfo",
    "OrganizationInfo",
    "RepositoryInfo",
    "RepositoryPermission",
    "RepositoryVisibility",
    "TeamAccessInfo",
    "TeamInfo",
]
