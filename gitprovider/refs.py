"""References identifying organizations, users and repositories.

A reference names a remote entity by domain, identity and (for repositories)
repository name. References are immutable and never carry server state; every
resource wrapper borrows the reference it was built from.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ
import urllib.parse

from .errors import (
    DomainUnsupportedError,
    InvalidArgumentError,
    NoProviderSupportError,
)
from .validation import Validator

_HTTP_SCHEMES = frozenset({"http", "https"})
_GIT_SUFFIX = ".git"


class IdentityType(enum.StrEnum):
    """Kinds of identity that can own repositories."""

    ORGANIZATION = "organization"
    SUBORGANIZATION = "suborganization"
    USER = "user"


class CloneTransport(enum.StrEnum):
    """Transports for which a clone URL can be rendered."""

    HTTPS = "https"
    GIT = "git"
    SSH = "ssh"


@dataclasses.dataclass(frozen=True, slots=True)
class OrganizationRef:
    """Reference to an organization, optionally nested in parent groups."""

    domain: str
    organization: str
    sub_organizations: tuple[str, ...] = ()

    @property
    def identity(self) -> str:
        """Return the top-level organization name."""
        return self.organization

    @property
    def identity_type(self) -> IdentityType:
        """Return the kind of identity this reference points to."""
        if self.sub_organizations:
            return IdentityType.SUBORGANIZATION
        return IdentityType.ORGANIZATION

    @property
    def path(self) -> str:
        """Return the slash-joined organization path."""
        return "/".join((self.organization, *self.sub_organizations))

    def url(self) -> str:
        """Return the HTTPS URL of the organization."""
        return f"https://{self.domain}/{self.path}"

    def validate(self) -> None:
        """Raise a validation error when required fields are empty."""
        validator = Validator("OrganizationRef")
        if not self.domain:
            validator.required("domain")
        if not self.organization:
            validator.required("organization")
        if any(not part for part in self.sub_organizations):
            validator.invalid("sub_organizations", self.sub_organizations)
        if (err := validator.error()) is not None:
            raise err


@dataclasses.dataclass(frozen=True, slots=True)
class UserRef:
    """Reference to a user account."""

    domain: str
    user_login: str

    @property
    def identity(self) -> str:
        """Return the user login."""
        return self.user_login

    @property
    def identity_type(self) -> IdentityType:
        """Return :attr:`IdentityType.USER`."""
        return IdentityType.USER

    @property
    def path(self) -> str:
        """Return the user login as a URL path."""
        return self.user_login

    def url(self) -> str:
        """Return the HTTPS URL of the user profile."""
        return f"https://{self.domain}/{self.user_login}"

    def validate(self) -> None:
        """Raise a validation error when required fields are empty."""
        validator = Validator("UserRef")
        if not self.domain:
            validator.required("domain")
        if not self.user_login:
            validator.required("user_login")
        if (err := validator.error()) is not None:
            raise err


IdentityRef = OrganizationRef | UserRef


class _RepositoryRefMixin:
    """Shared behaviour of organization and user repository references."""

    __slots__ = ()

    owner: IdentityRef
    repository_name: str

    @property
    def domain(self) -> str:
        """Return the owner's domain."""
        return self.owner.domain

    @property
    def identity(self) -> str:
        """Return the owner's identity."""
        return self.owner.identity

    @property
    def identity_type(self) -> IdentityType:
        """Return the owner's identity type."""
        return self.owner.identity_type

    @property
    def slug(self) -> str:
        """Return ``owner/name`` for the repository."""
        return f"{self.owner.path}/{self.repository_name}"

    def url(self) -> str:
        """Return the HTTPS URL of the repository."""
        return f"{self.owner.url()}/{self.repository_name}"

    def clone_url(self, transport: CloneTransport = CloneTransport.HTTPS) -> str:
        """Return a clone URL for ``transport``."""
        match transport:
            case CloneTransport.HTTPS:
                return f"{self.url()}{_GIT_SUFFIX}"
            case CloneTransport.GIT:
                return f"git@{self.domain}:{self.slug}{_GIT_SUFFIX}"
            case CloneTransport.SSH:
                return f"ssh://git@{self.domain}/{self.slug}"
        msg = f"unknown clone transport: {transport!r}"
        raise InvalidArgumentError(msg)

    def _validate_repository(self, name: str) -> None:
        validator = Validator(name)
        try:
            self.owner.validate()
        except InvalidArgumentError:
            validator.invalid("owner", self.owner)
        if not self.repository_name:
            validator.required("repository_name")
        if (err := validator.error()) is not None:
            raise err


@dataclasses.dataclass(frozen=True, slots=True)
class OrgRepositoryRef(_RepositoryRefMixin):
    """Reference to a repository owned by an organization."""

    owner: OrganizationRef
    repository_name: str

    def validate(self) -> None:
        """Raise a validation error when required fields are empty."""
        self._validate_repository("OrgRepositoryRef")


@dataclasses.dataclass(frozen=True, slots=True)
class UserRepositoryRef(_RepositoryRefMixin):
    """Reference to a repository owned by a user."""

    owner: UserRef
    repository_name: str

    def validate(self) -> None:
        """Raise a validation error when required fields are empty."""
        self._validate_repository("UserRepositoryRef")


RepositoryRef = OrgRepositoryRef | UserRepositoryRef


def _split_url(url: str) -> tuple[str, list[str]]:
    """Return the host and the non-empty path segments of an HTTP(S) URL."""
    parsed = urllib.parse.urlsplit(url.strip())
    if parsed.scheme not in _HTTP_SCHEMES or not parsed.netloc:
        msg = f"invalid repository URL {url!r}: expected an http(s) URL"
        raise InvalidArgumentError(msg)
    if parsed.query or parsed.fragment:
        msg = f"invalid repository URL {url!r}: query and fragment not allowed"
        raise InvalidArgumentError(msg)
    parts = [part for part in parsed.path.split("/") if part]
    return parsed.netloc, parts


def _strip_git_suffix(name: str) -> str:
    return name.removesuffix(_GIT_SUFFIX)


def parse_organization_url(url: str) -> OrganizationRef:
    """Parse ``https://<domain>/<org>[/<sub>...]`` into an organization ref."""
    domain, parts = _split_url(url)
    if not parts:
        msg = f"invalid organization URL {url!r}: missing organization"
        raise InvalidArgumentError(msg)
    return OrganizationRef(
        domain=domain, organization=parts[0], sub_organizations=tuple(parts[1:])
    )


def parse_user_url(url: str) -> UserRef:
    """Parse ``https://<domain>/<login>`` into a user ref."""
    domain, parts = _split_url(url)
    if len(parts) != 1:
        msg = f"invalid user URL {url!r}: expected exactly one path segment"
        raise InvalidArgumentError(msg)
    return UserRef(domain=domain, user_login=parts[0])


def parse_org_repository_url(url: str) -> OrgRepositoryRef:
    """Parse ``https://<domain>/<org>[/<sub>...]/<repo>`` into a repository ref."""
    domain, parts = _split_url(url)
    min_parts = 2
    if len(parts) < min_parts:
        msg = f"invalid repository URL {url!r}: expected organization and name"
        raise InvalidArgumentError(msg)
    owner = OrganizationRef(
        domain=domain, organization=parts[0], sub_organizations=tuple(parts[1:-1])
    )
    return OrgRepositoryRef(owner=owner, repository_name=_strip_git_suffix(parts[-1]))


def parse_user_repository_url(url: str) -> UserRepositoryRef:
    """Parse ``https://<domain>/<login>/<repo>`` into a repository ref."""
    domain, parts = _split_url(url)
    expected_parts = 2
    if len(parts) != expected_parts:
        msg = f"invalid repository URL {url!r}: expected user and name"
        raise InvalidArgumentError(msg)
    owner = UserRef(domain=domain, user_login=parts[0])
    return UserRepositoryRef(
        owner=owner, repository_name=_strip_git_suffix(parts[1])
    )


class _Ref(typ.Protocol):
    @property
    def domain(self) -> str: ...

    @property
    def identity_type(self) -> IdentityType: ...

    def validate(self) -> None: ...


def validate_ref(
    ref: _Ref,
    expected_domain: str,
    *,
    provider: str,
    supports_suborganizations: bool = False,
) -> None:
    """Check that ``ref`` is well formed and usable by this client.

    Raises
    ------
    ValidationError
        If required reference fields are empty.
    DomainUnsupportedError
        If the reference's domain differs from ``expected_domain``.
    NoProviderSupportError
        If the reference names a sub-organization on a backend without them.

    """
    ref.validate()
    if ref.domain != expected_domain:
        raise DomainUnsupportedError.for_domain(ref.domain, expected_domain)
    if (
        ref.identity_type is IdentityType.SUBORGANIZATION
        and not supports_suborganizations
    ):
        raise NoProviderSupportError.for_operation(provider, "sub-organizations")


__all__ = [
    "CloneTransport",
    "IdentityRef",
    "IdentityType",
    "OrgRepositoryRef",
    "OrganizationRef",
    "RepositoryRef",
    "UserRef",
    "UserRepositoryRef",
    "parse_org_repository_url",
    "parse_organization_url",
    "parse_user_repository_url",
    "parse_user_url",
    "validate_ref",
]
