"""Provider-neutral error taxonomy.

Every failure surfaced by a backend is one of the classes below. Errors that
originate from an HTTP exchange keep the original exception available as
``cause`` (and as ``__cause__`` when raised with ``from``) so callers can still
inspect provider-specific detail; the classification is additive.

Callers branch on kinds with ordinary ``except`` clauses::

    try:
        key = await repo.deploy_keys().get("ci")
    except NoProviderSupportError:
        ...  # feature not available on this backend
    except NotFoundError:
        ...

"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_BODY_PREVIEW_LIMIT = 200


class GitProviderError(Exception):
    """Base class for all taxonomy errors.

    Attributes
    ----------
    cause
        The lower-level exception this error classifies, if any.
    http_error
        Status, headers and body of the failing response when the error was
        classified from an HTTP exchange.

    """

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        http_error: HTTPError | None = None,
    ) -> None:
        """Initialise with a message and an optional underlying cause."""
        self.cause = cause
        self.http_error = http_error
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class NotFoundError(GitProviderError):
    """Raised when the requested resource does not exist."""

    @classmethod
    def wrap(
        cls, cause: BaseException, *, http_error: HTTPError | None = None
    ) -> NotFoundError:
        """Return a not-found error classifying ``cause``."""
        return cls(
            f"the requested resource was not found: {cause}",
            cause=cause,
            http_error=http_error,
        )

    @classmethod
    def named(cls, kind: str, name: str) -> NotFoundError:
        """Return an error for a named resource missing from a listing."""
        return cls(f"{kind} {name!r} was not found")


class AlreadyExistsError(GitProviderError):
    """Raised when a create request collides with an existing resource."""

    @classmethod
    def wrap(
        cls, cause: BaseException, *, http_error: HTTPError | None = None
    ) -> AlreadyExistsError:
        """Return an already-exists error classifying ``cause``."""
        return cls(
            f"the resource already exists: {cause}",
            cause=cause,
            http_error=http_error,
        )


class HTTPError(GitProviderError):
    """Generic HTTP failure carrying the response status, headers and body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        headers: cabc.Mapping[str, str] | None = None,
        body: str = "",
        cause: BaseException | None = None,
    ) -> None:
        """Initialise with the failing response's details."""
        self.status_code = status_code
        self.headers = dict(headers or {})
        self.body = body
        super().__init__(message, cause=cause)

    @classmethod
    def from_response_details(
        cls,
        status_code: int,
        *,
        headers: cabc.Mapping[str, str] | None = None,
        body: str = "",
        cause: BaseException | None = None,
    ) -> typ.Self:
        """Return an error describing an unsuccessful HTTP response."""
        preview = body
        if len(preview) > _BODY_PREVIEW_LIMIT:
            preview = preview[:_BODY_PREVIEW_LIMIT] + "..."
        message = f"HTTP {status_code}"
        if preview:
            message = f"{message}: {preview}"
        return cls(
            message,
            status_code=status_code,
            headers=headers,
            body=body,
            cause=cause,
        )


class InvalidCredentialsError(HTTPError):
    """Raised for HTTP 401 and 403 responses."""


class InvalidServerDataError(GitProviderError):
    """Raised when a successful response violates the backend's contract."""

    @classmethod
    def wrap(cls, cause: BaseException) -> InvalidServerDataError:
        """Return an error marking ``cause`` as originating from server data."""
        return cls(f"the server returned invalid data: {cause}", cause=cause)


class InvalidClientOptionsError(GitProviderError):
    """Raised when client options are missing, duplicated or malformed."""

    @classmethod
    def already_configured(cls, option: str) -> InvalidClientOptionsError:
        """Return an error for an option that was configured twice."""
        return cls(f"option {option} already configured")

    @classmethod
    def empty(cls, option: str) -> InvalidClientOptionsError:
        """Return an error for an option given an empty value."""
        return cls(f"option {option} cannot be empty")


class DomainUnsupportedError(GitProviderError):
    """Raised when a reference targets a domain this client does not serve."""

    @classmethod
    def for_domain(cls, domain: str, expected: str) -> DomainUnsupportedError:
        """Return an error for a reference with an unexpected domain."""
        return cls(f"domain {domain!r} not supported by this client ({expected!r})")


class NoProviderSupportError(GitProviderError):
    """Raised for capabilities the selected backend does not implement.

    This is a stable and expected outcome that callers may use for feature
    detection; it is never conflated with :class:`NotFoundError`.
    """

    @classmethod
    def for_operation(cls, provider: str, operation: str) -> NoProviderSupportError:
        """Return an error for an operation the provider does not offer."""
        return cls(f"{provider} does not support {operation}")


class UnexpectedEventError(GitProviderError):
    """Raised when an internal invariant that should always hold is broken."""


class InvalidArgumentError(GitProviderError):
    """Raised when caller-supplied input is invalid."""


class ValidationError(InvalidArgumentError):
    """Combined field-validation failure for a named object.

    Attributes
    ----------
    name
        Name of the validated object, e.g. ``"GitHub.Key"``.
    violations
        One entry per failing field.

    """

    def __init__(self, name: str, violations: cabc.Sequence[str]) -> None:
        """Initialise with the object name and its violations."""
        self.name = name
        self.violations = tuple(violations)
        super().__init__(f"validation of {name} failed: {'; '.join(violations)}")


class DestructiveCallDisallowedError(GitProviderError):
    """Raised when a destructive call is made without opting in."""

    @classmethod
    def for_operation(cls, operation: str) -> DestructiveCallDisallowedError:
        """Return an error for a refused destructive operation."""
        return cls(
            f"destructive call {operation} blocked; "
            "enable destructive API calls to allow it"
        )


__all__ = [
    "AlreadyExistsError",
    "DestructiveCallDisallowedError",
    "DomainUnsupportedError",
    "GitProviderError",
    "HTTPError",
    "InvalidArgumentError",
    "InvalidClientOptionsError",
    "InvalidCredentialsError",
    "InvalidServerDataError",
    "NoProviderSupportError",
    "NotFoundError",
    "UnexpectedEventError",
    "ValidationError",
]
