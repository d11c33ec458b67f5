"""Unit tests for the error taxonomy."""

from __future__ import annotations

import pytest

from gitprovider.errors import (
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
    ValidationError,
)


def test_wrap_keeps_cause_as_attribute_and_dunder() -> None:
    """Classified errors keep the original failure reachable."""
    original = RuntimeError("boom")

    err = NotFoundError.wrap(original)

    assert err.cause is original, "Expected cause attribute to be the original."
    assert err.__cause__ is original, "Expected __cause__ to chain the original."


def test_http_error_truncates_long_bodies_in_message_only() -> None:
    """The message previews the body while the attribute keeps all of it."""
    body = "x" * 500

    err = HTTPError.from_response_details(500, headers={"X-Id": "1"}, body=body)

    assert err.status_code == 500
    assert err.body == body, "Expected the full body to be kept."
    assert len(str(err)) < len(body), "Expected the message to be truncated."
    assert err.headers == {"X-Id": "1"}


def test_invalid_credentials_is_an_http_error() -> None:
    """Credential failures still expose status and body."""
    err = InvalidCredentialsError.from_response_details(401, body="bad token")

    assert isinstance(err, HTTPError)
    assert err.status_code == 401


def test_validation_error_is_an_invalid_argument() -> None:
    """Validation failures are caught as invalid arguments."""
    err = ValidationError("RepositoryInfo", ["field visibility is invalid"])

    assert isinstance(err, InvalidArgumentError)
    assert err.name == "RepositoryInfo"
    assert err.violations == ("field visibility is invalid",)
    assert "RepositoryInfo" in str(err)


@pytest.mark.parametrize(
    "err",
    [
        NotFoundError.named("deploy key", "ci"),
        AlreadyExistsError.wrap(RuntimeError("dup")),
        InvalidServerDataError.wrap(RuntimeError("bad")),
        InvalidClientOptionsError.already_configured("domain"),
        DomainUnsupportedError.for_domain("gitlab.com", "github.com"),
        NoProviderSupportError.for_operation("stash", "deploy keys"),
        DestructiveCallDisallowedError.for_operation("delete repository a/b"),
    ],
)
def test_every_constructor_builds_a_provider_error(err: GitProviderError) -> None:
    """Classmethod constructors return members of the taxonomy."""
    assert isinstance(err, GitProviderError)
    assert str(err), "Expected a non-empty message."


def test_no_provider_support_is_not_not_found() -> None:
    """Feature detection never collides with missing resources."""
    err = NoProviderSupportError.for_operation("stash", "deploy keys")

    assert not isinstance(err, NotFoundError)
    assert "stash" in str(err)
