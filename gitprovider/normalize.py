"""Translate raw HTTP failures into the provider-neutral error taxonomy.

This module is the only place where transport-level exceptions are
classified. Backends call :func:`check_response` on every response they
receive; anything that is not a 2xx is turned into an
``httpx.HTTPStatusError`` for the *actual* failing response and passed
through :func:`handle_http_error`.
"""

from __future__ import annotations

import http
import typing as typ

import httpx

from .errors import (
    AlreadyExistsError,
    GitProviderError,
    HTTPError,
    InvalidCredentialsError,
    NotFoundError,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_CREDENTIAL_STATUSES = frozenset(
    {http.HTTPStatus.UNAUTHORIZED, http.HTTPStatus.FORBIDDEN}
)


def _response_body(response: httpx.Response) -> str:
    try:
        return response.text
    except httpx.ResponseNotRead:
        return ""


@typ.overload
def handle_http_error(
    err: None, *, already_exists_markers: cabc.Iterable[str] = ()
) -> None: ...


@typ.overload
def handle_http_error(
    err: BaseException, *, already_exists_markers: cabc.Iterable[str] = ()
) -> BaseException: ...


def handle_http_error(
    err: BaseException | None,
    *,
    already_exists_markers: cabc.Iterable[str] = (),
) -> BaseException | None:
    """Classify ``err`` into the error taxonomy.

    The function is total and idempotent: ``None`` maps to ``None``, values
    already in the taxonomy are returned unchanged, and non-HTTP failures
    (connection errors, timeouts, cancellation) pass through untouched.

    Parameters
    ----------
    err
        The raw exception raised while talking to the backend.
    already_exists_markers
        Substrings of a response body that signal a name collision on this
        backend.

    Returns
    -------
    BaseException | None
        The classified error. Credential failures take precedence over
        not-found, which takes precedence over already-exists.

    """
    if err is None:
        return None
    if isinstance(err, GitProviderError):
        return err
    if not isinstance(err, httpx.HTTPStatusError):
        return err

    response = err.response
    status = response.status_code
    if status <= http.HTTPStatus.ACCEPTED:
        return err

    body = _response_body(response)
    if status in _CREDENTIAL_STATUSES:
        return InvalidCredentialsError.from_response_details(
            status, headers=response.headers, body=body, cause=err
        )

    http_error = HTTPError.from_response_details(
        status, headers=response.headers, body=body, cause=err
    )
    if status == http.HTTPStatus.NOT_FOUND:
        return NotFoundError.wrap(err, http_error=http_error)
    if any(marker in body for marker in already_exists_markers):
        return AlreadyExistsError.wrap(err, http_error=http_error)
    return http_error


def check_response(
    response: httpx.Response,
    *,
    already_exists_markers: cabc.Iterable[str] = (),
) -> httpx.Response:
    """Return ``response`` when successful, else raise its taxonomy error."""
    if response.is_success:
        return response
    status_error = httpx.HTTPStatusError(
        f"{response.request.method} {response.request.url} "
        f"returned HTTP {response.status_code}",
        request=response.request,
        response=response,
    )
    raise handle_http_error(
        status_error, already_exists_markers=already_exists_markers
    ) from status_error


__all__ = ["check_response", "handle_http_error"]
