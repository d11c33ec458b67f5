"""Thin GitHub REST API client.

Every method performs one logical API operation. Failures are classified by
:func:`~gitprovider.normalize.check_response`, decoded bodies are validated
before they are returned, and list endpoints are followed across pages using
the ``Link`` header. Higher layers never see raw HTTP failures or
half-populated objects.
"""

from __future__ import annotations

import typing as typ
import urllib.parse

import msgspec

from gitprovider.errors import DestructiveCallDisallowedError, InvalidServerDataError
from gitprovider.logging import get_logger, log_debug, log_info, log_warning
from gitprovider.normalize import check_response
from gitprovider.spec import project_spec
from gitprovider.validation import validate_api_object

from .models import (
    KEY_SPEC_FIELDS,
    REPOSITORY_SPEC_FIELDS,
    Account,
    Key,
    Organization,
    Repository,
    Team,
)

if typ.TYPE_CHECKING:
    import httpx

    from gitprovider.validation import Validator

logger = get_logger(__name__)

PROVIDER_ID = "github"
GITHUB_DOMAIN = "github.com"
GITHUB_API_URL = "https://api.github.com"
ALREADY_EXISTS_MARKERS = (
    "name already exists on this account",
    "key is already in use",
)
_PER_PAGE = 100
_ACCEPT = "application/vnd.github+json"


def api_base_url(domain: str) -> str:
    """Return the REST endpoint for ``domain``.

    ``github.com`` uses the public API host; any other domain is treated as a
    GitHub Enterprise Server instance serving ``/api/v3``.
    """
    if domain == GITHUB_DOMAIN:
        return GITHUB_API_URL
    return f"https://{domain}/api/v3"


def _path(*segments: str) -> str:
    return "/" + "/".join(urllib.parse.quote(segment, safe="") for segment in segments)


def _decode[T](response: httpx.Response, type_: type[T]) -> T:
    try:
        return msgspec.json.decode(response.content, type=type_)
    except msgspec.DecodeError as exc:
        raise InvalidServerDataError.wrap(exc) from exc


def validate_organization_api(org: Organization) -> None:
    """Check that a decoded organization carries its login."""

    def _check(validator: Validator) -> None:
        if not org.login:
            validator.required("login")

    validate_api_object("GitHub.Organization", _check)


def validate_team_api(team: Team) -> None:
    """Check that a decoded team carries its name and slug."""

    def _check(validator: Validator) -> None:
        if not team.name:
            validator.required("name")
        if not team.slug:
            validator.required("slug")

    validate_api_object("GitHub.Team", _check)


def validate_account_api(account: Account) -> None:
    """Check that a decoded account carries its login."""

    def _check(validator: Validator) -> None:
        if not account.login:
            validator.required("login")

    validate_api_object("GitHub.User", _check)


def validate_repository_api(repo: Repository) -> None:
    """Check that a decoded repository carries its name."""

    def _check(validator: Validator) -> None:
        if not repo.name:
            validator.required("name")

    validate_api_object("GitHub.Repository", _check)


def validate_key_api(key: Key) -> None:
    """Check that a decoded deploy key carries every field the wrapper uses."""

    def _check(validator: Validator) -> None:
        if key.id is None:
            validator.required("id")
        if not key.title:
            validator.required("title")
        if not key.key:
            validator.required("key")
        if key.read_only is None:
            validator.required("read_only")

    validate_api_object("GitHub.Key", _check)


class GitHubAPIClient:
    """REST operations used by the GitHub resource wrappers."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_url: str = GITHUB_API_URL,
        destructive_api_calls: bool = False,
    ) -> None:
        """Send requests through ``http_client`` to ``base_url``."""
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._destructive_api_calls = destructive_api_calls

    @property
    def destructive_api_calls(self) -> bool:
        """Return whether destructive calls are allowed."""
        return self._destructive_api_calls

    async def _request(
        self,
        method: str,
        path_or_url: str,
        *,
        params: dict[str, str | int] | None = None,
        body: object | None = None,
    ) -> httpx.Response:
        url = path_or_url
        if not url.startswith(("http://", "https://")):
            url = f"{self._base_url}{path_or_url}"
        headers = {"Accept": _ACCEPT}
        content = None
        if body is not None:
            content = msgspec.json.encode(body)
            headers["Content-Type"] = "application/json"
        log_debug(logger, "[github.request] method=%s url=%s", method, url)
        response = await self._client.request(
            method, url, params=params, content=content, headers=headers
        )
        return check_response(response, already_exists_markers=ALREADY_EXISTS_MARKERS)

    async def _get[T](self, path: str, type_: type[T]) -> T:
        return _decode(await self._request("GET", path), type_)

    async def _list[T](self, path: str, type_: type[T]) -> list[T]:
        items: list[T] = []
        url: str | None = path
        params: dict[str, str | int] | None = {"per_page": _PER_PAGE}
        while url is not None:
            response = await self._request("GET", url, params=params)
            items.extend(_decode(response, list[type_]))  # type: ignore[valid-type]
            url = response.links.get("next", {}).get("url")
            params = None
        return items

    # Organizations and teams

    async def get_organization(self, org: str) -> Organization:
        """Return organization ``org``."""
        result = await self._get(_path("orgs", org), Organization)
        validate_organization_api(result)
        return result

    async def list_organizations(self) -> list[Organization]:
        """Return the organizations the authenticated user belongs to."""
        result = await self._list("/user/orgs", Organization)
        for org in result:
            validate_organization_api(org)
        return result

    async def get_team(self, org: str, slug: str) -> Team:
        """Return the team ``slug`` of ``org``."""
        result = await self._get(_path("orgs", org, "teams", slug), Team)
        validate_team_api(result)
        return result

    async def list_teams(self, org: str) -> list[Team]:
        """Return every team of ``org``."""
        result = await self._list(_path("orgs", org, "teams"), Team)
        for team in result:
            validate_team_api(team)
        return result

    async def list_team_members(self, org: str, slug: str) -> list[Account]:
        """Return the members of team ``slug``."""
        result = await self._list(
            _path("orgs", org, "teams", slug, "members"), Account
        )
        for member in result:
            validate_account_api(member)
        return result

    # Repositories

    async def get_repository(self, owner: str, name: str) -> Repository:
        """Return repository ``owner/name``."""
        result = await self._get(_path("repos", owner, name), Repository)
        validate_repository_api(result)
        return result

    async def list_org_repositories(self, org: str) -> list[Repository]:
        """Return every repository of organization ``org``."""
        result = await self._list(_path("orgs", org, "repos"), Repository)
        for repo in result:
            validate_repository_api(repo)
        return result

    async def list_user_repositories(self, login: str) -> list[Repository]:
        """Return every repository owned by user ``login``."""
        result = await self._list(_path("users", login, "repos"), Repository)
        for repo in result:
            validate_repository_api(repo)
        return result

    async def create_repository(
        self, repo: Repository, *, org: str | None = None
    ) -> Repository:
        """Create ``repo`` in ``org``, or for the authenticated user."""
        path = _path("orgs", org, "repos") if org else "/user/repos"
        response = await self._request(
            "POST", path, body=project_spec(repo, REPOSITORY_SPEC_FIELDS)
        )
        result = _decode(response, Repository)
        validate_repository_api(result)
        log_info(logger, "[github.repository.created] repository=%s", result.name)
        return result

    async def update_repository(
        self, owner: str, name: str, repo: Repository
    ) -> Repository:
        """Apply the spec fields of ``repo`` to ``owner/name``."""
        response = await self._request(
            "PATCH",
            _path("repos", owner, name),
            body=project_spec(repo, REPOSITORY_SPEC_FIELDS),
        )
        result = _decode(response, Repository)
        validate_repository_api(result)
        return result

    async def delete_repository(self, owner: str, name: str) -> None:
        """Delete ``owner/name``; refused unless destructive calls are enabled."""
        if not self._destructive_api_calls:
            log_warning(
                logger,
                "[github.repository.delete_refused] repository=%s/%s",
                owner,
                name,
            )
            raise DestructiveCallDisallowedError.for_operation(
                f"delete repository {owner}/{name}"
            )
        await self._request("DELETE", _path("repos", owner, name))
        log_info(logger, "[github.repository.deleted] repository=%s/%s", owner, name)

    # Deploy keys

    async def list_keys(self, owner: str, repo: str) -> list[Key]:
        """Return every deploy key of ``owner/repo``."""
        result = await self._list(_path("repos", owner, repo, "keys"), Key)
        for key in result:
            validate_key_api(key)
        return result

    async def create_key(self, owner: str, repo: str, key: Key) -> Key:
        """Add deploy key ``key`` to ``owner/repo``."""
        response = await self._request(
            "POST",
            _path("repos", owner, repo, "keys"),
            body=project_spec(key, KEY_SPEC_FIELDS),
        )
        result = _decode(response, Key)
        validate_key_api(result)
        return result

    async def delete_key(self, owner: str, repo: str, key_id: int) -> None:
        """Remove deploy key ``key_id`` from ``owner/repo``."""
        await self._request("DELETE", _path("repos", owner, repo, "keys", str(key_id)))

    # Team access

    async def list_repository_teams(self, owner: str, repo: str) -> list[Team]:
        """Return the teams with access to ``owner/repo``."""
        result = await self._list(_path("repos", owner, repo, "teams"), Team)
        for team in result:
            validate_team_api(team)
        return result

    async def set_team_permission(
        self, org: str, slug: str, owner: str, repo: str, permission: str
    ) -> None:
        """Grant team ``slug`` ``permission`` on ``owner/repo``."""
        await self._request(
            "PUT",
            _path("orgs", org, "teams", slug, "repos", owner, repo),
            body={"permission": permission},
        )

    async def remove_team(self, org: str, slug: str, owner: str, repo: str) -> None:
        """Revoke the access of team ``slug`` to ``owner/repo``."""
        await self._request(
            "DELETE", _path("orgs", org, "teams", slug, "repos", owner, repo)
        )


__all__ = [
    "ALREADY_EXISTS_MARKERS",
    "GITHUB_API_URL",
    "GITHUB_DOMAIN",
    "PROVIDER_ID",
    "GitHubAPIClient",
    "api_base_url",
    "validate_key_api",
    "validate_repository_api",
]
