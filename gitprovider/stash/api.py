"""Thin Bitbucket Server REST API client.

Mirrors :mod:`gitprovider.github.api`: failures go through
:func:`~gitprovider.normalize.check_response`, decoded bodies are validated,
and paged collections are followed with ``start``/``nextPageStart`` until
``isLastPage``.
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

from .models import DEFAULT_SCM_ID, REPOSITORY_SPEC_FIELDS, Page, Project, Repository

if typ.TYPE_CHECKING:
    import httpx

    from gitprovider.validation import Validator

logger = get_logger(__name__)

PROVIDER_ID = "stash"
STASH_DOMAIN = "stash.example.com"
ALREADY_EXISTS_MARKERS = (
    "has already been taken",
    "already shared with this group",
    "is already taken",
)
_PAGE_LIMIT = 100


def api_base_url(domain: str) -> str:
    """Return the REST endpoint for ``domain``."""
    return f"https://{domain}/rest/api/1.0"


def user_project_key(login: str) -> str:
    """Return the key of ``login``'s personal project."""
    return f"~{login}"


def _path(*segments: str) -> str:
    return "/" + "/".join(urllib.parse.quote(segment, safe="~") for segment in segments)


def _decode[T](content: bytes, type_: type[T]) -> T:
    try:
        return msgspec.json.decode(content, type=type_)
    except msgspec.DecodeError as exc:
        raise InvalidServerDataError.wrap(exc) from exc


def validate_project_api(project: Project) -> None:
    """Check that a decoded project carries its key."""

    def _check(validator: Validator) -> None:
        if not project.key:
            validator.required("key")

    validate_api_object("Stash.Project", _check)


def validate_repository_api(repo: Repository) -> None:
    """Check that a decoded repository carries its slug and name."""

    def _check(validator: Validator) -> None:
        if not repo.slug:
            validator.required("slug")
        if not repo.name:
            validator.required("name")

    validate_api_object("Stash.Repository", _check)


class StashAPIClient:
    """REST operations used by the Bitbucket Server resource wrappers."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_url: str,
        destructive_api_calls: bool = False,
    ) -> None:
        """Send requests through ``http_client`` to ``base_url``."""
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._destructive_api_calls = destructive_api_calls

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str | int] | None = None,
        body: object | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url}{path}"
        headers = {"Accept": "application/json"}
        content = None
        if body is not None:
            content = msgspec.json.encode(body)
            headers["Content-Type"] = "application/json"
        log_debug(logger, "[stash.request] method=%s url=%s", method, url)
        response = await self._client.request(
            method, url, params=params, content=content, headers=headers
        )
        return check_response(response, already_exists_markers=ALREADY_EXISTS_MARKERS)

    async def _list[T](self, path: str, type_: type[T]) -> list[T]:
        items: list[T] = []
        start = 0
        while True:
            response = await self._request(
                "GET", path, params={"start": start, "limit": _PAGE_LIMIT}
            )
            page = _decode(response.content, Page)
            items.extend(_decode(raw, type_) for raw in page.values)
            if page.is_last_page:
                return items
            if page.next_page_start is None or page.next_page_start <= start:
                msg = f"paged response for {path} has no usable nextPageStart"
                raise InvalidServerDataError(msg)
            start = page.next_page_start

    # Projects

    async def get_project(self, key: str) -> Project:
        """Return project ``key``."""
        response = await self._request("GET", _path("projects", key))
        result = _decode(response.content, Project)
        validate_project_api(result)
        return result

    async def list_projects(self) -> list[Project]:
        """Return every project visible to the caller."""
        result = await self._list("/projects", Project)
        for project in result:
            validate_project_api(project)
        return result

    # Repositories

    async def get_repository(self, project_key: str, slug: str) -> Repository:
        """Return repository ``slug`` of project ``project_key``."""
        response = await self._request(
            "GET", _path("projects", project_key, "repos", slug)
        )
        result = _decode(response.content, Repository)
        validate_repository_api(result)
        return result

    async def list_repositories(self, project_key: str) -> list[Repository]:
        """Return every repository of project ``project_key``."""
        result = await self._list(_path("projects", project_key, "repos"), Repository)
        for repo in result:
            validate_repository_api(repo)
        return result

    async def create_repository(self, project_key: str, repo: Repository) -> Repository:
        """Create ``repo`` in project ``project_key``."""
        body = msgspec.structs.replace(
            project_spec(repo, REPOSITORY_SPEC_FIELDS),
            scm_id=repo.scm_id or DEFAULT_SCM_ID,
        )
        response = await self._request(
            "POST", _path("projects", project_key, "repos"), body=body
        )
        result = _decode(response.content, Repository)
        validate_repository_api(result)
        log_info(
            logger,
            "[stash.repository.created] project=%s repository=%s",
            project_key,
            result.slug,
        )
        return result

    async def update_repository(
        self, project_key: str, slug: str, repo: Repository
    ) -> Repository:
        """Apply the spec fields of ``repo`` to repository ``slug``."""
        response = await self._request(
            "PUT",
            _path("projects", project_key, "repos", slug),
            body=project_spec(repo, REPOSITORY_SPEC_FIELDS),
        )
        result = _decode(response.content, Repository)
        validate_repository_api(result)
        return result

    async def delete_repository(self, project_key: str, slug: str) -> None:
        """Schedule repository ``slug`` for deletion.

        Refused unless destructive calls are enabled.
        """
        if not self._destructive_api_calls:
            log_warning(
                logger,
                "[stash.repository.delete_refused] project=%s repository=%s",
                project_key,
                slug,
            )
            raise DestructiveCallDisallowedError.for_operation(
                f"delete repository {project_key}/{slug}"
            )
        await self._request("DELETE", _path("projects", project_key, "repos", slug))
        log_info(
            logger,
            "[stash.repository.deleted] project=%s repository=%s",
            project_key,
            slug,
        )


__all__ = [
    "ALREADY_EXISTS_MARKERS",
    "PROVIDER_ID",
    "STASH_DOMAIN",
    "StashAPIClient",
    "api_base_url",
    "user_project_key",
    "validate_project_api",
    "validate_repository_api",
]
