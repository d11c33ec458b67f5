"""In-memory Bitbucket Server REST API served through ``httpx.MockTransport``."""

from __future__ import annotations

import dataclasses
import http
import json
import re
import typing as typ

import httpx

type _Json = dict[str, typ.Any]

API_PREFIX = "/rest/api/1.0"


def _error(status: http.HTTPStatus, message: str) -> httpx.Response:
    return httpx.Response(
        status, json={"errors": [{"context": None, "message": message}]}
    )


def _not_found() -> httpx.Response:
    return _error(http.HTTPStatus.NOT_FOUND, "Not found.")


@dataclasses.dataclass(slots=True)
class FakeStash:
    """Mutable Bitbucket Server state plus a request log."""

    page_size: int | None = None
    projects: dict[str, _Json] = dataclasses.field(default_factory=dict)
    repos: dict[tuple[str, str], _Json] = dataclasses.field(default_factory=dict)
    requests: list[httpx.Request] = dataclasses.field(default_factory=list)
    _next_id: int = 1

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def add_project(self, key: str, *, description: str | None = None) -> _Json:
        """Store a project."""
        project: _Json = {
            "id": self._new_id(),
            "key": key,
            "name": key.title(),
            "public": False,
            "type": "NORMAL",
        }
        if description is not None:
            project["description"] = description
        self.projects[key] = project
        return project

    def add_repo(self, project: str, name: str, **fields: object) -> _Json:
        """Store a repository in ``project`` (``~login`` for personal ones)."""
        slug = name.lower()
        repo: _Json = {
            "id": self._new_id(),
            "slug": slug,
            "name": name,
            "scmId": "git",
            "state": "AVAILABLE",
            "forkable": True,
            "public": False,
            "project": {"key": project},
        }
        repo.update(fields)
        self.repos[project, slug] = repo
        return repo

    def transport(self) -> httpx.MockTransport:
        """Return a transport serving this fake."""
        return httpx.MockTransport(self.handle)

    def calls(self, method: str | None = None) -> list[str]:
        """Return ``"METHOD path"`` for each request, optionally filtered."""
        return [
            f"{request.method} {request.url.path}"
            for request in self.requests
            if method is None or request.method == method
        ]

    def handle(self, request: httpx.Request) -> httpx.Response:  # noqa: PLR0911
        """Dispatch ``request`` to the matching endpoint."""
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)
        if path == "/projects" and request.method == "GET":
            return self._page(request, list(self.projects.values()))
        if match := re.fullmatch(r"/projects/([^/]+)", path):
            project = self.projects.get(match[1])
            if request.method != "GET" or project is None:
                return _not_found()
            return httpx.Response(200, json=project)
        if match := re.fullmatch(r"/projects/([^/]+)/repos", path):
            if request.method == "POST":
                return self._create(match[1], request)
            repos = [r for (p, _), r in self.repos.items() if p == match[1]]
            return self._page(request, repos)
        if match := re.fullmatch(r"/projects/([^/]+)/repos/([^/]+)", path):
            return self._repository(request, match[1], match[2])
        return _not_found()

    def _page(self, request: httpx.Request, items: list[_Json]) -> httpx.Response:
        limit = self.page_size or int(request.url.params.get("limit", "25"))
        start = int(request.url.params.get("start", "0"))
        values = items[start : start + limit]
        is_last = start + limit >= len(items)
        body: _Json = {
            "size": len(values),
            "limit": limit,
            "start": start,
            "isLastPage": is_last,
            "values": values,
        }
        if not is_last:
            body["nextPageStart"] = start + limit
        return httpx.Response(200, json=body)

    def _create(self, project: str, request: httpx.Request) -> httpx.Response:
        if not project.startswith("~") and project not in self.projects:
            return _not_found()
        body = json.loads(request.content)
        name = body.pop("name")
        if (project, name.lower()) in self.repos:
            return _error(
                http.HTTPStatus.CONFLICT, "This repository URL is already taken."
            )
        repo = self.add_repo(project, name, **body)
        return httpx.Response(http.HTTPStatus.CREATED, json=repo)

    def _repository(
        self, request: httpx.Request, project: str, slug: str
    ) -> httpx.Response:
        repo = self.repos.get((project, slug))
        if repo is None:
            return _not_found()
        if request.method == "GET":
            return httpx.Response(200, json=repo)
        if request.method == "PUT":
            repo.update(json.loads(request.content))
            return httpx.Response(200, json=repo)
        if request.method == "DELETE":
            del self.repos[project, slug]
            return httpx.Response(
                http.HTTPStatus.ACCEPTED,
                json={"message": "Repository scheduled for deletion."},
            )
        return _error(http.HTTPStatus.METHOD_NOT_ALLOWED, "Method not allowed.")
