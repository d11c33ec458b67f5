"""Entry point for the GitHub backend."""

from __future__ import annotations

import typing as typ

from gitprovider.logging import get_logger, log_info
from gitprovider.options import ClientOptions
from gitprovider.transport import build_client_from_transport_chain

from .api import GITHUB_DOMAIN, PROVIDER_ID, GitHubAPIClient, api_base_url
from .organizations import GitHubOrganizationsClient
from .repositories import GitHubOrgRepositoriesClient, GitHubUserRepositoriesClient

if typ.TYPE_CHECKING:
    import httpx

logger = get_logger(__name__)

USER_AGENT = "gitprovider/0.1"


class GitHubClient:
    """Access to one GitHub or GitHub Enterprise Server instance."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        domain: str = GITHUB_DOMAIN,
        destructive_api_calls: bool = False,
    ) -> None:
        """Serve ``domain`` through ``http_client``, which this client owns."""
        self._client = http_client
        self._domain = domain
        self._api = GitHubAPIClient(
            http_client,
            base_url=api_base_url(domain),
            destructive_api_calls=destructive_api_calls,
        )
        self._organizations = GitHubOrganizationsClient(self._api, domain)
        self._org_repositories = GitHubOrgRepositoriesClient(self._api, domain)
        self._user_repositories = GitHubUserRepositoriesClient(self._api, domain)

    def supported_domain(self) -> str:
        """Return the domain references must use."""
        return self._domain

    def provider_id(self) -> str:
        """Return ``"github"``."""
        return PROVIDER_ID

    def raw_client(self) -> httpx.AsyncClient:
        """Return the HTTP client built from the transport chain.

        Requests sent through it pass the configured middleware but bypass
        error classification and response validation.
        """
        return self._client

    def organizations(self) -> GitHubOrganizationsClient:
        """Return the organizations client."""
        return self._organizations

    def org_repositories(self) -> GitHubOrgRepositoriesClient:
        """Return the organization repositories client."""
        return self._org_repositories

    def user_repositories(self) -> GitHubUserRepositoriesClient:
        """Return the user repositories client."""
        return self._user_repositories

    async def aclose(self) -> None:
        """Close the HTTP client and every transport in its chain."""
        await self._client.aclose()


def new_github_client(
    options: ClientOptions | None = None,
    *,
    base_transport: httpx.AsyncBaseTransport | None = None,
) -> GitHubClient:
    """Build a GitHub client from ``options``.

    Parameters
    ----------
    options
        Validated options; defaults target ``github.com`` anonymously.
    base_transport
        Transport beneath the middleware chain. Defaults to a network
        transport; tests pass an :class:`httpx.MockTransport`.

    Returns
    -------
    GitHubClient
        A client that must be closed with :meth:`GitHubClient.aclose`.

    """
    options = options or ClientOptions()
    domain = options.domain or GITHUB_DOMAIN
    http_client = build_client_from_transport_chain(
        options.transport_chain(),
        base=base_transport,
        timeout=options.timeout_s,
        headers={"User-Agent": USER_AGENT},
    )
    log_info(
        logger,
        "[github.client.created] domain=%s conditional_requests=%s "
        "destructive_api_calls=%s",
        domain,
        options.conditional_requests,
        options.destructive_api_calls,
    )
    return GitHubClient(
        http_client,
        domain=domain,
        destructive_api_calls=options.destructive_api_calls,
    )


__all__ = ["GitHubClient", "new_github_client"]
