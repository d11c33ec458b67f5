"""Entry point for the Bitbucket Server backend."""

from __future__ import annotations

import typing as typ

from gitprovider.logging import get_logger, log_info
from gitprovider.options import ClientOptions
from gitprovider.transport import build_client_from_transport_chain

from .api import PROVIDER_ID, STASH_DOMAIN, StashAPIClient, api_base_url
from .organizations import StashOrganizationsClient
from .repositories import StashOrgRepositoriesClient, StashUserRepositoriesClient

if typ.TYPE_CHECKING:
    import httpx

logger = get_logger(__name__)

USER_AGENT = "gitprovider/0.1"


class StashClient:
    """Access to one Bitbucket Server instance."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        domain: str = STASH_DOMAIN,
        destructive_api_calls: bool = False,
    ) -> None:
        """Serve ``domain`` through ``http_client``, which this client owns."""
        self._client = http_client
        self._domain = domain
        api = StashAPIClient(
            http_client,
            base_url=api_base_url(domain),
            destructive_api_calls=destructive_api_calls,
        )
        self._organizations = StashOrganizationsClient(api, domain)
        self._org_repositories = StashOrgRepositoriesClient(api, domain)
        self._user_repositories = StashUserRepositoriesClient(api, domain)

    def supported_domain(self) -> str:
        """Return the domain references must use."""
        return self._domain

    def provider_id(self) -> str:
        """Return ``"stash"``."""
        return PROVIDER_ID

    def raw_client(self) -> httpx.AsyncClient:
        """Return the HTTP client built from the transport chain."""
        return self._client

    def organizations(self) -> StashOrganizationsClient:
        """Return the projects client."""
        return self._organizations

    def org_repositories(self) -> StashOrgRepositoriesClient:
        """Return the project repositories client."""
        return self._org_repositories

    def user_repositories(self) -> StashUserRepositoriesClient:
        """Return the personal repositories client."""
        return self._user_repositories

    async def aclose(self) -> None:
        """Close the HTTP client and every transport in its chain."""
        await self._client.aclose()


def new_stash_client(
    options: ClientOptions | None = None,
    *,
    base_transport: httpx.AsyncBaseTransport | None = None,
) -> StashClient:
    """Build a Bitbucket Server client from ``options``.

    Bitbucket Server is self-hosted, so callers normally configure the
    instance with :meth:`ClientOptionsBuilder.with_domain`. Personal access
    tokens are sent as bearer tokens; ``with_private_token`` suits proxies
    expecting a ``Private-Token`` header.
    """
    options = options or ClientOptions()
    domain = options.domain or STASH_DOMAIN
    http_client = build_client_from_transport_chain(
        options.transport_chain(),
        base=base_transport,
        timeout=options.timeout_s,
        headers={"User-Agent": USER_AGENT},
    )
    log_info(
        logger,
        "[stash.client.created] domain=%s conditional_requests=%s "
        "destructive_api_calls=%s",
        domain,
        options.conditional_requests,
        options.destructive_api_calls,
    )
    return StashClient(
        http_client,
        domain=domain,
        destructive_api_calls=options.destructive_api_calls,
    )


__all__ = ["StashClient", "new_stash_client"]
