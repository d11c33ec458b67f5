"""Client configuration.

Options are collected with :class:`ClientOptionsBuilder` and validated once in
:meth:`ClientOptionsBuilder.build`: configuring a slot twice, passing an empty
token or a missing hook is reported there, before any HTTP client exists.

Example::

    options = (
        ClientOptionsBuilder()
        .with_oauth2_token(token)
        .with_conditional_requests()
        .build()
    )
    client = new_github_client(options)

"""

from __future__ import annotations

import dataclasses
import os
import typing as typ

from .cache import conditional_requests
from .errors import InvalidClientOptionsError
from .transport import TokenType, token_auth

if typ.TYPE_CHECKING:
    from .transport import ChainableTransport

_DEFAULT_TIMEOUT_S = 30.0
_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


@dataclasses.dataclass(frozen=True, slots=True)
class ClientOptions:
    """Validated options consumed by the provider client constructors.

    Attributes
    ----------
    domain
        Host (and optional port) of the backend; ``None`` selects the
        provider's default domain.
    destructive_api_calls
        Whether irreversible calls such as repository deletion are allowed.
    pre_chain_transport_hook
        Innermost middleware, adjacent to the network transport.
    auth_transport
        Middleware adding credentials to every request.
    conditional_requests
        Whether ``ETag`` based revalidation is enabled.
    post_chain_transport_hook
        Outermost middleware.
    timeout_s
        Request timeout applied by the HTTP client.

    """

    domain: str | None = None
    destructive_api_calls: bool = False
    pre_chain_transport_hook: ChainableTransport | None = None
    auth_transport: ChainableTransport | None = None
    conditional_requests: bool = False
    post_chain_transport_hook: ChainableTransport | None = None
    timeout_s: float = _DEFAULT_TIMEOUT_S

    def transport_chain(self) -> list[ChainableTransport]:
        """Return the configured middleware, innermost first."""
        chain: list[ChainableTransport] = []
        if self.pre_chain_transport_hook is not None:
            chain.append(self.pre_chain_transport_hook)
        if self.auth_transport is not None:
            chain.append(self.auth_transport)
        if self.conditional_requests:
            chain.append(conditional_requests)
        if self.post_chain_transport_hook is not None:
            chain.append(self.post_chain_transport_hook)
        return chain


class ClientOptionsBuilder:
    """Collect client options and validate them in one place."""

    def __init__(self) -> None:
        """Start with no options configured."""
        self._values: dict[str, object] = {}
        self._problems: list[InvalidClientOptionsError] = []

    def _problem(self, message: str) -> None:
        self._problems.append(InvalidClientOptionsError(message))

    def _set(self, option: str, value: object) -> typ.Self:
        if option in self._values:
            self._problems.append(InvalidClientOptionsError.already_configured(option))
        else:
            self._values[option] = value
        return self

    def _set_hook(self, option: str, hook: ChainableTransport | None) -> typ.Self:
        if hook is None:
            self._problems.append(InvalidClientOptionsError.empty(option))
            return self
        return self._set(option, hook)

    def with_domain(self, domain: str) -> typ.Self:
        """Target a self-hosted instance at ``domain`` (host and port only)."""
        if not domain:
            self._problems.append(InvalidClientOptionsError.empty("domain"))
            return self
        return self._set("domain", domain)

    def with_destructive_api_calls(self, *, enabled: bool = True) -> typ.Self:
        """Allow or refuse irreversible calls such as repository deletion."""
        return self._set("destructive_api_calls", enabled)

    def with_pre_chain_transport_hook(
        self, hook: ChainableTransport | None
    ) -> typ.Self:
        """Register middleware beneath authentication and caching."""
        return self._set_hook("pre_chain_transport_hook", hook)

    def with_post_chain_transport_hook(
        self, hook: ChainableTransport | None
    ) -> typ.Self:
        """Register middleware above authentication and caching."""
        return self._set_hook("post_chain_transport_hook", hook)

    def with_auth_transport(self, transport: ChainableTransport | None) -> typ.Self:
        """Register custom authentication middleware."""
        return self._set_hook("auth_transport", transport)

    def with_oauth2_token(self, token: str) -> typ.Self:
        """Authenticate with an OAuth2 bearer token."""
        if not token:
            self._problems.append(InvalidClientOptionsError.empty("oauth2_token"))
            return self
        return self._set("auth_transport", token_auth(token))

    def with_private_token(self, token: str) -> typ.Self:
        """Authenticate with a ``Private-Token`` header."""
        if not token:
            self._problems.append(InvalidClientOptionsError.empty("private_token"))
            return self
        return self._set(
            "auth_transport", token_auth(token, token_type=TokenType.PRIVATE)
        )

    def with_conditional_requests(self, *, enabled: bool = True) -> typ.Self:
        """Enable revalidation of cached ``GET`` responses."""
        return self._set("conditional_requests", enabled)

    def with_timeout(self, timeout_s: float) -> typ.Self:
        """Set the request timeout in seconds."""
        if timeout_s <= 0:
            self._problem(f"option timeout_s must be positive: {timeout_s}")
            return self
        return self._set("timeout_s", timeout_s)

    def build(self) -> ClientOptions:
        """Return the validated options.

        Raises
        ------
        InvalidClientOptionsError
            If any option was configured twice or given an empty value. The
            message lists every problem found.

        """
        if self._problems:
            if len(self._problems) == 1:
                raise self._problems[0]
            details = "; ".join(str(problem) for problem in self._problems)
            raise InvalidClientOptionsError(details)
        return ClientOptions(**self._values)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls, prefix: str = "GITPROVIDER") -> ClientOptionsBuilder:
        """Seed a builder from environment variables.

        Reads the following variables, all optional:

        - ``<PREFIX>_DOMAIN``: backend domain
        - ``<PREFIX>_TOKEN``: access token
        - ``<PREFIX>_TOKEN_TYPE``: ``oauth2`` (default) or ``private``
        - ``<PREFIX>_DESTRUCTIVE_API_CALLS``: boolean flag
        - ``<PREFIX>_CONDITIONAL_REQUESTS``: boolean flag
        - ``<PREFIX>_TIMEOUT_S``: request timeout in seconds

        Further options can be chained onto the returned builder before
        calling :meth:`build`.
        """
        builder = cls()
        if domain := os.environ.get(f"{prefix}_DOMAIN", "").strip():
            builder.with_domain(domain)

        if token := os.environ.get(f"{prefix}_TOKEN", "").strip():
            raw_type = os.environ.get(f"{prefix}_TOKEN_TYPE", TokenType.OAUTH2)
            try:
                token_type = TokenType(raw_type.strip().lower())
            except ValueError:
                builder._problem(f"invalid token type {raw_type!r}")
            else:
                if token_type is TokenType.PRIVATE:
                    builder.with_private_token(token)
                else:
                    builder.with_oauth2_token(token)

        for name, setter in (
            ("DESTRUCTIVE_API_CALLS", builder.with_destructive_api_calls),
            ("CONDITIONAL_REQUESTS", builder.with_conditional_requests),
        ):
            raw = os.environ.get(f"{prefix}_{name}")
            if raw is None:
                continue
            flag = _parse_flag(raw)
            if flag is None:
                builder._problem(f"invalid boolean for {prefix}_{name}")
            else:
                setter(enabled=flag)

        if (raw_timeout := os.environ.get(f"{prefix}_TIMEOUT_S")) is not None:
            try:
                builder.with_timeout(float(raw_timeout))
            except ValueError:
                builder._problem(f"invalid timeout {raw_timeout!r}")
        return builder


def _parse_flag(raw: str) -> bool | None:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return None


__all__ = ["ClientOptions", "ClientOptionsBuilder"]
