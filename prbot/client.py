"""
prbot admin main client.

Provides the primary interface for interacting with the prbot admin API.
"""

import os
from pathlib import Path
from typing import Any

import httpx

from prbot.clients import (
    AccountsClient,
    AuthClient,
    ExternalAccountsClient,
    RepositoriesClient,
)
from prbot.exceptions import ConfigurationError
from prbot.token_store import TokenStore
from prbot.transport import HTTPTransport, RetryConfig

DEFAULT_BASE_URL = "http://localhost:8008"
DEFAULT_TIMEOUT = 30.0


def settings_from_env() -> dict[str, Any]:
    """
    Read client settings from environment variables.

    Environment variables:
        PRBOT_ADMIN_URL: Base URL of the bot server (default: http://localhost:8008)
        PRBOT_ADMIN_TOKEN: Initial admin bearer token (optional)
        PRBOT_TOKEN_FILE: File used to persist the bearer token (optional)
        PRBOT_TIMEOUT: Request timeout in seconds (default: 30)

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    base_url = os.environ.get("PRBOT_ADMIN_URL", DEFAULT_BASE_URL).strip()
    if not base_url.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"Invalid PRBOT_ADMIN_URL: {base_url!r}. Must start with http:// or https://"
        )

    timeout_str = os.environ.get("PRBOT_TIMEOUT")
    timeout = DEFAULT_TIMEOUT
    if timeout_str:
        try:
            timeout = float(timeout_str)
        except ValueError as e:
            raise ConfigurationError(f"Invalid PRBOT_TIMEOUT: {timeout_str!r}") from e
        if timeout <= 0:
            raise ConfigurationError(f"PRBOT_TIMEOUT must be positive, got {timeout}")

    token_file = os.environ.get("PRBOT_TOKEN_FILE")
    token_store = TokenStore(
        token=os.environ.get("PRBOT_ADMIN_TOKEN") or None,
        path=Path(token_file) if token_file else None,
    )

    return {"base_url": base_url, "timeout": timeout, "token_store": token_store}


class AdminClient:
    """
    Main client for interacting with the prbot admin API.

    Aggregates all resource clients and handles authentication.

    Example:
        ```python
        from prbot import AdminClient
        from prbot.rules import PrContext, resolve_pull_request

        with AdminClient() as client:
            client.auth.login("admin-key")

            for extended in client.repositories.list():
                ctx = PrContext(base_branch="main", head_branch="feature", author="bot")
                policy = resolve_pull_request(extended, ctx)
                print(extended.repository.path, policy)
        ```
    """

    DEFAULT_BASE_URL = DEFAULT_BASE_URL
    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token_store: TokenStore | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the admin client.

        Args:
            base_url: Base URL of the bot server (default: http://localhost:8008)
            token_store: Bearer token store (default: a fresh in-memory store)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            transport: Optional httpx transport, mainly for tests
        """
        self.base_url = base_url
        self.timeout = timeout
        self.token_store = token_store if token_store is not None else TokenStore()

        self._transport = HTTPTransport(
            base_url=base_url,
            token_store=self.token_store,
            timeout=timeout,
            retry_config=retry_config,
            transport=transport,
        )

        self.auth = AuthClient(self._transport)
        self.repositories = RepositoriesClient(self._transport)
        self.accounts = AccountsClient(self._transport)
        self.external_accounts = ExternalAccountsClient(self._transport)

    @classmethod
    def from_env(cls, retry_config: RetryConfig | None = None) -> "AdminClient":
        """
        Create a client from environment variables.

        See ``settings_from_env`` for the variables read.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        return cls(retry_config=retry_config, **settings_from_env())

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "AdminClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
