"""
prbot admin async client.

Provides the async interface for interacting with the prbot admin API.
"""

from typing import Any

import httpx

from prbot.async_clients import (
    AsyncAccountsClient,
    AsyncAuthClient,
    AsyncExternalAccountsClient,
    AsyncRepositoriesClient,
)
from prbot.async_transport import AsyncHTTPTransport
from prbot.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, settings_from_env
from prbot.token_store import TokenStore
from prbot.transport import RetryConfig


class AsyncAdminClient:
    """
    Async client for interacting with the prbot admin API.

    Aggregates all async resource clients and handles authentication.

    Example:
        ```python
        import asyncio
        from prbot import AsyncAdminClient

        async def main():
            async with AsyncAdminClient() as client:
                await client.auth.login("admin-key")
                accounts = await client.accounts.list()

        asyncio.run(main())
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
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the async admin client.

        Args:
            base_url: Base URL of the bot server (default: http://localhost:8008)
            token_store: Bearer token store (default: a fresh in-memory store)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            transport: Optional httpx async transport, mainly for tests
        """
        self.base_url = base_url
        self.timeout = timeout
        self.token_store = token_store if token_store is not None else TokenStore()

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token_store=self.token_store,
            timeout=timeout,
            retry_config=retry_config,
            transport=transport,
        )

        self.auth = AsyncAuthClient(self._transport)
        self.repositories = AsyncRepositoriesClient(self._transport)
        self.accounts = AsyncAccountsClient(self._transport)
        self.external_accounts = AsyncExternalAccountsClient(self._transport)

    @classmethod
    def from_env(cls, retry_config: RetryConfig | None = None) -> "AsyncAdminClient":
        """
        Create a client from environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        return cls(retry_config=retry_config, **settings_from_env())

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncAdminClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
