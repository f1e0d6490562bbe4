"""prbot admin async resource clients."""

from prbot.async_clients.accounts import AsyncAccountsClient, AsyncExternalAccountsClient
from prbot.async_clients.auth import AsyncAuthClient
from prbot.async_clients.repositories import (
    AsyncPullRequestRulesClient,
    AsyncRepositoriesClient,
    AsyncRepositoryDetailClient,
)

__all__ = [
    "AsyncAuthClient",
    "AsyncRepositoriesClient",
    "AsyncRepositoryDetailClient",
    "AsyncPullRequestRulesClient",
    "AsyncAccountsClient",
    "AsyncExternalAccountsClient",
]
