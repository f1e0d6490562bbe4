"""prbot admin resource clients."""

from prbot.clients.accounts import AccountsClient, ExternalAccountsClient
from prbot.clients.auth import AuthClient
from prbot.clients.repositories import (
    PullRequestRulesClient,
    RepositoriesClient,
    RepositoryDetailClient,
)

__all__ = [
    "AuthClient",
    "RepositoriesClient",
    "RepositoryDetailClient",
    "PullRequestRulesClient",
    "AccountsClient",
    "ExternalAccountsClient",
]
