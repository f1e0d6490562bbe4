"""
Pytest plugin for prbot admin testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["prbot.testing.conftest"]

Or import the fixtures directly:

    from prbot.testing.fixtures import mock_client, sample_repository
"""

# Re-export all fixtures for pytest auto-discovery
from prbot.testing.fixtures import (
    external_account,
    mock_client,
    mock_client_with_repository,
    rsa_signer,
    sample_context,
    sample_extended_repository,
    sample_merge_rules,
    sample_repository,
    sample_rules,
    token_store,
)

__all__ = [
    "external_account",
    "mock_client",
    "mock_client_with_repository",
    "rsa_signer",
    "sample_context",
    "sample_extended_repository",
    "sample_merge_rules",
    "sample_repository",
    "sample_rules",
    "token_store",
]
