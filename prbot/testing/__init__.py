"""prbot admin testing utilities.

Provides a mock client and fixtures for testing applications that use the
prbot admin client.
"""

from prbot.testing.fixtures import (
    create_mock_extended_repository,
    create_mock_external_account,
    create_mock_merge_rule,
    create_mock_pull_request,
    create_mock_repository,
    create_mock_rule,
)
from prbot.testing.mock import MockAdminClient, MockCall, MockResponse

__all__ = [
    # Mock client
    "MockAdminClient",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_repository",
    "create_mock_pull_request",
    "create_mock_rule",
    "create_mock_merge_rule",
    "create_mock_extended_repository",
    "create_mock_external_account",
]
