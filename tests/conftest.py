"""Shared fixtures for the prbot admin test suite."""

from prbot.testing.conftest import (  # noqa: F401
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
