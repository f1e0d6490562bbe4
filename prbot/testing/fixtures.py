"""
Pytest fixtures for prbot admin testing.

Provides builders and fixtures for testing code that reads repositories,
rules and accounts from the prbot admin API.
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from prbot.rules.conditions import PrContext
from prbot.signers import RsaSigner
from prbot.testing.mock import MockAdminClient
from prbot.token_store import TokenStore
from prbot.types.accounts import (
    Account,
    ExtendedExternalAccount,
    ExternalAccount,
    ExternalAccountRight,
)
from prbot.types.pulls import MergeStrategy, PullRequest, QaStatus
from prbot.types.repos import ExtendedRepository, Repository
from prbot.types.rules import (
    AuthorCondition,
    BaseBranchCondition,
    HeadBranchCondition,
    MergeRule,
    Named,
    PullRequestRule,
    RuleAction,
    RuleCondition,
    SetAutomerge,
    SetNeededReviewers,
    SetQaEnabled,
    Wildcard,
)

# Smaller than production keys; only used to keep key generation fast in tests.
TEST_KEY_SIZE = 1024


# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_repository(
    repository_id: int = 1,
    owner: str = "test-owner",
    name: str = "test-repo",
    **kwargs,
) -> Repository:
    """
    Create a mock Repository for testing.

    Args:
        repository_id: Repository ID
        owner: Repository owner
        name: Repository name
        **kwargs: Any other Repository field (defaults, title regex)

    Returns:
        Repository instance
    """
    return Repository(id=repository_id, owner=owner, name=name, **kwargs)


def create_mock_pull_request(
    number: int = 1,
    repository_id: int = 1,
    qa_status: QaStatus = QaStatus.WAITING,
    strategy_override: MergeStrategy | None = None,
    **kwargs,
) -> PullRequest:
    """Create a mock PullRequest for testing."""
    values = {
        "id": number,
        "needed_reviewers_count": 2,
        "status_comment_id": 0,
        "checks_enabled": True,
        "automerge": False,
        "locked": False,
    }
    values.update(kwargs)
    return PullRequest(
        repository_id=repository_id,
        number=number,
        qa_status=qa_status,
        strategy_override=strategy_override,
        **values,
    )


def create_mock_rule(
    name: str = "test-rule",
    repository_id: int = 1,
    conditions: list[RuleCondition] | None = None,
    actions: list[RuleAction] | None = None,
) -> PullRequestRule:
    """Create a mock PullRequestRule for testing."""
    return PullRequestRule(
        repository_id=repository_id,
        name=name,
        conditions=list(conditions or []),
        actions=list(actions or []),
    )


def create_mock_merge_rule(
    base_branch: str = "*",
    head_branch: str = "*",
    strategy: MergeStrategy = MergeStrategy.MERGE,
    repository_id: int = 1,
) -> MergeRule:
    """
    Create a mock MergeRule for testing.

    Branch names are given in wire form: ``"*"`` is a wildcard.
    """

    def branch(value: str):
        return Wildcard() if value == "*" else Named(value)

    return MergeRule(
        repository_id=repository_id,
        base_branch=branch(base_branch),
        head_branch=branch(head_branch),
        strategy=strategy,
    )


def create_mock_extended_repository(
    repository_id: int = 1,
    owner: str = "test-owner",
    name: str = "test-repo",
    pull_requests: list[PullRequest] | None = None,
    merge_rules: list[MergeRule] | None = None,
    pull_request_rules: list[PullRequestRule] | None = None,
    **kwargs,
) -> ExtendedRepository:
    """Create a mock ExtendedRepository for testing."""
    return ExtendedRepository(
        repository=create_mock_repository(repository_id, owner, name, **kwargs),
        pull_requests=list(pull_requests or []),
        merge_rules=list(merge_rules or []),
        pull_request_rules=list(pull_request_rules or []),
    )


def create_mock_external_account(
    username: str = "test-integration",
    repository_ids: list[int] | None = None,
) -> ExtendedExternalAccount:
    """Create a mock ExtendedExternalAccount (without keys) for testing."""
    return ExtendedExternalAccount(
        external_account=ExternalAccount(username=username),
        rights=[
            ExternalAccountRight(username=username, repository_id=repository_id)
            for repository_id in (repository_ids or [])
        ],
    )


# ============================================================================
# Mock Client Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockAdminClient, None, None]:
    """
    Provide a logged-in MockAdminClient for testing.

    Example:
        ```python
        def test_my_feature(mock_client):
            mock_client.repositories.add(create_mock_extended_repository())
            result = my_function(mock_client)
            assert mock_client.was_called("repositories.list")
        ```
    """
    client = MockAdminClient()
    client.auth.login("test-admin-key")
    yield client
    client.reset()


@pytest.fixture
def mock_client_with_repository(
    sample_extended_repository: ExtendedRepository,
) -> MockAdminClient:
    """Provide a logged-in MockAdminClient seeded with one repository."""
    client = MockAdminClient()
    client.repositories.add(sample_extended_repository)
    client.accounts.configure_list(response=[Account(username="admin", is_admin=True)])
    client.auth.login("test-admin-key")
    return client


@pytest.fixture
def token_store(tmp_path: Path) -> TokenStore:
    """Provide a file-backed token store in a temporary directory."""
    return TokenStore(path=tmp_path / "token.json")


# ============================================================================
# Signer Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def rsa_signer() -> RsaSigner:
    """
    Provide a generated RSA signer for testing.

    Example:
        ```python
        def test_signing(rsa_signer):
            signature = rsa_signer.sign(b"test message")
            assert rsa_signer.verify(signature, b"test message")
        ```
    """
    signer, _ = RsaSigner.generate(TEST_KEY_SIZE)
    return signer


@pytest.fixture
def external_account(rsa_signer: RsaSigner) -> ExternalAccount:
    """Provide an external account holding the session RSA keypair."""
    return ExternalAccount(
        username="test-integration",
        public_key=rsa_signer.public_key_pem(),
        private_key=rsa_signer.private_key_pem(),
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_repository() -> Repository:
    """Provide a sample Repository with the server defaults."""
    return create_mock_repository()


@pytest.fixture
def sample_rules() -> list[PullRequestRule]:
    """
    Provide sample pull request rules.

    - ``main-reviews``: any pull request into main needs 3 reviewers
    - ``bot-automerge``: dependabot pull requests automerge without QA
    """
    return [
        create_mock_rule(
            name="main-reviews",
            conditions=[BaseBranchCondition(Named("main"))],
            actions=[SetNeededReviewers(3)],
        ),
        create_mock_rule(
            name="bot-automerge",
            conditions=[
                AuthorCondition("dependabot"),
                HeadBranchCondition(Wildcard()),
            ],
            actions=[SetAutomerge(True), SetQaEnabled(False)],
        ),
    ]


@pytest.fixture
def sample_merge_rules() -> list[MergeRule]:
    """Provide merge rules: rebase by default into main, squash from feature."""
    return [
        create_mock_merge_rule("main", "*", MergeStrategy.REBASE),
        create_mock_merge_rule("main", "feature", MergeStrategy.SQUASH),
    ]


@pytest.fixture
def sample_extended_repository(
    sample_rules: list[PullRequestRule],
    sample_merge_rules: list[MergeRule],
) -> ExtendedRepository:
    """Provide a repository carrying the sample rules and one pull request."""
    return create_mock_extended_repository(
        pull_requests=[create_mock_pull_request(number=42)],
        merge_rules=sample_merge_rules,
        pull_request_rules=sample_rules,
    )


@pytest.fixture
def sample_context() -> PrContext:
    """Provide a pull request context: alice's feature branch into main."""
    return PrContext(base_branch="main", head_branch="feature", author="alice")
