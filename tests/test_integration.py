"""
Integration tests for the prbot admin client.

These tests run against a running bot server and verify end-to-end workflows.
They need an admin key in PRBOT_ADMIN_KEY and a repository registered on the
server (PRBOT_TEST_REPOSITORY, as ``owner/name``).
"""

import os
import uuid

import pytest

from prbot.client import AdminClient
from prbot.exceptions import AuthenticationError, NotFoundError
from prbot.rules import PrContext, resolve_pull_request
from prbot.types.rules import AuthorCondition, PullRequestRule, SetNeededReviewers

# Skip all integration tests if the server is not available
pytestmark = pytest.mark.skipif(
    os.environ.get("PRBOT_INTEGRATION_TESTS") != "1",
    reason="Integration tests require PRBOT_INTEGRATION_TESTS=1 and a running bot",
)


def get_base_url() -> str:
    return os.environ.get("PRBOT_ADMIN_URL", "http://localhost:8008")


def generate_unique_name(prefix: str) -> str:
    """Generate a unique name for test resources."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def client():
    with AdminClient(base_url=get_base_url()) as client:
        client.auth.login(os.environ["PRBOT_ADMIN_KEY"])
        yield client


@pytest.fixture
def repository_path() -> tuple[str, str]:
    owner, _, name = os.environ.get("PRBOT_TEST_REPOSITORY", "").partition("/")
    if not owner or not name:
        pytest.skip("PRBOT_TEST_REPOSITORY is not set")
    return owner, name


class TestAuthentication:
    def test_invalid_key_rejected(self) -> None:
        with AdminClient(base_url=get_base_url()) as client:
            with pytest.raises(AuthenticationError):
                client.auth.login(generate_unique_name("wrong-key"))
                client.accounts.list()

    def test_list_accounts(self, client: AdminClient) -> None:
        accounts = client.accounts.list()
        assert all(account.username for account in accounts)


class TestRuleLifecycle:
    def test_create_resolve_delete(
        self, client: AdminClient, repository_path: tuple[str, str]
    ) -> None:
        """Create a rule → it shows up and applies → delete it."""
        extended = client.repositories.find(*repository_path)
        repository_id = extended.repository.id
        author = generate_unique_name("author")
        rule = PullRequestRule(
            repository_id=repository_id,
            name=generate_unique_name("it-rule"),
            conditions=[AuthorCondition(author)],
            actions=[SetNeededReviewers(0)],
        )
        rules = client.repositories.with_id(repository_id).pull_request_rules

        rules.create(rule)
        try:
            refreshed = client.repositories.get(repository_id)
            assert refreshed.get_rule(rule.name) is not None

            ctx = PrContext(base_branch="main", head_branch="feature", author=author)
            policy = resolve_pull_request(refreshed, ctx)
            assert policy.needed_reviewers_count == 0
            assert rule.name in policy.applied_rules
        finally:
            rules.delete(rule)

        assert client.repositories.get(repository_id).get_rule(rule.name) is None

    def test_unknown_repository(self, client: AdminClient) -> None:
        with pytest.raises(NotFoundError):
            client.repositories.find("no-such-owner", generate_unique_name("repo"))
