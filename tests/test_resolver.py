"""
Tests for pull request rule resolution.

Feature: prbot-admin
"""

import logging

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from prbot.exceptions import MergeRuleConflictError
from prbot.rules import (
    EffectivePolicy,
    PrContext,
    matching_rules,
    resolve,
    resolve_merge_strategy,
    resolve_pull_request,
)
from prbot.testing import (
    create_mock_merge_rule,
    create_mock_pull_request,
    create_mock_repository,
    create_mock_rule,
)
from prbot.types.pulls import MergeStrategy, QaStatus
from prbot.types.repos import ExtendedRepository
from prbot.types.rules import (
    AuthorCondition,
    BaseBranchCondition,
    HeadBranchCondition,
    Named,
    SetAutomerge,
    SetChecksEnabled,
    SetNeededReviewers,
    SetQaEnabled,
    Wildcard,
)

FEATURE_INTO_MAIN = PrContext(base_branch="main", head_branch="feature", author="alice")

action_strategy = st.one_of(
    st.builds(SetAutomerge, st.booleans()),
    st.builds(SetQaEnabled, st.booleans()),
    st.builds(SetChecksEnabled, st.booleans()),
    st.builds(SetNeededReviewers, st.integers(min_value=0, max_value=10)),
)
strategy_strategy = st.sampled_from(list(MergeStrategy))


# ============================================================================
# Pull request rules
# ============================================================================


class TestResolve:
    def test_no_rules_yields_repository_defaults(self) -> None:
        repository = create_mock_repository(
            default_needed_reviewers_count=1,
            default_automerge=True,
            default_enable_qa=True,
            default_enable_checks=False,
            default_strategy=MergeStrategy.REBASE,
        )

        policy = resolve([], FEATURE_INTO_MAIN, repository)

        assert policy == EffectivePolicy(
            needed_reviewers_count=1,
            automerge=True,
            qa_enabled=True,
            checks_enabled=False,
            merge_strategy=MergeStrategy.REBASE,
        )
        assert policy.applied_rules == ()
        assert policy.rule_names is None

    def test_needed_reviewers_by_author(self) -> None:
        """Rule for the bot author drops required reviews; others keep the default."""
        repository = create_mock_repository(default_needed_reviewers_count=2)
        rules = [
            create_mock_rule(
                name="bot-no-review",
                conditions=[AuthorCondition("bot")],
                actions=[SetNeededReviewers(0)],
            )
        ]

        bot = PrContext(base_branch="main", head_branch="deps", author="bot")
        alice = PrContext(base_branch="main", head_branch="deps", author="alice")

        assert resolve(rules, bot, repository).needed_reviewers_count == 0
        assert resolve(rules, alice, repository).needed_reviewers_count == 2

    def test_later_rule_wins_on_conflict(self) -> None:
        repository = create_mock_repository()
        first = create_mock_rule(name="first", actions=[SetAutomerge(True)])
        second = create_mock_rule(name="second", actions=[SetAutomerge(False)])

        assert resolve([first, second], FEATURE_INTO_MAIN, repository).automerge is False
        assert resolve([second, first], FEATURE_INTO_MAIN, repository).automerge is True

    def test_non_conflicting_actions_accumulate(self) -> None:
        repository = create_mock_repository()
        rules = [
            create_mock_rule(
                name="main",
                conditions=[BaseBranchCondition(Named("main"))],
                actions=[SetQaEnabled(True)],
            ),
            create_mock_rule(
                name="feature",
                conditions=[HeadBranchCondition(Named("feature"))],
                actions=[SetChecksEnabled(False)],
            ),
            create_mock_rule(
                name="release",
                conditions=[BaseBranchCondition(Named("release"))],
                actions=[SetNeededReviewers(5)],
            ),
        ]

        policy = resolve(rules, FEATURE_INTO_MAIN, repository)

        assert policy.qa_enabled is True
        assert policy.checks_enabled is False
        assert policy.needed_reviewers_count == repository.default_needed_reviewers_count
        assert policy.applied_rules == ("main", "feature")
        assert policy.rule_names == "main,feature"

    def test_rule_without_actions_changes_nothing(self) -> None:
        repository = create_mock_repository()
        rules = [create_mock_rule(name="noop")]

        policy = resolve(rules, FEATURE_INTO_MAIN, repository)

        assert policy == resolve([], FEATURE_INTO_MAIN, repository)
        assert policy.applied_rules == ("noop",)

    def test_initial_qa_status_follows_policy(self) -> None:
        repository = create_mock_repository(default_enable_qa=False)
        rules = [
            create_mock_rule(
                conditions=[AuthorCondition("alice")], actions=[SetQaEnabled(True)]
            )
        ]

        assert resolve(rules, FEATURE_INTO_MAIN, repository).initial_qa_status == QaStatus.WAITING
        other = PrContext(base_branch="main", head_branch="feature", author="bob")
        assert resolve(rules, other, repository).initial_qa_status == QaStatus.SKIPPED

    def test_matching_rules_logs_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        rules = [
            create_mock_rule(name="hit", conditions=[AuthorCondition("alice")]),
            create_mock_rule(name="miss", conditions=[AuthorCondition("bob")]),
        ]

        with caplog.at_level(logging.DEBUG, logger="prbot.rules"):
            matched = matching_rules(rules, FEATURE_INTO_MAIN)

        assert [r.name for r in matched] == ["hit"]
        assert "matched=['hit']" in caplog.text
        assert "skipped=['miss']" in caplog.text


@given(actions=st.lists(action_strategy, max_size=10))
@settings(max_examples=100)
def test_last_action_per_field_wins(actions: list) -> None:
    """
    Property 6: Actions fold in order

    For any sequence of actions spread over unconditional rules, each field
    of the resulting policy holds the value of the last action touching it,
    or the repository default when none does.
    """
    repository = create_mock_repository()
    rules = [create_mock_rule(name=f"rule-{i}", actions=[a]) for i, a in enumerate(actions)]

    expected = {
        "needed_reviewers_count": repository.default_needed_reviewers_count,
        "automerge": repository.default_automerge,
        "qa_enabled": repository.default_enable_qa,
        "checks_enabled": repository.default_enable_checks,
    }
    fields = {
        SetAutomerge: "automerge",
        SetQaEnabled: "qa_enabled",
        SetChecksEnabled: "checks_enabled",
        SetNeededReviewers: "needed_reviewers_count",
    }
    for action in actions:
        expected[fields[type(action)]] = action.value

    policy = resolve(rules, FEATURE_INTO_MAIN, repository)

    assert policy == EffectivePolicy(merge_strategy=repository.default_strategy, **expected)


@given(actions=st.lists(action_strategy, min_size=1, max_size=5))
@settings(max_examples=100)
def test_non_matching_rules_have_no_effect(actions: list) -> None:
    """
    Property 7: Rules whose conditions fail never contribute actions
    """
    repository = create_mock_repository()
    rules = [
        create_mock_rule(
            name="other-author",
            conditions=[AuthorCondition(FEATURE_INTO_MAIN.author + "-not")],
            actions=actions,
        )
    ]

    assert resolve(rules, FEATURE_INTO_MAIN, repository) == resolve(
        [], FEATURE_INTO_MAIN, repository
    )


@given(actions=st.lists(action_strategy, max_size=8))
@settings(max_examples=50)
def test_resolution_is_deterministic(actions: list) -> None:
    """
    Property 8: Resolving the same input twice gives equal policies
    """
    repository = create_mock_repository()
    rules = [create_mock_rule(name=f"r{i}", actions=[a]) for i, a in enumerate(actions)]

    assert resolve(rules, FEATURE_INTO_MAIN, repository) == resolve(
        rules, FEATURE_INTO_MAIN, repository
    )


# ============================================================================
# Merge strategy
# ============================================================================


class TestResolveMergeStrategy:
    def test_default_when_no_rule_matches(self) -> None:
        rules = [create_mock_merge_rule("release", "*", MergeStrategy.SQUASH)]

        assert (
            resolve_merge_strategy(rules, FEATURE_INTO_MAIN, MergeStrategy.REBASE)
            == MergeStrategy.REBASE
        )

    def test_most_specific_rule_wins(self) -> None:
        rules = [
            create_mock_merge_rule("main", "*", MergeStrategy.MERGE),
            create_mock_merge_rule("main", "feature", MergeStrategy.SQUASH),
        ]

        assert (
            resolve_merge_strategy(rules, FEATURE_INTO_MAIN, MergeStrategy.REBASE)
            == MergeStrategy.SQUASH
        )
        # Declaration order does not matter
        assert (
            resolve_merge_strategy(rules[::-1], FEATURE_INTO_MAIN, MergeStrategy.REBASE)
            == MergeStrategy.SQUASH
        )

    def test_half_wildcard_beats_full_wildcard(self) -> None:
        rules = [
            create_mock_merge_rule("*", "*", MergeStrategy.REBASE),
            create_mock_merge_rule("*", "feature", MergeStrategy.SQUASH),
        ]

        assert (
            resolve_merge_strategy(rules, FEATURE_INTO_MAIN, MergeStrategy.MERGE)
            == MergeStrategy.SQUASH
        )

    def test_tie_with_different_strategies_raises(self) -> None:
        rules = [
            create_mock_merge_rule("main", "*", MergeStrategy.MERGE),
            create_mock_merge_rule("*", "feature", MergeStrategy.SQUASH),
        ]

        with pytest.raises(MergeRuleConflictError) as exc_info:
            resolve_merge_strategy(rules, FEATURE_INTO_MAIN, MergeStrategy.REBASE)

        assert exc_info.value.code == "MERGE_RULE_CONFLICT"
        assert exc_info.value.rules == rules

    @pytest.mark.parametrize("base, head", [("main", "feature"), ("*", "*")])
    def test_same_pair_with_different_strategies_raises(self, base: str, head: str) -> None:
        rules = [
            create_mock_merge_rule(base, head, MergeStrategy.MERGE),
            create_mock_merge_rule(base, head, MergeStrategy.SQUASH),
        ]

        with pytest.raises(MergeRuleConflictError) as exc_info:
            resolve_merge_strategy(rules, FEATURE_INTO_MAIN, MergeStrategy.REBASE)

        assert exc_info.value.rules == rules

    def test_tie_with_same_strategy_is_not_a_conflict(self) -> None:
        rules = [
            create_mock_merge_rule("main", "*", MergeStrategy.SQUASH),
            create_mock_merge_rule("*", "feature", MergeStrategy.SQUASH),
        ]

        assert (
            resolve_merge_strategy(rules, FEATURE_INTO_MAIN, MergeStrategy.REBASE)
            == MergeStrategy.SQUASH
        )

    def test_less_specific_tie_is_ignored_when_a_better_rule_matches(self) -> None:
        rules = [
            create_mock_merge_rule("main", "*", MergeStrategy.MERGE),
            create_mock_merge_rule("*", "feature", MergeStrategy.SQUASH),
            create_mock_merge_rule("main", "feature", MergeStrategy.REBASE),
        ]

        assert (
            resolve_merge_strategy(rules, FEATURE_INTO_MAIN, MergeStrategy.MERGE)
            == MergeStrategy.REBASE
        )

    def test_override_wins_and_skips_conflicts(self) -> None:
        rules = [
            create_mock_merge_rule("main", "*", MergeStrategy.MERGE),
            create_mock_merge_rule("*", "feature", MergeStrategy.SQUASH),
        ]

        assert (
            resolve_merge_strategy(
                rules,
                FEATURE_INTO_MAIN,
                MergeStrategy.MERGE,
                strategy_override=MergeStrategy.REBASE,
            )
            == MergeStrategy.REBASE
        )


@given(
    default=strategy_strategy,
    override=strategy_strategy,
    rule_strategy=strategy_strategy,
)
@settings(max_examples=100)
def test_override_takes_absolute_precedence(
    default: MergeStrategy, override: MergeStrategy, rule_strategy: MergeStrategy
) -> None:
    """
    Property 9: A pull request strategy override always wins
    """
    rules = [create_mock_merge_rule("main", "feature", rule_strategy)]

    assert (
        resolve_merge_strategy(rules, FEATURE_INTO_MAIN, default, strategy_override=override)
        == override
    )


# ============================================================================
# Fetched repositories
# ============================================================================


class TestResolvePullRequest:
    def test_uses_repository_rules(
        self, sample_extended_repository: ExtendedRepository
    ) -> None:
        policy = resolve_pull_request(sample_extended_repository, FEATURE_INTO_MAIN)

        assert policy.needed_reviewers_count == 3
        assert policy.merge_strategy == MergeStrategy.SQUASH
        assert policy.applied_rules == ("main-reviews",)

    def test_bot_rules(self, sample_extended_repository: ExtendedRepository) -> None:
        ctx = PrContext(base_branch="main", head_branch="deps", author="dependabot")

        policy = resolve_pull_request(sample_extended_repository, ctx)

        assert policy.automerge is True
        assert policy.qa_enabled is False
        assert policy.merge_strategy == MergeStrategy.REBASE
        assert policy.rule_names == "main-reviews,bot-automerge"

    def test_pull_request_override(
        self, sample_extended_repository: ExtendedRepository
    ) -> None:
        pull_request = create_mock_pull_request(strategy_override=MergeStrategy.MERGE)

        policy = resolve_pull_request(
            sample_extended_repository, FEATURE_INTO_MAIN, pull_request
        )

        assert policy.merge_strategy == MergeStrategy.MERGE

    def test_pull_request_without_override(
        self, sample_extended_repository: ExtendedRepository
    ) -> None:
        pull_request = create_mock_pull_request()

        policy = resolve_pull_request(
            sample_extended_repository, FEATURE_INTO_MAIN, pull_request
        )

        assert policy.merge_strategy == MergeStrategy.SQUASH


def test_rules_of_other_repositories_are_ignored() -> None:
    repository = create_mock_repository(repository_id=1)
    rules = [
        create_mock_rule(name="own", actions=[SetNeededReviewers(4)]),
        create_mock_rule(name="foreign", repository_id=2, actions=[SetAutomerge(True)]),
    ]
    merge_rules = [
        create_mock_merge_rule("main", "*", MergeStrategy.REBASE),
        create_mock_merge_rule("main", "feature", MergeStrategy.SQUASH, repository_id=2),
    ]

    policy = resolve(rules, FEATURE_INTO_MAIN, repository, merge_rules=merge_rules)

    assert policy.applied_rules == ("own",)
    assert policy.needed_reviewers_count == 4
    assert policy.automerge is repository.default_automerge
    assert policy.merge_strategy == MergeStrategy.REBASE
