"""
Pull request rule resolution.

Turns a repository's defaults, its pull request rules and its merge rules
into the effective policy for one pull request.

Resolution order:
1. Keep the rules whose conditions all hold for the context
2. Seed settings from the repository defaults
3. Apply the kept rules' actions in input order (later rules win)
4. Pick the merge strategy: pull request override, else the most specific
   matching merge rule, else the repository default strategy
"""

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from prbot.exceptions import MergeRuleConflictError
from prbot.logging import get_logger, log_rule_resolution
from prbot.rules.branches import matches, specificity
from prbot.rules.conditions import PrContext, evaluate_all
from prbot.rules.policy import EffectivePolicy
from prbot.types.pulls import MergeStrategy, PullRequest
from prbot.types.repos import ExtendedRepository, Repository
from prbot.types.rules import (
    MergeRule,
    PullRequestRule,
    RuleAction,
    SetAutomerge,
    SetChecksEnabled,
    SetNeededReviewers,
    SetQaEnabled,
)

logger = get_logger("rules")

RuleT = TypeVar("RuleT", PullRequestRule, MergeRule)


def matching_rules(
    rules: Iterable[PullRequestRule], ctx: PrContext
) -> list[PullRequestRule]:
    """
    Select the rules whose conditions all hold for a pull request.

    Args:
        rules: Rules in declaration order
        ctx: Pull request context

    Returns:
        Matching rules, in input order
    """
    matched: list[PullRequestRule] = []
    skipped: list[str] = []
    for rule in rules:
        if evaluate_all(rule.conditions, ctx):
            matched.append(rule)
        else:
            skipped.append(rule.name)

    log_rule_resolution(ctx, [r.name for r in matched], skipped)
    return matched


def _apply_action(settings: dict[str, Any], action: RuleAction) -> None:
    if isinstance(action, SetAutomerge):
        settings["automerge"] = action.value
    elif isinstance(action, SetQaEnabled):
        settings["qa_enabled"] = action.value
    elif isinstance(action, SetChecksEnabled):
        settings["checks_enabled"] = action.value
    elif isinstance(action, SetNeededReviewers):
        settings["needed_reviewers_count"] = action.value
    else:
        raise TypeError(f"Unknown rule action: {type(action).__name__}")


def _own_rules(rules: Iterable[RuleT], repository: Repository) -> list[RuleT]:
    own = []
    for rule in rules:
        if rule.repository_id == repository.id:
            own.append(rule)
        else:
            logger.debug(
                "Ignoring rule of repository %s while resolving %s",
                rule.repository_id,
                repository.path,
            )
    return own


def resolve_merge_strategy(
    merge_rules: Iterable[MergeRule],
    ctx: PrContext,
    default_strategy: MergeStrategy,
    strategy_override: MergeStrategy | None = None,
) -> MergeStrategy:
    """
    Determine the merge strategy for a pull request.

    A pull request override always wins and skips the merge rule lookup.
    Otherwise the matching merge rule with the most named branches wins
    (named/named, then named/wildcard or wildcard/named, then
    wildcard/wildcard). With no matching rule, the default applies.

    Rules are not checked against a repository; pass the merge rules of
    the repository being resolved, as `resolve` does.

    Args:
        merge_rules: The repository's merge rules
        ctx: Pull request context
        default_strategy: Repository default strategy
        strategy_override: Strategy forced on the pull request, if any

    Returns:
        The merge strategy to use

    Raises:
        MergeRuleConflictError: If equally specific matching rules select
            different strategies
    """
    if strategy_override is not None:
        return strategy_override

    candidates = [
        rule
        for rule in merge_rules
        if matches(rule.base_branch, ctx.base_branch)
        and matches(rule.head_branch, ctx.head_branch)
    ]
    if not candidates:
        return default_strategy

    def score(rule: MergeRule) -> int:
        return specificity(rule.base_branch) + specificity(rule.head_branch)

    top = max(score(rule) for rule in candidates)
    best = [rule for rule in candidates if score(rule) == top]

    strategies = {rule.strategy for rule in best}
    if len(strategies) > 1:
        pairs = ", ".join(
            f"({r.base_branch}, {r.head_branch}) -> {r.strategy.value}" for r in best
        )
        raise MergeRuleConflictError(
            f"Conflicting merge rules for {ctx.head_branch} -> {ctx.base_branch}: {pairs}",
            best,
        )

    return best[0].strategy


def resolve(
    rules: Sequence[PullRequestRule],
    ctx: PrContext,
    repository: Repository,
    merge_rules: Iterable[MergeRule] = (),
    strategy_override: MergeStrategy | None = None,
) -> EffectivePolicy:
    """
    Resolve the effective policy for a pull request.

    Rules and merge rules of other repositories are ignored.

    Args:
        rules: Pull request rules in declaration order
        ctx: Pull request context
        repository: Repository whose defaults seed the policy
        merge_rules: Merge rules used to pick the strategy
        strategy_override: Strategy forced on the pull request, if any

    Returns:
        The resolved EffectivePolicy

    Raises:
        MergeRuleConflictError: If the merge strategy is ambiguous
    """
    rules = _own_rules(rules, repository)
    merge_rules = _own_rules(merge_rules, repository)
    matched = matching_rules(rules, ctx)

    settings: dict[str, Any] = {
        "needed_reviewers_count": repository.default_needed_reviewers_count,
        "automerge": repository.default_automerge,
        "qa_enabled": repository.default_enable_qa,
        "checks_enabled": repository.default_enable_checks,
    }
    for rule in matched:
        for action in rule.actions:
            _apply_action(settings, action)

    strategy = resolve_merge_strategy(
        merge_rules, ctx, repository.default_strategy, strategy_override
    )

    policy = EffectivePolicy(
        merge_strategy=strategy,
        applied_rules=tuple(rule.name for rule in matched),
        **settings,
    )
    logger.debug("Resolved policy for %s on %s: %s", ctx, repository.path, policy)
    return policy


def resolve_pull_request(
    extended: ExtendedRepository,
    ctx: PrContext,
    pull_request: PullRequest | None = None,
) -> EffectivePolicy:
    """
    Resolve the policy for a pull request of a fetched repository.

    Args:
        extended: Repository with its rules, as listed by the admin API
        ctx: Pull request context
        pull_request: Tracked pull request, for its strategy override

    Returns:
        The resolved EffectivePolicy
    """
    override = pull_request.strategy_override if pull_request is not None else None
    return resolve(
        extended.pull_request_rules,
        ctx,
        extended.repository,
        merge_rules=extended.merge_rules,
        strategy_override=override,
    )
