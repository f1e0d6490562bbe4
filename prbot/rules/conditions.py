"""Rule condition evaluation against a pull request context."""

from collections.abc import Iterable
from dataclasses import dataclass

from prbot.rules.branches import matches
from prbot.types.rules import (
    AuthorCondition,
    BaseBranchCondition,
    HeadBranchCondition,
    RuleCondition,
)


@dataclass(frozen=True)
class PrContext:
    """The pull request facts rule conditions are evaluated against."""

    base_branch: str
    head_branch: str
    author: str

    def __str__(self) -> str:
        return f"{self.author}:{self.head_branch} -> {self.base_branch}"


def evaluate(condition: RuleCondition, ctx: PrContext) -> bool:
    """
    Check whether a single condition holds for a pull request.

    Args:
        condition: Base branch, head branch or author condition
        ctx: Pull request context

    Returns:
        True if the condition holds
    """
    if isinstance(condition, BaseBranchCondition):
        return matches(condition.branch, ctx.base_branch)
    if isinstance(condition, HeadBranchCondition):
        return matches(condition.branch, ctx.head_branch)
    if isinstance(condition, AuthorCondition):
        return ctx.author == condition.author
    raise TypeError(f"Unknown rule condition: {type(condition).__name__}")


def evaluate_all(conditions: Iterable[RuleCondition], ctx: PrContext) -> bool:
    """Conjunction of all conditions; an empty set always holds."""
    return all(evaluate(c, ctx) for c in conditions)
