"""Pull request rule resolution engine."""

from prbot.rules.branches import matches, specificity
from prbot.rules.conditions import PrContext, evaluate, evaluate_all
from prbot.rules.policy import EffectivePolicy, check_pr_title
from prbot.rules.resolver import (
    matching_rules,
    resolve,
    resolve_merge_strategy,
    resolve_pull_request,
)

__all__ = [
    "matches",
    "specificity",
    "PrContext",
    "evaluate",
    "evaluate_all",
    "EffectivePolicy",
    "check_pr_title",
    "matching_rules",
    "resolve",
    "resolve_merge_strategy",
    "resolve_pull_request",
]
