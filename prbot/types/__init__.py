"""prbot admin type definitions.

This module exports all data model types used by the client and the
rule resolution engine.
"""

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
    RuleBranch,
    RuleCondition,
    SetAutomerge,
    SetChecksEnabled,
    SetNeededReviewers,
    SetQaEnabled,
    Wildcard,
    parse_branch,
)

__all__ = [
    # Repository types
    "Repository",
    "ExtendedRepository",
    # Pull request types
    "PullRequest",
    "MergeStrategy",
    "QaStatus",
    # Rule types
    "RuleBranch",
    "Wildcard",
    "Named",
    "parse_branch",
    "RuleCondition",
    "BaseBranchCondition",
    "HeadBranchCondition",
    "AuthorCondition",
    "RuleAction",
    "SetAutomerge",
    "SetQaEnabled",
    "SetChecksEnabled",
    "SetNeededReviewers",
    "PullRequestRule",
    "MergeRule",
    # Account types
    "Account",
    "ExternalAccount",
    "ExternalAccountRight",
    "ExtendedExternalAccount",
]
