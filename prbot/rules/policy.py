"""Effective pull request policy."""

import re
from dataclasses import dataclass, field

from prbot.exceptions import InvalidTitlePatternError
from prbot.types.pulls import MergeStrategy, QaStatus


@dataclass(frozen=True)
class EffectivePolicy:
    """
    Fully resolved settings for one pull request.

    Equality is structural over the five settings; ``applied_rules`` is
    informational and does not take part in comparisons.
    """

    needed_reviewers_count: int
    automerge: bool
    qa_enabled: bool
    checks_enabled: bool
    merge_strategy: MergeStrategy
    applied_rules: tuple[str, ...] = field(default=(), compare=False)

    @property
    def initial_qa_status(self) -> QaStatus:
        """QA status a new pull request starts with under this policy."""
        return QaStatus.WAITING if self.qa_enabled else QaStatus.SKIPPED

    @property
    def rule_names(self) -> str | None:
        if not self.applied_rules:
            return None
        return ",".join(self.applied_rules)


def check_pr_title(title: str, pattern: str) -> bool:
    """
    Validate a pull request title against a repository pattern.

    An empty pattern accepts every title.

    Raises:
        InvalidTitlePatternError: If the pattern does not compile
    """
    if not pattern:
        return True
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise InvalidTitlePatternError(pattern, str(e)) from e
    return compiled.search(title) is not None
