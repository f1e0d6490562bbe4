"""Pull request-related data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MergeStrategy(str, Enum):
    """How a pull request's commits are integrated into the base branch."""

    MERGE = "merge"
    SQUASH = "squash"
    REBASE = "rebase"


class QaStatus(str, Enum):
    """Quality-assurance signal recorded per pull request."""

    WAITING = "waiting"
    SKIPPED = "skipped"
    PASS = "pass"
    FAIL = "fail"


@dataclass
class PullRequest:
    """Pull request state tracked by the bot."""

    id: int
    repository_id: int
    number: int
    qa_status: QaStatus
    needed_reviewers_count: int
    status_comment_id: int
    checks_enabled: bool
    automerge: bool
    locked: bool
    strategy_override: MergeStrategy | None = None


def parse_pull_request(data: dict[str, Any]) -> PullRequest:
    """Parse a pull request as returned by the admin API."""
    override = data.get("strategy_override")
    return PullRequest(
        id=data["id"],
        repository_id=data["repository_id"],
        number=data["number"],
        qa_status=QaStatus(data["qa_status"]),
        needed_reviewers_count=data["needed_reviewers_count"],
        status_comment_id=data.get("status_comment_id", 0),
        checks_enabled=data["checks_enabled"],
        automerge=data["automerge"],
        locked=data["locked"],
        strategy_override=MergeStrategy(override) if override else None,
    )


def pull_request_to_json(pull_request: PullRequest) -> dict[str, Any]:
    override = pull_request.strategy_override
    return {
        "id": pull_request.id,
        "repository_id": pull_request.repository_id,
        "number": pull_request.number,
        "qa_status": pull_request.qa_status.value,
        "needed_reviewers_count": pull_request.needed_reviewers_count,
        "status_comment_id": pull_request.status_comment_id,
        "checks_enabled": pull_request.checks_enabled,
        "automerge": pull_request.automerge,
        "locked": pull_request.locked,
        "strategy_override": override.value if override else None,
    }
