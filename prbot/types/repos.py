"""Repository-related data models."""

from dataclasses import dataclass, field
from typing import Any

from prbot.types.pulls import (
    MergeStrategy,
    PullRequest,
    parse_pull_request,
    pull_request_to_json,
)
from prbot.types.rules import (
    MergeRule,
    PullRequestRule,
    merge_rule_to_json,
    parse_merge_rule,
    parse_pull_request_rule,
    pull_request_rule_to_json,
)


@dataclass
class Repository:
    """Repository settings; defaults apply to every new pull request."""

    id: int
    owner: str
    name: str
    manual_interaction: bool = False
    pr_title_validation_regex: str = ""
    default_strategy: MergeStrategy = MergeStrategy.MERGE
    default_needed_reviewers_count: int = 2
    default_automerge: bool = False
    default_enable_qa: bool = False
    default_enable_checks: bool = True

    @property
    def path(self) -> str:
        """Repository path as ``owner/name``."""
        return f"{self.owner}/{self.name}"


@dataclass
class ExtendedRepository:
    """Repository bundled with its pull requests and rules."""

    repository: Repository
    pull_requests: list[PullRequest] = field(default_factory=list)
    merge_rules: list[MergeRule] = field(default_factory=list)
    pull_request_rules: list[PullRequestRule] = field(default_factory=list)

    def get_pull_request(self, number: int) -> PullRequest | None:
        for pull_request in self.pull_requests:
            if pull_request.number == number:
                return pull_request
        return None

    def get_rule(self, name: str) -> PullRequestRule | None:
        for rule in self.pull_request_rules:
            if rule.name == name:
                return rule
        return None


def parse_repository(data: dict[str, Any]) -> Repository:
    """Parse a repository as returned by the admin API."""
    return Repository(
        id=data["id"],
        owner=data["owner"],
        name=data["name"],
        manual_interaction=data.get("manual_interaction", False),
        pr_title_validation_regex=data.get("pr_title_validation_regex") or "",
        default_strategy=MergeStrategy(data["default_strategy"]),
        default_needed_reviewers_count=data["default_needed_reviewers_count"],
        default_automerge=data["default_automerge"],
        default_enable_qa=data["default_enable_qa"],
        default_enable_checks=data["default_enable_checks"],
    )


def repository_to_json(repository: Repository) -> dict[str, Any]:
    return {
        "id": repository.id,
        "owner": repository.owner,
        "name": repository.name,
        "manual_interaction": repository.manual_interaction,
        "pr_title_validation_regex": repository.pr_title_validation_regex,
        "default_strategy": repository.default_strategy.value,
        "default_needed_reviewers_count": repository.default_needed_reviewers_count,
        "default_automerge": repository.default_automerge,
        "default_enable_qa": repository.default_enable_qa,
        "default_enable_checks": repository.default_enable_checks,
    }


def parse_extended_repository(data: dict[str, Any]) -> ExtendedRepository:
    """Parse an entry of the ``/admin/repositories/`` listing."""
    return ExtendedRepository(
        repository=parse_repository(data["repository"]),
        pull_requests=[parse_pull_request(p) for p in data.get("pull_requests", [])],
        merge_rules=[parse_merge_rule(r) for r in data.get("merge_rules", [])],
        pull_request_rules=[
            parse_pull_request_rule(r) for r in data.get("pull_request_rules", [])
        ],
    )


def extended_repository_to_json(extended: ExtendedRepository) -> dict[str, Any]:
    return {
        "repository": repository_to_json(extended.repository),
        "pull_requests": [pull_request_to_json(p) for p in extended.pull_requests],
        "merge_rules": [merge_rule_to_json(r) for r in extended.merge_rules],
        "pull_request_rules": [
            pull_request_rule_to_json(r) for r in extended.pull_request_rules
        ],
    }
