"""Rule-related data models.

Branch selectors, pull request rule conditions/actions and merge rules,
together with their JSON wire format.

Wire format:
    RuleBranch:    "*" (wildcard) or the branch name. The tagged object
                   form {"kind": "wildcard"} / {"kind": "named", "name": ...}
                   is accepted on input.
    RuleCondition: {"base_branch": <branch>} | {"head_branch": <branch>}
                   | {"author": "<login>"}
    RuleAction:    {"set_automerge": bool} | {"set_qa_enabled": bool}
                   | {"set_checks_enabled": bool}
                   | {"set_needed_reviewers": int}
"""

from dataclasses import dataclass, field
from typing import Any, Union

from prbot.types.pulls import MergeStrategy

WILDCARD_NAME = "*"


@dataclass(frozen=True)
class Wildcard:
    """Matches any branch."""

    @property
    def name(self) -> str:
        return WILDCARD_NAME

    def __str__(self) -> str:
        return WILDCARD_NAME


@dataclass(frozen=True)
class Named:
    """Matches exactly one branch name."""

    branch: str

    @property
    def name(self) -> str:
        return self.branch

    def __str__(self) -> str:
        return self.branch


RuleBranch = Union[Wildcard, Named]


@dataclass(frozen=True)
class BaseBranchCondition:
    """Holds when the pull request targets a matching base branch."""

    branch: RuleBranch


@dataclass(frozen=True)
class HeadBranchCondition:
    """Holds when the pull request comes from a matching head branch."""

    branch: RuleBranch


@dataclass(frozen=True)
class AuthorCondition:
    """Holds when the pull request author login is exactly ``author``."""

    author: str


RuleCondition = Union[BaseBranchCondition, HeadBranchCondition, AuthorCondition]


@dataclass(frozen=True)
class SetAutomerge:
    value: bool


@dataclass(frozen=True)
class SetQaEnabled:
    value: bool


@dataclass(frozen=True)
class SetChecksEnabled:
    value: bool


@dataclass(frozen=True)
class SetNeededReviewers:
    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"needed reviewers must be >= 0, got {self.value}")


RuleAction = Union[SetAutomerge, SetQaEnabled, SetChecksEnabled, SetNeededReviewers]


@dataclass
class PullRequestRule:
    """A named set of conditions (AND-ed) mapped to actions."""

    repository_id: int
    name: str
    conditions: list[RuleCondition] = field(default_factory=list)
    actions: list[RuleAction] = field(default_factory=list)


@dataclass
class MergeRule:
    """Merge strategy selected for a (base, head) branch pair."""

    repository_id: int
    base_branch: RuleBranch
    head_branch: RuleBranch
    strategy: MergeStrategy


_CONDITION_KEYS = {
    "base_branch": BaseBranchCondition,
    "head_branch": HeadBranchCondition,
}

_BOOL_ACTIONS: dict[str, type] = {
    "set_automerge": SetAutomerge,
    "set_qa_enabled": SetQaEnabled,
    "set_checks_enabled": SetChecksEnabled,
}

_ACTION_KEYS: dict[type, str] = {
    SetAutomerge: "set_automerge",
    SetQaEnabled: "set_qa_enabled",
    SetChecksEnabled: "set_checks_enabled",
    SetNeededReviewers: "set_needed_reviewers",
}


def parse_branch(value: Any) -> RuleBranch:
    """Parse a branch selector from its string or tagged-object form."""
    if isinstance(value, str):
        if value == WILDCARD_NAME:
            return Wildcard()
        if not value:
            raise ValueError("branch name cannot be empty")
        return Named(value)

    if isinstance(value, dict):
        kind = value.get("kind")
        if kind == "wildcard":
            return Wildcard()
        if kind == "named":
            name = value.get("name")
            if not isinstance(name, str) or not name:
                raise ValueError(f"named branch requires a non-empty name: {value!r}")
            return Named(name)
        raise ValueError(f"unknown branch kind: {kind!r}")

    raise ValueError(f"invalid branch selector: {value!r}")


def branch_to_json(branch: RuleBranch) -> str:
    return branch.name


def _single_entry(data: Any, what: str) -> tuple[str, Any]:
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"{what} must be an object with exactly one key: {data!r}")
    return next(iter(data.items()))


def parse_condition(data: Any) -> RuleCondition:
    """Parse a single-key condition object."""
    key, value = _single_entry(data, "rule condition")

    if key in _CONDITION_KEYS:
        return _CONDITION_KEYS[key](parse_branch(value))
    if key == "author":
        if not isinstance(value, str):
            raise ValueError(f"author must be a string: {value!r}")
        return AuthorCondition(value)

    raise ValueError(f"unknown rule condition: {key!r}")


def condition_to_json(condition: RuleCondition) -> dict[str, Any]:
    if isinstance(condition, BaseBranchCondition):
        return {"base_branch": branch_to_json(condition.branch)}
    if isinstance(condition, HeadBranchCondition):
        return {"head_branch": branch_to_json(condition.branch)}
    return {"author": condition.author}


def parse_action(data: Any) -> RuleAction:
    """Parse a single-key action object."""
    key, value = _single_entry(data, "rule action")

    if key in _BOOL_ACTIONS:
        if not isinstance(value, bool):
            raise ValueError(f"{key} expects a boolean: {value!r}")
        return _BOOL_ACTIONS[key](value)
    if key == "set_needed_reviewers":
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{key} expects an integer: {value!r}")
        return SetNeededReviewers(value)

    raise ValueError(f"unknown rule action: {key!r}")


def action_to_json(action: RuleAction) -> dict[str, Any]:
    return {_ACTION_KEYS[type(action)]: action.value}


def parse_pull_request_rule(data: dict[str, Any]) -> PullRequestRule:
    """Parse a pull request rule as returned by the admin API."""
    return PullRequestRule(
        repository_id=data["repository_id"],
        name=data["name"],
        conditions=[parse_condition(c) for c in data.get("conditions", [])],
        actions=[parse_action(a) for a in data.get("actions", [])],
    )


def pull_request_rule_to_json(rule: PullRequestRule) -> dict[str, Any]:
    return {
        "repository_id": rule.repository_id,
        "name": rule.name,
        "conditions": [condition_to_json(c) for c in rule.conditions],
        "actions": [action_to_json(a) for a in rule.actions],
    }


def parse_merge_rule(data: dict[str, Any]) -> MergeRule:
    """Parse a merge rule as returned by the admin API."""
    return MergeRule(
        repository_id=data["repository_id"],
        base_branch=parse_branch(data["base_branch"]),
        head_branch=parse_branch(data["head_branch"]),
        strategy=MergeStrategy(data["strategy"]),
    )


def merge_rule_to_json(rule: MergeRule) -> dict[str, Any]:
    return {
        "repository_id": rule.repository_id,
        "base_branch": branch_to_json(rule.base_branch),
        "head_branch": branch_to_json(rule.head_branch),
        "strategy": rule.strategy.value,
    }
