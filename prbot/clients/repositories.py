"""Repositories resource client."""

from typing import TYPE_CHECKING
from urllib.parse import quote

from prbot.clients._decode import decode_list, decode_one
from prbot.exceptions import NotFoundError
from prbot.types.repos import ExtendedRepository, parse_extended_repository
from prbot.types.rules import (
    PullRequestRule,
    parse_pull_request_rule,
    pull_request_rule_to_json,
)

if TYPE_CHECKING:
    from prbot.transport import HTTPTransport


def rules_path(repository_id: int, name: str | None = None) -> str:
    """Build the pull request rules path; rule names are percent-encoded."""
    path = f"/admin/repositories/{repository_id}/pull-request-rules/"
    if name is not None:
        path += f"{quote(name, safe='')}/"
    return path


def rule_body(repository_id: int, rule: PullRequestRule) -> dict:
    if rule.repository_id != repository_id:
        raise ValueError(
            f"Rule {rule.name!r} belongs to repository {rule.repository_id}, "
            f"not {repository_id}"
        )
    return pull_request_rule_to_json(rule)


class PullRequestRulesClient:
    """Client for one repository's pull request rules."""

    def __init__(self, transport: "HTTPTransport", repository_id: int) -> None:
        self.transport = transport
        self.repository_id = repository_id

    def create(self, rule: PullRequestRule) -> PullRequestRule:
        """
        Create a pull request rule.

        Args:
            rule: Rule to create; must belong to this repository

        Returns:
            The rule as stored by the server

        Raises:
            ValidationError: If the server rejects the rule
            ConflictError: If a rule with the same name exists
        """
        response = self.transport.request(
            method="POST",
            path=rules_path(self.repository_id),
            body=rule_body(self.repository_id, rule),
        )
        return decode_one(response, parse_pull_request_rule, "pull request rule")

    def delete(self, rule: PullRequestRule | str) -> None:
        """
        Delete a pull request rule by name.

        Args:
            rule: The rule, or its name

        Raises:
            NotFoundError: If the repository or rule does not exist
        """
        name = rule if isinstance(rule, str) else rule.name
        self.transport.request(
            method="DELETE",
            path=rules_path(self.repository_id, name),
            expect_json=False,
        )


class RepositoryDetailClient:
    """Client scoped to a single repository."""

    def __init__(self, transport: "HTTPTransport", repository_id: int) -> None:
        self.repository_id = repository_id
        self.pull_request_rules = PullRequestRulesClient(transport, repository_id)


class RepositoriesClient:
    """Client for repository-related operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repositories client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def list(self) -> list[ExtendedRepository]:
        """
        List every repository with its pull requests and rules.

        Returns:
            List of ExtendedRepository objects
        """
        response = self.transport.request(method="GET", path="/admin/repositories/")
        return decode_list(response, parse_extended_repository, "repository")

    def get(self, repository_id: int) -> ExtendedRepository:
        """
        Get one repository by id.

        Raises:
            NotFoundError: If no repository has this id
        """
        for extended in self.list():
            if extended.repository.id == repository_id:
                return extended
        raise NotFoundError("REPOSITORY_NOT_FOUND", f"Unknown repository id {repository_id}")

    def find(self, owner: str, name: str) -> ExtendedRepository:
        """
        Get one repository by ``owner/name``.

        Raises:
            NotFoundError: If no repository has this path
        """
        for extended in self.list():
            if extended.repository.owner == owner and extended.repository.name == name:
                return extended
        raise NotFoundError("REPOSITORY_NOT_FOUND", f"Unknown repository {owner}/{name}")

    def with_id(self, repository_id: int) -> RepositoryDetailClient:
        """Return a client scoped to one repository."""
        return RepositoryDetailClient(self.transport, repository_id)
