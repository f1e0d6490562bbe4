"""Async repositories resource client."""

from typing import TYPE_CHECKING

from prbot.clients._decode import decode_list, decode_one
from prbot.clients.repositories import rule_body, rules_path
from prbot.exceptions import NotFoundError
from prbot.types.repos import ExtendedRepository, parse_extended_repository
from prbot.types.rules import PullRequestRule, parse_pull_request_rule

if TYPE_CHECKING:
    from prbot.async_transport import AsyncHTTPTransport


class AsyncPullRequestRulesClient:
    """Async client for one repository's pull request rules."""

    def __init__(self, transport: "AsyncHTTPTransport", repository_id: int) -> None:
        self.transport = transport
        self.repository_id = repository_id

    async def create(self, rule: PullRequestRule) -> PullRequestRule:
        """
        Create a pull request rule.

        Args:
            rule: Rule to create; must belong to this repository

        Returns:
            The rule as stored by the server
        """
        response = await self.transport.request(
            method="POST",
            path=rules_path(self.repository_id),
            body=rule_body(self.repository_id, rule),
        )
        return decode_one(response, parse_pull_request_rule, "pull request rule")

    async def delete(self, rule: PullRequestRule | str) -> None:
        """Delete a pull request rule by name."""
        name = rule if isinstance(rule, str) else rule.name
        await self.transport.request(
            method="DELETE",
            path=rules_path(self.repository_id, name),
            expect_json=False,
        )


class AsyncRepositoryDetailClient:
    """Async client scoped to a single repository."""

    def __init__(self, transport: "AsyncHTTPTransport", repository_id: int) -> None:
        self.repository_id = repository_id
        self.pull_request_rules = AsyncPullRequestRulesClient(transport, repository_id)


class AsyncRepositoriesClient:
    """Async client for repository-related operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def list(self) -> list[ExtendedRepository]:
        """List every repository with its pull requests and rules."""
        response = await self.transport.request(method="GET", path="/admin/repositories/")
        return decode_list(response, parse_extended_repository, "repository")

    async def get(self, repository_id: int) -> ExtendedRepository:
        """
        Get one repository by id.

        Raises:
            NotFoundError: If no repository has this id
        """
        for extended in await self.list():
            if extended.repository.id == repository_id:
                return extended
        raise NotFoundError("REPOSITORY_NOT_FOUND", f"Unknown repository id {repository_id}")

    async def find(self, owner: str, name: str) -> ExtendedRepository:
        """
        Get one repository by ``owner/name``.

        Raises:
            NotFoundError: If no repository has this path
        """
        for extended in await self.list():
            if extended.repository.owner == owner and extended.repository.name == name:
                return extended
        raise NotFoundError("REPOSITORY_NOT_FOUND", f"Unknown repository {owner}/{name}")

    def with_id(self, repository_id: int) -> AsyncRepositoryDetailClient:
        """Return a client scoped to one repository."""
        return AsyncRepositoryDetailClient(self.transport, repository_id)
