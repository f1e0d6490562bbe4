"""Async accounts and external accounts resource clients."""

from typing import TYPE_CHECKING

from prbot.clients._decode import decode_list
from prbot.types.accounts import (
    Account,
    ExtendedExternalAccount,
    parse_account,
    parse_extended_external_account,
)

if TYPE_CHECKING:
    from prbot.async_transport import AsyncHTTPTransport


class AsyncAccountsClient:
    """Async client for admin accounts."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def list(self) -> list[Account]:
        response = await self.transport.request(method="GET", path="/admin/accounts/")
        return decode_list(response, parse_account, "account")


class AsyncExternalAccountsClient:
    """Async client for bot-integration (external) accounts."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def list(self) -> list[ExtendedExternalAccount]:
        response = await self.transport.request(
            method="GET", path="/admin/external-accounts/"
        )
        return decode_list(response, parse_extended_external_account, "external account")
