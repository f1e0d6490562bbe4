"""Accounts and external accounts resource clients."""

from typing import TYPE_CHECKING

from prbot.clients._decode import decode_list
from prbot.types.accounts import (
    Account,
    ExtendedExternalAccount,
    parse_account,
    parse_extended_external_account,
)

if TYPE_CHECKING:
    from prbot.transport import HTTPTransport


class AccountsClient:
    """Client for admin accounts."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def list(self) -> list[Account]:
        """List admin console accounts."""
        response = self.transport.request(method="GET", path="/admin/accounts/")
        return decode_list(response, parse_account, "account")


class ExternalAccountsClient:
    """Client for bot-integration (external) accounts."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def list(self) -> list[ExtendedExternalAccount]:
        """List external accounts with their repository rights."""
        response = self.transport.request(method="GET", path="/admin/external-accounts/")
        return decode_list(response, parse_extended_external_account, "external account")
