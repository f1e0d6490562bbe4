"""Account-related data models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Account:
    """Admin console identity."""

    username: str
    is_admin: bool = False


@dataclass
class ExternalAccount:
    """Bot-integration identity holding an RSA keypair (PEM)."""

    username: str
    public_key: str = ""
    private_key: str = field(default="", repr=False)


@dataclass
class ExternalAccountRight:
    """Grant of one external account on one repository."""

    username: str
    repository_id: int


@dataclass
class ExtendedExternalAccount:
    """External account bundled with its repository rights."""

    external_account: ExternalAccount
    rights: list[ExternalAccountRight] = field(default_factory=list)

    def has_right(self, repository_id: int) -> bool:
        return any(r.repository_id == repository_id for r in self.rights)


def parse_account(data: dict[str, Any]) -> Account:
    return Account(username=data["username"], is_admin=data.get("is_admin", False))


def parse_external_account(data: dict[str, Any]) -> ExternalAccount:
    return ExternalAccount(
        username=data["username"],
        public_key=data.get("public_key", ""),
        private_key=data.get("private_key", ""),
    )


def parse_extended_external_account(data: dict[str, Any]) -> ExtendedExternalAccount:
    """Parse an entry of the ``/admin/external-accounts/`` listing."""
    return ExtendedExternalAccount(
        external_account=parse_external_account(data["external_account"]),
        rights=[
            ExternalAccountRight(
                username=r["username"],
                repository_id=r["repository_id"],
            )
            for r in data.get("rights", [])
        ],
    )
