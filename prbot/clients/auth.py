"""Admin authentication client."""

from typing import TYPE_CHECKING, Any

from prbot.logging import get_logger

if TYPE_CHECKING:
    from prbot.transport import HTTPTransport

logger = get_logger("auth")


def token_from_login_response(key: str, data: Any) -> str:
    """
    Pick the bearer token after a successful login.

    The login response is opaque: a JSON ``token`` field is used when the
    server sends one, otherwise the submitted key is the bearer token.
    """
    if isinstance(data, dict) and isinstance(data.get("token"), str) and data["token"]:
        return data["token"]
    return key


class AuthClient:
    """Client for admin login/logout."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the auth client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def login(self, key: str) -> str:
        """
        Log in with an admin key and store the resulting bearer token.

        Args:
            key: Admin key

        Returns:
            The stored bearer token

        Raises:
            AuthenticationError: If the key is rejected
        """
        if not key:
            raise ValueError("key cannot be empty")

        data = self.transport.request(
            method="POST",
            path="/admin/login",
            body={"key": key},
            authenticated=False,
            expect_json=False,
        )

        token = token_from_login_response(key, data)
        self.transport.token_store.set(token)
        logger.info("Logged in to %s", self.transport.base_url)
        return token

    def logout(self) -> None:
        """Forget the stored bearer token."""
        self.transport.token_store.clear()
        logger.info("Logged out from %s", self.transport.base_url)

    @property
    def is_authenticated(self) -> bool:
        return self.transport.token_store.get() is not None
