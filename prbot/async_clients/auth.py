"""Async admin authentication client."""

import asyncio
from typing import TYPE_CHECKING

from prbot.clients.auth import token_from_login_response
from prbot.logging import get_logger

if TYPE_CHECKING:
    from prbot.async_transport import AsyncHTTPTransport

logger = get_logger("auth")


class AsyncAuthClient:
    """Async client for admin login/logout."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def login(self, key: str) -> str:
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

        data = await self.transport.request(
            method="POST",
            path="/admin/login",
            body={"key": key},
            authenticated=False,
            expect_json=False,
        )

        token = token_from_login_response(key, data)
        store = self.transport.token_store
        if store.path is None:
            store.set(token)
        else:
            await asyncio.to_thread(store.set, token)
        logger.info("Logged in to %s", self.transport.base_url)
        return token

    def logout(self) -> None:
        """
        Forget the stored bearer token.

        With a file-backed token store this rewrites the token file
        synchronously.
        """
        self.transport.token_store.clear()
        logger.info("Logged out from %s", self.transport.base_url)

    @property
    def is_authenticated(self) -> bool:
        return self.transport.token_store.get() is not None
