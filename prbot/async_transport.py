"""
Async HTTP Transport for the prbot admin API.

Handles async HTTP communication with bearer authentication, optional retry
logic, and error handling using httpx async client.
"""

import asyncio
import math
import random
import time
from collections.abc import Callable, Coroutine
from typing import Any

import httpx

from prbot.logging import log_http_request, log_http_response
from prbot.token_store import TokenStore
from prbot.transport import (
    RetryConfig,
    build_headers,
    decode_response,
    network_error,
    parse_error_response,
)


class AsyncHTTPTransport:
    """
    Async HTTP transport layer with bearer authentication and optional retry logic.

    Handles:
    - Bearer token injection from a TokenStore
    - Exponential backoff with jitter for opted-in retries
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: Base URL of the bot server (e.g., "http://localhost:8008")
            token_store: Source of the admin bearer token
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            transport: Optional httpx async transport (e.g. httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
        expect_json: bool = True,
    ) -> Any:
        """
        Make a request, retrying when configured.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            path: API path (e.g., "/admin/repositories/")
            body: JSON request body
            params: Query parameters
            authenticated: Whether to send the bearer token
            expect_json: Whether a non-JSON success body is an error

        Returns:
            Parsed JSON response, or None for empty bodies

        Raises:
            PrBotError: On API, network or decoding errors
        """
        method = method.upper()
        headers = build_headers(self.token_store, authenticated)

        async def make_request() -> httpx.Response:
            log_http_request(method, f"{self.base_url}{path}", headers, body)
            started = time.monotonic()
            response = await self._client.request(
                method, path, params=params, json=body, headers=headers
            )
            log_http_response(
                response.status_code,
                f"{self.base_url}{path}",
                elapsed_ms=(time.monotonic() - started) * 1000,
            )
            return response

        response = await self._execute_with_retry(method, make_request)
        return decode_response(response, expect_json)

    async def _execute_with_retry(
        self,
        method: str,
        request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]],
    ) -> httpx.Response:
        """
        Execute a request with retry on retryable errors.

        Args:
            method: HTTP method, used to decide whether retrying is safe
            request_fn: Async function that makes the HTTP request

        Returns:
            The successful HTTP response

        Raises:
            PrBotError: On non-retryable errors or after max retries
        """
        attempt = 0
        while True:
            try:
                response = await request_fn()
            except httpx.RequestError as e:
                if not self._should_retry_network(method, attempt):
                    raise network_error(e) from e
                await asyncio.sleep(self._get_backoff_time(attempt, None))
                attempt += 1
                continue

            if response.status_code < 400:
                return response

            error = parse_error_response(response)
            if not self._should_retry(method, response.status_code, attempt):
                raise error

            retry_after = response.headers.get("Retry-After")
            await asyncio.sleep(self._get_backoff_time(attempt, retry_after))
            attempt += 1

    def _should_retry(self, method: str, status_code: int, attempt: int) -> bool:
        if attempt >= self.retry_config.max_retries:
            return False
        if method not in self.retry_config.retry_methods:
            return False
        return status_code in self.retry_config.retry_on

    def _should_retry_network(self, method: str, attempt: int) -> bool:
        return (
            attempt < self.retry_config.max_retries
            and method in self.retry_config.retry_methods
        )

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                wait_time = float(retry_after)
            except ValueError:
                wait_time = math.nan
            if not math.isnan(wait_time):
                return min(max(wait_time, 0.0), self.retry_config.max_backoff)

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

        return min(wait_time, self.retry_config.max_backoff)
