"""
HTTP Transport for the prbot admin API.

Handles HTTP communication with bearer authentication, optional retry
logic, and error handling.
"""

import math
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from prbot.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NetworkError,
    NotFoundError,
    PrBotError,
    RateLimitedError,
    ResponseFormatError,
    ServerError,
    ValidationError,
)
from prbot.logging import log_http_request, log_http_response
from prbot.token_store import TokenStore


@dataclass
class RetryConfig:
    """
    Configuration for automatic retry behavior.

    Retries are off by default; only idempotent methods are ever retried.
    """

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    retry_methods: tuple[str, ...] = ("GET", "DELETE")
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


def build_headers(token_store: TokenStore, authenticated: bool) -> dict[str, str]:
    """
    Build request headers, adding the bearer token when required.

    Raises:
        AuthenticationError: If authentication is required but no token is set
    """
    headers: dict[str, str] = {}
    if authenticated:
        token = token_store.get()
        if not token:
            raise AuthenticationError("NOT_LOGGED_IN", "No admin token available, login first")
        headers["Authorization"] = f"Bearer {token}"
    return headers


def decode_response(response: httpx.Response, expect_json: bool = True) -> Any:
    """
    Decode a successful response body.

    Empty bodies (e.g. 204 No Content) decode to None.

    Raises:
        ResponseFormatError: If JSON was expected but the body is not JSON
    """
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        if not expect_json:
            return None
        raise ResponseFormatError(
            f"Invalid JSON in HTTP {response.status_code} response: {e}"
        ) from e


def parse_error_response(response: httpx.Response) -> PrBotError:
    """
    Parse an error response into a typed exception.

    Args:
        response: HTTP response with error status

    Returns:
        Appropriate PrBotError subclass
    """
    status_code = response.status_code
    code = f"HTTP_{status_code}"
    message = ""
    details: Any = None

    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        details = data
        error = data.get("error")
        if isinstance(error, dict):
            if isinstance(error.get("code"), str) and error["code"]:
                code = error["code"]
            if isinstance(error.get("message"), str):
                message = error["message"]
        elif isinstance(error, str):
            message = error
        if isinstance(data.get("message"), str) and data["message"]:
            message = data["message"]
    elif isinstance(data, str):
        message = data
    elif data is None:
        message = response.text.strip()

    if not message:
        message = f"HTTP {status_code}"

    if status_code == 401:
        return AuthenticationError(code, message, status_code)
    elif status_code == 403:
        return AuthorizationError(code, message, status_code)
    elif status_code == 404:
        return NotFoundError(code, message, status_code)
    elif status_code == 409:
        return ConflictError(code, message, status_code)
    elif status_code == 429:
        retry_after_str = response.headers.get("Retry-After", "60")
        try:
            retry_after = int(retry_after_str)
        except ValueError:
            retry_after = 60
        return RateLimitedError(code, message, retry_after, status_code)
    elif status_code >= 500:
        return ServerError(code, message, status_code)
    else:
        return ValidationError(code, message, status_code, details)


def network_error(error: httpx.RequestError) -> NetworkError:
    if isinstance(error, httpx.TimeoutException):
        return NetworkError("TIMEOUT", f"Request timed out: {error}")
    return NetworkError("CONNECTION_ERROR", str(error) or type(error).__name__)


class HTTPTransport:
    """
    HTTP transport layer with bearer authentication and optional retry logic.

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
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL of the bot server (e.g., "http://localhost:8008")
            token_store: Source of the admin bearer token
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
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

        def make_request() -> httpx.Response:
            log_http_request(method, f"{self.base_url}{path}", headers, body)
            started = time.monotonic()
            response = self._client.request(
                method, path, params=params, json=body, headers=headers
            )
            log_http_response(
                response.status_code,
                f"{self.base_url}{path}",
                elapsed_ms=(time.monotonic() - started) * 1000,
            )
            return response

        response = self._execute_with_retry(method, make_request)
        return decode_response(response, expect_json)

    def _execute_with_retry(
        self, method: str, request_fn: Callable[[], httpx.Response]
    ) -> httpx.Response:
        """
        Execute a request with retry on retryable errors.

        Args:
            method: HTTP method, used to decide whether retrying is safe
            request_fn: Function that makes the HTTP request

        Returns:
            The successful HTTP response

        Raises:
            PrBotError: On non-retryable errors or after max retries
        """
        attempt = 0
        while True:
            try:
                response = request_fn()
            except httpx.RequestError as e:
                if not self._should_retry_network(method, attempt):
                    raise network_error(e) from e
                time.sleep(self._get_backoff_time(attempt, None))
                attempt += 1
                continue

            if response.status_code < 400:
                return response

            error = parse_error_response(response)
            if not self._should_retry(method, response.status_code, attempt):
                raise error

            retry_after = response.headers.get("Retry-After")
            time.sleep(self._get_backoff_time(attempt, retry_after))
            attempt += 1

    def _should_retry(self, method: str, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            method: HTTP method
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
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

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
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
