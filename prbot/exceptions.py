"""prbot admin exception classes."""

from typing import Any


class PrBotError(Exception):
    """Base exception for all prbot admin errors."""

    def __init__(
        self, code: str, message: str, status_code: int | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{code}] {message}")


class ConfigurationError(PrBotError):
    """Raised when client configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class NetworkError(PrBotError):
    """Raised when the backend could not be reached at all."""

    pass


class AuthenticationError(PrBotError):
    """Raised on 401, or when no bearer token is available."""

    pass


class AuthorizationError(PrBotError):
    """Raised when access is denied (403)."""

    pass


class NotFoundError(PrBotError):
    """Raised when a resource is not found."""

    pass


class ConflictError(PrBotError):
    """Raised on conflicts (duplicate rule name, etc.)."""

    pass


class RateLimitedError(PrBotError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        status_code: int | None = 429,
    ) -> None:
        super().__init__(code, message, status_code)
        self.retry_after = retry_after


class ValidationError(PrBotError):
    """Raised on client errors (4xx) not covered by a narrower class."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(code, message, status_code)
        self.details = details


class ServerError(PrBotError):
    """Raised on server errors (5xx)."""

    pass


class ResponseFormatError(PrBotError):
    """Raised when a successful response cannot be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_RESPONSE", message)


class MergeRuleConflictError(PrBotError):
    """
    Raised when equally specific merge rules select different strategies.

    Attributes:
        rules: The conflicting merge rules, in input order
    """

    def __init__(self, message: str, rules: list[Any]) -> None:
        super().__init__("MERGE_RULE_CONFLICT", message)
        self.rules = rules


class InvalidTitlePatternError(PrBotError):
    """Raised when a repository's PR title pattern is not a valid regex."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__("INVALID_TITLE_PATTERN", f"{pattern!r}: {reason}")
        self.pattern = pattern


class TokenError(PrBotError):
    """Raised when an external account token is malformed or forged."""

    def __init__(self, message: str) -> None:
        super().__init__("TOKEN_ERROR", message)
