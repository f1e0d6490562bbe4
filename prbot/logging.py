"""
prbot admin logging utilities.

Provides configurable logging for HTTP requests/responses and rule resolution.
Ensures no sensitive data (bearer tokens, private keys) is logged.
"""

import logging
import re
from typing import Any

# Create package-specific loggers
_sdk_logger = logging.getLogger("prbot")
_http_logger = logging.getLogger("prbot.http")
_rules_logger = logging.getLogger("prbot.rules")
_signing_logger = logging.getLogger("prbot.signing")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Private key patterns (PEM format, PKCS#1 and PKCS#8)
    (re.compile(r"-----BEGIN[^-]*PRIVATE KEY-----.*?-----END[^-]*PRIVATE KEY-----", re.DOTALL), "[PRIVATE_KEY_REDACTED]"),
    # Bearer credentials in headers
    (re.compile(r"Bearer\s+[A-Za-z0-9._~+/=-]+"), "Bearer [REDACTED]"),
    # Compact JWTs
    (re.compile(r"\beyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"), "[TOKEN_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(?<!public_)(secret|token|password|key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {
    "authorization",
    "token",
    "key",
    "private_key",
    "password",
    "secret",
}

# Keys that contain a sensitive word but only hold public material
_PUBLIC_KEYS = {"public_key"}


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    rules_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure prbot logging.

    Args:
        level: Default log level for all prbot loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        rules_level: Log level for rule resolution logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from prbot.logging import configure_logging

        # Trace which rules apply to each pull request
        configure_logging(level=logging.INFO, rules_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _rules_logger.setLevel(rules_level if rules_level is not None else level)
    _signing_logger.setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a prbot logger.

    Args:
        name: Logger name suffix (e.g., "http", "rules"). If None, returns main logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"prbot.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces private keys, bearer tokens, and other sensitive patterns
    with redacted placeholders.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: authorization, token, key,
            private_key, password, secret)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in _PUBLIC_KEYS:
            result[key] = value
        elif key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: Any = None,
) -> None:
    """
    Log an HTTP request at DEBUG level with sensitive data masked.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        headers: Request headers (optional)
        body: Request body (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if isinstance(body, dict) and body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    body: Any = None,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log an HTTP response at DEBUG level with sensitive data masked.

    Args:
        status_code: HTTP status code
        url: Request URL
        body: Response body (optional)
        elapsed_ms: Request duration in milliseconds (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if isinstance(body, dict) and body:
        log_parts.append(f"body={safe_log_dict(body)}")
    elif isinstance(body, list):
        log_parts.append(f"items={len(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_rule_resolution(
    context: Any,
    matched: list[str],
    skipped: list[str],
) -> None:
    """
    Log which pull request rules matched a context, at DEBUG level.

    Args:
        context: The pull request context the rules were evaluated against
        matched: Names of rules whose conditions all held
        skipped: Names of rules with at least one failing condition
    """
    if not _rules_logger.isEnabledFor(logging.DEBUG):
        return

    _rules_logger.debug(
        "%s: matched=%s | skipped=%s", context, matched or "-", skipped or "-"
    )


def log_signing_operation(operation: str, username: str) -> None:
    """
    Log a token signing/verification operation at DEBUG level.

    Args:
        operation: Operation type (e.g., "create_token", "verify_token")
        username: External account the token is issued for
    """
    if not _signing_logger.isEnabledFor(logging.DEBUG):
        return

    _signing_logger.debug(f"{operation}: username={username}")


# Export public API
__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_rule_resolution",
    "log_signing_operation",
]
