"""prbot admin - Python client and rule resolution for the prbot admin API."""

from prbot.async_client import AsyncAdminClient
from prbot.client import AdminClient
from prbot.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    InvalidTitlePatternError,
    MergeRuleConflictError,
    NetworkError,
    NotFoundError,
    PrBotError,
    RateLimitedError,
    ResponseFormatError,
    ServerError,
    TokenError,
    ValidationError,
)
from prbot.logging import configure_logging, get_logger
from prbot.rules import (
    EffectivePolicy,
    PrContext,
    check_pr_title,
    matches,
    resolve,
    resolve_merge_strategy,
    resolve_pull_request,
)
from prbot.signers import RsaSigner, generate_external_account
from prbot.signing import create_external_token, verify_external_token
from prbot.token_store import TokenStore
from prbot.transport import HTTPTransport, RetryConfig

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Clients
    "AdminClient",
    "AsyncAdminClient",
    "TokenStore",
    # Rule resolution
    "PrContext",
    "EffectivePolicy",
    "matches",
    "resolve",
    "resolve_merge_strategy",
    "resolve_pull_request",
    "check_pr_title",
    # External accounts
    "RsaSigner",
    "generate_external_account",
    "create_external_token",
    "verify_external_token",
    # Exceptions
    "PrBotError",
    "ConfigurationError",
    "NetworkError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "ResponseFormatError",
    "MergeRuleConflictError",
    "InvalidTitlePatternError",
    "TokenError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
