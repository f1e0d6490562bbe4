"""Response payload decoding shared by sync and async resource clients."""

from collections.abc import Callable
from typing import Any, TypeVar

from prbot.exceptions import ResponseFormatError

T = TypeVar("T")


def decode_one(data: Any, parser: Callable[[dict[str, Any]], T], what: str) -> T:
    """Parse a single JSON object, mapping shape errors to ResponseFormatError."""
    if not isinstance(data, dict):
        raise ResponseFormatError(f"Expected a {what} object, got {type(data).__name__}")
    try:
        return parser(data)
    except (KeyError, ValueError, TypeError) as e:
        raise ResponseFormatError(f"Malformed {what}: {e!r}") from e


def decode_list(data: Any, parser: Callable[[dict[str, Any]], T], what: str) -> list[T]:
    """Parse a JSON array of objects."""
    if not isinstance(data, list):
        raise ResponseFormatError(f"Expected a list of {what}, got {type(data).__name__}")
    return [decode_one(item, parser, what) for item in data]
