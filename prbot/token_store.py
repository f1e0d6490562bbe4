"""
Bearer token store for the admin API.

Holds the current admin token, notifies subscribers on change, and can
persist the token to a JSON file so it survives restarts.
"""

import json
import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path

from prbot.exceptions import ConfigurationError
from prbot.logging import get_logger

TOKEN_STORAGE_KEY = "prbot-admin-token"

logger = get_logger("auth")

Subscriber = Callable[[str | None], None]


class TokenStore:
    """
    Holder of the current bearer token.

    Example:
        ```python
        store = TokenStore(path="~/.config/prbot/token.json")
        unsubscribe = store.subscribe(lambda token: print("token:", token))
        store.set("abc")
        store.clear()
        unsubscribe()
        ```
    """

    def __init__(
        self,
        token: str | None = None,
        path: str | Path | None = None,
    ) -> None:
        """
        Initialize the token store.

        Args:
            token: Initial token; takes precedence over a persisted one
            path: Optional JSON file used to persist the token
        """
        self._lock = threading.Lock()
        self._subscribers: list[Subscriber] = []
        self._path = Path(path).expanduser() if path is not None else None

        if token is None and self._path is not None:
            token = self._load()
        self._token = token or None

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self) -> str | None:
        """Return the current token, or None when logged out."""
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        """Replace the current token, persist it and notify subscribers."""
        if not token:
            raise ValueError("token cannot be empty")
        with self._lock:
            self._save(token)
            self._token = token
        self._notify(token)

    def clear(self) -> None:
        """Forget the current token and remove it from storage."""
        with self._lock:
            self._save(None)
            self._token = None
        self._notify(None)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback invoked with the token on every change.

        The callback is called once immediately with the current value.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)
            current = self._token
        callback(current)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, token: str | None) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(token)

    def _load(self) -> str | None:
        assert self._path is not None
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot read token file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Token file {self._path} must hold a JSON object")
        token = data.get(TOKEN_STORAGE_KEY)
        return token if isinstance(token, str) else None

    def _save(self, token: str | None) -> None:
        """
        Write the token file atomically, readable by the owner only.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        if self._path is None:
            return

        data: dict[str, str] = {}
        try:
            if self._path.exists():
                try:
                    existing = json.loads(self._path.read_text(encoding="utf-8"))
                except ValueError:
                    logger.warning("Overwriting unreadable token file %s", self._path)
                    existing = {}
                if isinstance(existing, dict):
                    data = existing

            if token is None:
                data.pop(TOKEN_STORAGE_KEY, None)
            else:
                data[TOKEN_STORAGE_KEY] = token

            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ConfigurationError(f"Cannot write token file {self._path}: {e}") from e
