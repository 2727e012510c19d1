"""Persisted bearer token and cached user profile.

Both values live under fixed keys (``userToken`` and ``user``) and are always
written and cleared together, so a store never holds half a session.
"""

import json
import os
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

TOKEN_KEY = "userToken"
USER_KEY = "user"


class TokenStore(Protocol):
    def get_token(self) -> str | None: ...

    def get_user(self) -> dict[str, Any] | None: ...

    def save(self, token: str, user: dict[str, Any]) -> None: ...

    def clear(self) -> None: ...


def _complete(data: dict[str, Any]) -> bool:
    return isinstance(data.get(TOKEN_KEY), str) and isinstance(data.get(USER_KEY), dict)


class MemoryTokenStore:
    """In-process store for tests and embedding."""

    def __init__(self, token: str | None = None, user: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = {}
        if token is not None and user is not None:
            self.save(token, user)

    def get_token(self) -> str | None:
        return self.data.get(TOKEN_KEY)

    def get_user(self) -> dict[str, Any] | None:
        return self.data.get(USER_KEY)

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.data = {TOKEN_KEY: token, USER_KEY: dict(user)}

    def clear(self) -> None:
        self.data = {}


class FileTokenStore:
    """JSON file store. The file is read once and cached; writes replace it atomically."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self._cache: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._cache is not None:
            return self._cache

        data: dict[str, Any] = {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raw = {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            raw = {}

        if isinstance(raw, dict) and _complete(raw):
            data = {TOKEN_KEY: raw[TOKEN_KEY], USER_KEY: raw[USER_KEY]}
        elif raw:
            logger.warning(f"Ignoring incomplete session file {self.path}")
        self._cache = data
        return data

    def get_token(self) -> str | None:
        return self._load().get(TOKEN_KEY)

    def get_user(self) -> dict[str, Any] | None:
        return self._load().get(USER_KEY)

    def save(self, token: str, user: dict[str, Any]) -> None:
        data = {TOKEN_KEY: token, USER_KEY: dict(user)}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp_path, self.path)
        self._cache = data

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        self._cache = {}
