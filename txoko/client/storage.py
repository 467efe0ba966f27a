from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth:token"
LANGUAGE_KEY = "language"
DEFAULT_LANGUAGE = "eu"


def default_storage_path() -> Path:
    raw = os.environ.get("TXOKO_STORAGE_PATH")
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".txoko" / "storage.json"


class TokenStore:
    """Small persistent key/value store backed by a JSON file.

    Plays the part of browser local storage for command-line clients. Keys
    and values are strings; a missing or unreadable file reads as empty.
    """

    def __init__(self, path: str | os.PathLike[str] | None = None):
        self.path = Path(path) if path is not None else default_storage_path()
        self._lock = threading.Lock()

    def _read(self) -> dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str, default: str | None = None) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else default

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)

    # Convenience accessors for the well-known keys.

    @property
    def token(self) -> str | None:
        return self.get(TOKEN_KEY)

    @property
    def language(self) -> str:
        return self.get(LANGUAGE_KEY) or DEFAULT_LANGUAGE
