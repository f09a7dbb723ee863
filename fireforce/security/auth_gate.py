# fireforce/security/auth_gate.py
"""
Authentication gate for the dashboard.

The gate is a single boolean "is authenticated" flag kept in a small
client-local key/value store under a fixed key. It is NOT a security
boundary: credential issuance and validation happen elsewhere, the
monitor only reads the flag at activation and clears it at logout.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

AUTH_KEY = "fireforce_auth"


class LocalStore:
    """
    Persistent string key/value store backed by a JSON file.

    Mirrors the browser-style local storage interface: getItem,
    setItem and removeItem, with string values only.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except ValueError:
            logger.warning(f"Local store {self.path} is corrupt, treating as empty")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get_item(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class AuthGate:
    """Reads and writes the dashboard's authentication flag."""

    def __init__(self, store: LocalStore, key: str = AUTH_KEY):
        self.store = store
        self.key = key

    def is_authenticated(self) -> bool:
        return self.store.get_item(self.key) == "true"

    def mark_authenticated(self) -> None:
        self.store.set_item(self.key, "true")
        logger.info("Authentication flag set")

    def clear(self) -> None:
        self.store.remove_item(self.key)
        logger.info("Authentication flag cleared")
