"""State persistence — form state saved to a local key-value store.

Persistence failures are logged and never reach the user: ``save`` swallows
store errors and ``load`` returns None for anything it cannot read.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

from rtlforge.errors import PersistenceError

log = logging.getLogger(__name__)

DEFAULT_STATE_KEY = "rtlForgeAppState"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryStore:
    """Process-local store, used by tests and when no state path is configured."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Key -> string store backed by a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Cannot read store {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"Store {self.path} does not contain a JSON object.")
        return data

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except PersistenceError:
            log.warning("Overwriting unreadable store %s", self.path)
            data = {}
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot write store {self.path}: {exc}") from exc


class PersistenceService:
    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STATE_KEY):
        self.store = store
        self.key = key

    def save(self, state: dict) -> None:
        try:
            self.store.set(self.key, json.dumps(state))
        except Exception as exc:
            log.error("Error saving state to local store: %s", exc)

    def load(self) -> dict | None:
        try:
            serialized = self.store.get(self.key)
            if serialized is None:
                return None
            state = json.loads(serialized)
        except Exception as exc:
            log.error("Error loading state from local store: %s", exc)
            return None
        if not isinstance(state, dict):
            log.error("Ignoring persisted state: expected an object, got %s", type(state).__name__)
            return None
        return state
