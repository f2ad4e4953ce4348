"""
Keyed client-side storage.

StateStore keeps small screen state (typed credentials, sort order) so it
survives process recreation. UserSessionStorage keeps the session token
written by the authentication client; an empty token means signed out.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

EMPTY_VALUE = ""
SESSION_ID_KEY = "session_id"


class StateStore(Protocol):
    def get(self, key: str, default: str = EMPTY_VALUE) -> str: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStateStore:
    """StateStore kept in a dict; lost with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str, default: str = EMPTY_VALUE) -> str:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class JsonStateStore:
    """StateStore persisted as a flat JSON object, rewritten on every change."""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Discarding unreadable state file {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Discarding malformed state file {self._path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._values, f, indent=2)
        tmp_path.replace(self._path)

    def get(self, key: str, default: str = EMPTY_VALUE) -> str:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        if self._values.get(key) == value:
            return
        self._values[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._save()


class UserSessionStorage:
    """Process-wide holder of the signed-in user's session token."""

    def __init__(self, store: StateStore):
        self._store = store

    def get_user_session_id(self) -> str:
        return self._store.get(SESSION_ID_KEY, EMPTY_VALUE)

    def save_user_session_id(self, session_id: str) -> None:
        self._store.set(SESSION_ID_KEY, session_id)
        logger.info("User session saved")

    def clear(self) -> None:
        self._store.remove(SESSION_ID_KEY)
        logger.info("User session cleared")
