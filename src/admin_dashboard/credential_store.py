# src/admin_dashboard/credential_store.py

import json
import logging
import os
import typing
from pathlib import Path

logger = logging.getLogger("dashboard.credential_store")

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"


class InMemoryCredentialStore:
    """
    Key/value token storage living as long as the process.
    Used by tests and as the base for the durable store.
    """

    def __init__(self, initial: typing.Optional[typing.Dict[str, str]] = None):
        self._data: typing.Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> typing.Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._persist()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._persist()

    def clear(self) -> None:
        self._data.clear()
        self._persist()

    def _persist(self) -> None:
        pass

    # Convenience accessors for the two fixed keys
    @property
    def access_token(self) -> typing.Optional[str]:
        return self.get(ACCESS_TOKEN_KEY)

    @property
    def refresh_token(self) -> typing.Optional[str]:
        return self.get(REFRESH_TOKEN_KEY)


class FileCredentialStore(InMemoryCredentialStore):
    """Durable store backed by a JSON file, so tokens outlive the process."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()
        super().__init__(self._load())

    def _load(self) -> typing.Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable credential file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def _persist(self) -> None:
        if not self._data:
            if self.path.exists():
                self.path.unlink()
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)
