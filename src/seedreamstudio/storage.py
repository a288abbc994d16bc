"""KeyValueStore implementations."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Process-local store, mostly useful for tests and short-lived sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """
    Store backed by a single JSON object on disk.

    The file is re-read on every access so several processes can share it;
    writes replace the whole file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.error(f"Ignoring unreadable store file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Ignoring store file {self.path}: expected a JSON object")
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
