"""JSON-file storage backend.

All keys live in a single JSON object on disk. Writes go to a temporary
sibling file that then replaces the original, so a crash mid-write never
leaves a truncated document behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Iterator, Optional

from ..utils.logging import get_logger
from .base import KeyValueStorage, StorageError

logger = get_logger("storage.file")


class FileStorage(KeyValueStorage):
    """Stores every key in one JSON document."""

    name = "file"

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read storage file {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self._path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self._path.parent), prefix=".storage-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise StorageError(f"Cannot write storage file {self._path}: {exc}") from exc
        logger.debug("storage_file_written", path=str(self._path), keys=len(data))

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    def keys(self) -> Iterator[str]:
        return iter(list(self._read_all()))
