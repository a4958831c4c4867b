"""File-backed persistent store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ..errors import StoreError
from .base import PersistentStore


logger = logging.getLogger(__name__)


@dataclass
class FileStore(PersistentStore):
    """
    Store that keeps all keys in a single JSON file.

    File content is a JSON object mapping keys to string values. Writes
    go to a temporary file in the same directory which then replaces the
    original, so a crash mid-write leaves the previous content intact.

    A file that cannot be parsed is treated as empty (with a warning);
    the next write replaces it.
    """
    path: str
    encoding: str = "utf-8"

    def _read_all(self) -> dict[str, str]:
        path = Path(self.path)
        if not path.exists():
            return {}

        try:
            with open(path, "r", encoding=self.encoding) as f:
                data = json.load(f)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable store file {path}: {e}")
            return {}
        except OSError as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

        if not isinstance(data, dict):
            logger.warning(f"Ignoring store file {path}: expected a JSON object")
            return {}

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        path = Path(self.path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding=self.encoding) as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(f"Failed to write {path}: {e}") from e

    async def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    async def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    async def delete(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        if data:
            self._write_all(data)
        else:
            Path(self.path).unlink(missing_ok=True)
        return True
