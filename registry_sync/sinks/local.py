"""Durable local key-value store backed by JSON files."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from registry_sync.exceptions import LocalPersistenceError

logger = logging.getLogger(__name__)


class LocalStore:
    """Keyed snapshot store, one JSON document per key.

    Writes go to a temporary file that replaces the target atomically, so
    a crash mid-write leaves the previous snapshot intact. A lock
    serializes concurrent readers and writers within the process.
    """

    SUFFIX = ".json"

    def __init__(self, data_dir: str | Path, pretty: bool = False) -> None:
        """Initialize the local store.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding one file per key.
        pretty : bool
            Pretty-print JSON output.
        """
        self.data_dir = Path(data_dir)
        self.pretty = pretty
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.data_dir / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> Any | None:
        """Return the snapshot stored under ``key``, or ``None`` if absent."""
        path = self._path(key)
        with self._lock:
            if not path.exists():
                return None
            try:
                with open(path, encoding="utf-8") as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise LocalPersistenceError(f"Failed to read {path}: {e}") from e

    def put(self, key: str, snapshot: Any) -> None:
        """Durably write a snapshot under ``key``."""
        path = self._path(key)
        with self._lock:
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        if self.pretty:
                            json.dump(snapshot, f, indent=2, ensure_ascii=False, default=str)
                        else:
                            json.dump(snapshot, f, ensure_ascii=False, default=str)
                        f.flush()
                        os.fsync(f.fileno())
                    os.replace(tmp_name, path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            except OSError as e:
                raise LocalPersistenceError(f"Failed to write {path}: {e}") from e
        logger.debug("Wrote local snapshot %s", path)

    def clear(self) -> None:
        """Delete every snapshot in the store."""
        with self._lock:
            if not self.data_dir.exists():
                return
            try:
                for path in self.data_dir.glob(f"*{self.SUFFIX}"):
                    path.unlink()
            except OSError as e:
                raise LocalPersistenceError(f"Failed to clear {self.data_dir}: {e}") from e
        logger.info("Cleared local store %s", self.data_dir)

    def keys(self) -> list[str]:
        """Return the keys currently stored."""
        with self._lock:
            if not self.data_dir.exists():
                return []
            return sorted(p.stem for p in self.data_dir.glob(f"*{self.SUFFIX}"))
