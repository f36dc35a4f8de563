"""
File-backed Key-Value Store

One file per key inside a directory. Keys are percent-encoded into file
names, so any string is a valid key.

TRADEOFFS:
- Not suitable for many concurrent writers (we're fine for personal use)
- Each write replaces the whole value, atomically: data is written to a
  temp file in the same directory and renamed over the target, so readers
  never see a half-written snapshot

Transient OS errors (a file briefly locked by a sync client or a virus
scanner) are retried a few times before giving up with StorageError.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote, unquote

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_ledger.services.storage.interface import KeyValueStore, StorageError


_SUFFIX = ".dat"

logger = structlog.get_logger(__name__)

_io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
    reraise=True,
)


class FileKeyValueStore(KeyValueStore):
    """Key-value store persisted as files in one directory."""

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create storage directory {self._directory}: {e}") from e

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not isinstance(key, str) or not key:
            raise ValueError("Keys must be non-empty strings")
        return self._directory / (quote(key, safe="") + _SUFFIX)

    @_io_retry
    def _read(self, path: Path) -> Optional[bytes]:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    @_io_retry
    def _write(self, path: Path, value: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @_io_retry
    def _remove(self, path: Path) -> None:
        path.unlink(missing_ok=True)

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            return self._read(path)
        except OSError as e:
            logger.error("storage_read_failed", key=key, error=str(e))
            raise StorageError(f"Failed to read {key!r}: {e}") from e

    def set(self, key: str, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"Values must be bytes, got {type(value).__name__}")
        path = self._path_for(key)
        try:
            self._write(path, bytes(value))
        except OSError as e:
            logger.error("storage_write_failed", key=key, error=str(e))
            raise StorageError(f"Failed to write {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            self._remove(path)
        except OSError as e:
            raise StorageError(f"Failed to delete {key!r}: {e}") from e

    def keys(self) -> list[str]:
        return sorted(
            unquote(path.name[:-len(_SUFFIX)])
            for path in self._directory.glob(f"*{_SUFFIX}")
            if path.is_file()
        )
