"""
Local Key-Value Storage Backends

DESIGN DECISION: Local files are the default backend because:
1. The tracker is single-user and runs on one device
2. No database setup required
3. Users can back up or inspect their data with any text editor

Each key is stored in its own file, so writing one snapshot can never
corrupt the other. Writes go to a temporary file first and are moved
into place with os.replace(), which is atomic on the same filesystem:
a crash mid-write leaves the previous snapshot intact.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")

FILE_SUFFIX = ".json"


class LocalFileKeyValueStorage(KeyValueStorageInterface):
    """
    Stores each key as `<data_dir>/<key>.json`.

    Transient write failures (e.g. a file briefly locked by a backup
    tool) are retried before a StorageWriteError is raised.
    """

    def __init__(self, data_dir: Path, write_retries: int = 3):
        """
        Initialize file storage.

        Args:
            data_dir: Directory for the value files. Created on first write.
            write_retries: Attempts per write before giving up.
        """
        self._data_dir = Path(data_dir)
        self._write_retries = write_retries

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Get the file path for a key."""
        if not _VALID_KEY.match(key) or key in {".", ".."}:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}{FILE_SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._write_retries),
                wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
                retry=retry_if_exception_type(OSError),
                reraise=True,
            ):
                with attempt:
                    self._write_atomic(path, value)
        except OSError as e:
            logger.error("storage_write_failed", key=key, path=str(path), error=str(e))
            raise StorageWriteError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageWriteError(f"Failed to delete {path}: {e}") from e

    def _write_atomic(self, path: Path, value: str) -> None:
        """Write to a temp file in the same directory, then move it into place."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class InMemoryKeyValueStorage(KeyValueStorageInterface):
    """
    Dictionary-backed storage.

    Used by the test-suite and for throwaway sessions; nothing
    survives the process.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._values)
