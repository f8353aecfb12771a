"""Key-value persistence for the schedule collection.

The store only needs a synchronous ``load(key) -> JSON | None`` and
``save(key, JSON)`` pair. JsonFileStorage keeps one ``<key>.json`` file per
key and rewrites it wholesale; MemoryStorage is used by tests and embedders.
"""

import json
import os
from pathlib import Path
from typing import Any, Protocol

from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.teamschedule.errors import StorageError
from src.teamschedule.logging import get_logger

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, value: Any) -> None: ...


class MemoryStorage:
    """In-process storage. Values are deep-copied through JSON on save."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {
            key: json.dumps(value, ensure_ascii=False)
            for key, value in (initial or {}).items()
        }
        self.save_count = 0

    def load(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value, ensure_ascii=False)
        self.save_count += 1


class JsonFileStorage:
    """Stores each key as a pretty-printed UTF-8 JSON file in one directory.

    Writes go to a temporary file that replaces the target, so a reader never
    sees a half-written collection. Transient OS errors are retried.
    """

    def __init__(self, directory: str | Path, *, retry_attempts: int = 3) -> None:
        """Initialize JsonFileStorage.

        Args:
            directory: Directory for the JSON files; created if missing.
            retry_attempts: Attempts for each write before raising StorageError.
        """
        self.directory = Path(directory)
        self.retry_attempts = retry_attempts
        self.directory.mkdir(parents=True, exist_ok=True)

        logger.info(
            "json_storage_initialized",
            directory=str(self.directory),
            retry_attempts=retry_attempts,
        )

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Any | None:
        """Read a key.

        Returns:
            The decoded JSON value, or None if the key was never saved.

        Raises:
            StorageError: If the file exists but cannot be read or decoded.
        """
        path = self.path_for(key)
        if not path.exists():
            logger.debug("storage_load", key=key, result="missing")
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def save(self, key: str, value: Any) -> None:
        """Write a key, replacing any previous value.

        Raises:
            StorageError: If every attempt failed.
        """
        writer = retry(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_fixed(0.1),
            retry=retry_if_exception_type(OSError),
        )(self._write)
        try:
            writer(key, value)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error("storage_save_failed", key=key, error=str(cause))
            raise StorageError(f"Cannot write {self.path_for(key)}: {cause}") from cause

    def _write(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(value, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
        logger.debug("storage_saved", key=key, path=str(path))
