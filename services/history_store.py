"""History persistence for finished typing tests.

The history is stored as JSON text under a fixed key of a string key-value
store, the desktop analogue of browser local storage. ``JsonFileStorage``
provides such a store backed by a single JSON file.

Loading fails open: a missing, unreadable or corrupted history loads as an
empty (or partially recovered) ``HistoryLog`` and is logged, never raised.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterator, MutableMapping, Optional

from models.history_log import MAX_HISTORY_ENTRIES, HistoryLog
from models.result_record import ResultRecord
from services.app_settings import HISTORY_KEY

logger = logging.getLogger(__name__)


class HistoryStoreError(Exception):
    """Raised when the history cannot be written."""

    def __init__(self, message: str = "Failed to save history") -> None:
        """Initialize the exception with an optional message."""
        self.message = message
        super().__init__(self.message)


class HistoryStore(ABC):
    """Interface for loading and saving the result history."""

    @abstractmethod
    def load(self) -> HistoryLog:
        """Return the stored history, newest first."""

    @abstractmethod
    def save(self, record: ResultRecord) -> HistoryLog:
        """Prepend ``record`` to the history and return the updated log."""


class InMemoryHistoryStore(HistoryStore):
    """Keeps the history in process memory only."""

    def __init__(self, max_entries: int = MAX_HISTORY_ENTRIES) -> None:
        self._log = HistoryLog(max_entries=max_entries)

    def load(self) -> HistoryLog:
        return self._log

    def save(self, record: ResultRecord) -> HistoryLog:
        self._log = self._log.add(record)
        return self._log


class KeyValueHistoryStore(HistoryStore):
    """Stores the history as JSON text under ``key`` in a string mapping."""

    def __init__(
        self,
        storage: MutableMapping[str, str],
        key: str = HISTORY_KEY,
        max_entries: int = MAX_HISTORY_ENTRIES,
    ) -> None:
        """Initialize the store.

        Args:
            storage: Any mutable mapping of strings, e.g. a ``JsonFileStorage``.
            key: Fixed key under which the history text is stored.
            max_entries: Maximum number of records kept.
        """
        self.storage = storage
        self.key = key
        self.max_entries = max_entries

    def load(self) -> HistoryLog:
        try:
            raw = self.storage.get(self.key)
        except OSError as e:
            logger.warning("Could not read history storage: %s", e)
            return HistoryLog(max_entries=self.max_entries)
        if not raw:
            return HistoryLog(max_entries=self.max_entries)

        try:
            items = json.loads(raw)
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning("Discarding corrupted history under %r: %s", self.key, e)
            return HistoryLog(max_entries=self.max_entries)

        if not isinstance(items, list):
            logger.warning(
                "Discarding history under %r: expected a list, got %s",
                self.key,
                type(items).__name__,
            )
            return HistoryLog(max_entries=self.max_entries)

        return HistoryLog.from_list(items, max_entries=self.max_entries)

    def save(self, record: ResultRecord) -> HistoryLog:
        """Prepend ``record`` and write the capped history back.

        Raises:
            HistoryStoreError: If the underlying storage cannot be written.
        """
        log = self.load().add(record)
        try:
            self.storage[self.key] = json.dumps(log.to_list())
        except OSError as e:
            raise HistoryStoreError(f"Failed to save history under {self.key!r}: {e}") from e
        logger.debug("Saved result %s (%d in history)", record.summary(), len(log))
        return log


class JsonFileStorage(MutableMapping[str, str]):
    """String key-value store persisted as one JSON object in ``path``.

    Every write rewrites the whole file through a temporary file in the same
    directory followed by ``os.replace``.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (ValueError, RecursionError) as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: expected a JSON object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def __getitem__(self, key: str) -> str:
        return self._read()[key]

    def __setitem__(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def __delitem__(self, key: str) -> None:
        data = self._read()
        del data[key]
        self._write(data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._read())

    def __len__(self) -> int:
        return len(self._read())


def open_history_store(
    path: Path | str, key: str = HISTORY_KEY, max_entries: Optional[int] = None
) -> KeyValueHistoryStore:
    """Create a ``KeyValueHistoryStore`` over a ``JsonFileStorage`` at ``path``."""
    return KeyValueHistoryStore(
        JsonFileStorage(path),
        key=key,
        max_entries=max_entries or MAX_HISTORY_ENTRIES,
    )
