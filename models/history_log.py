"""HistoryLog: newest-first, capped list of finished test results."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Tuple

from pydantic import BaseModel, Field, model_validator

from models.result_record import ResultRecord

logger = logging.getLogger(__name__)

MAX_HISTORY_ENTRIES = 10


class HistoryLog(BaseModel):
    """Immutable ordered history; ``records[0]`` is the most recent result."""

    records: Tuple[ResultRecord, ...] = ()
    max_entries: int = Field(default=MAX_HISTORY_ENTRIES, ge=1)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @model_validator(mode="after")
    def check_length(self) -> "HistoryLog":
        """Never hold more than ``max_entries`` records."""
        if len(self.records) > self.max_entries:
            raise ValueError(f"History holds at most {self.max_entries} records")
        return self

    def __len__(self) -> int:
        return len(self.records)

    @property
    def latest(self) -> ResultRecord | None:
        """Most recent record, or None for an empty history."""
        return self.records[0] if self.records else None

    def add(self, record: ResultRecord) -> "HistoryLog":
        """Return a new log with ``record`` first, dropping the oldest on overflow."""
        records = (record,) + self.records
        return HistoryLog(records=records[: self.max_entries], max_entries=self.max_entries)

    def to_list(self) -> List[dict[str, Any]]:
        """Serialize to the persisted list-of-dicts layout."""
        return [record.to_dict() for record in self.records]

    @classmethod
    def from_list(
        cls, items: Iterable[Any], max_entries: int = MAX_HISTORY_ENTRIES
    ) -> "HistoryLog":
        """Build a log from persisted dicts, skipping entries that fail validation."""
        records: List[ResultRecord] = []
        for position, item in enumerate(items):
            try:
                records.append(ResultRecord.from_dict(item))
            except ValueError as e:
                logger.warning("Skipping invalid history entry %d: %s", position, e)
        return cls(records=tuple(records[:max_entries]), max_entries=max_entries)
