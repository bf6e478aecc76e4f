"""ResultRecord model for a completed typing test."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


def utc_timestamp() -> str:
    """Current UTC time as an ISO8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ResultRecord(BaseModel):
    """Pydantic model for one finished test, as stored in the history.

    Field names are pythonic; the persisted layout uses the aliases
    ``wpm``, ``accuracy``, ``time`` and ``date``.
    """

    wpm: int = Field(ge=0)
    accuracy_percent: int = Field(ge=0, le=100, alias="accuracy")
    duration_seconds: int = Field(ge=0, alias="time")
    timestamp: str = Field(default_factory=utc_timestamp, alias="date")

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        strict=False,
    )

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: str) -> str:
        """Ensure the timestamp parses as ISO8601."""
        datetime.fromisoformat(v.replace("Z", "+00:00"))
        return v

    @field_validator("wpm", "accuracy_percent", "duration_seconds", mode="before")
    @classmethod
    def reject_bool(cls, v: object) -> object:
        """Booleans are ints in Python but never valid counts here."""
        if isinstance(v, bool):
            raise ValueError("boolean is not a valid integer value")
        return v

    @property
    def recorded_at(self) -> datetime:
        """The timestamp as a timezone-aware datetime."""
        return datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the persisted field names."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ResultRecord":
        """Create a ResultRecord from a persisted dict.

        Raises:
            ValueError: If the data does not describe a valid record.
        """
        if not isinstance(d, dict):
            raise ValueError(f"Invalid result record: expected dict, got {type(d).__name__}")
        try:
            return cls.model_validate(d)
        except ValidationError as e:
            raise ValueError(f"Invalid result record: {str(e)}") from e

    def summary(self) -> str:
        """One-line description used by the history list."""
        return f"{self.wpm} WPM • {self.accuracy_percent}% • {self.duration_seconds}s"
