"""Typing metrics derived from scoring counters and elapsed time.

WPM follows the usual five-characters-per-word convention and only counts
correctly typed characters. Both the live display and the final result go
through the same helpers so the number shown at completion is the number saved.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field, model_validator

CHARS_PER_WORD = 5
MIN_ELAPSED_SECONDS = 1


def js_round(value: float) -> int:
    """Round half up for non-negative values (2.5 -> 3, unlike ``round``)."""
    return int(math.floor(value + 0.5))


def accuracy_percent(correct_count: int, typed_count: int) -> int:
    """Percentage of typed characters that were correct; 100 when nothing is typed."""
    if typed_count <= 0:
        return 100
    return js_round(correct_count / typed_count * 100)


def words_per_minute(correct_count: int, elapsed_seconds: float) -> int:
    """Net words per minute for ``correct_count`` characters over ``elapsed_seconds``.

    Elapsed time is clamped to at least one second to avoid division by zero.
    """
    elapsed = max(MIN_ELAPSED_SECONDS, elapsed_seconds)
    minutes = elapsed / 60.0
    if minutes <= 0:
        return 0
    return js_round((correct_count / CHARS_PER_WORD) / minutes)


class TypingMetrics(BaseModel):
    """Immutable snapshot of the scoring counters and derived metrics."""

    typed_count: int = Field(ge=0)
    correct_count: int = Field(ge=0)
    incorrect_count: int = Field(ge=0)
    wpm: int = Field(ge=0)
    accuracy_percent: int = Field(ge=0, le=100)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @model_validator(mode="after")
    def check_counts(self) -> "TypingMetrics":
        """Correct and incorrect counts must add up to the typed count."""
        if self.correct_count + self.incorrect_count != self.typed_count:
            raise ValueError("correct_count + incorrect_count must equal typed_count")
        return self

    @classmethod
    def compute(
        cls, *, correct_count: int, incorrect_count: int, elapsed_seconds: float
    ) -> "TypingMetrics":
        """Build a snapshot from raw counters and elapsed seconds."""
        typed_count = correct_count + incorrect_count
        return cls(
            typed_count=typed_count,
            correct_count=correct_count,
            incorrect_count=incorrect_count,
            wpm=words_per_minute(correct_count, elapsed_seconds),
            accuracy_percent=accuracy_percent(correct_count, typed_count),
        )

    @classmethod
    def empty(cls) -> "TypingMetrics":
        """Metrics for a test where nothing has been typed yet."""
        return cls.compute(correct_count=0, incorrect_count=0, elapsed_seconds=0)
