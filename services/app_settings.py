"""AppSettings: configuration for a typing test run.

Values come from defaults, keyword overrides, or ``TYPESPEED_*`` environment
variables via :meth:`AppSettings.from_env`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, model_validator

ALLOWED_DURATIONS: Tuple[int, ...] = (15, 30, 60, 120)
DEFAULT_DURATION = 60
HISTORY_KEY = "typing_history"

ENV_DURATION = "TYPESPEED_DURATION"
ENV_HISTORY_PATH = "TYPESPEED_HISTORY_PATH"
ENV_TICK_MS = "TYPESPEED_TICK_MS"


def default_history_path() -> Path:
    return Path.home() / ".typespeed" / "history.json"


class AppSettings(BaseModel):
    """Pydantic model holding the test duration, history location and tick rate."""

    allowed_durations: Tuple[int, ...] = ALLOWED_DURATIONS
    duration_seconds: int = DEFAULT_DURATION
    history_path: Path = Field(default_factory=default_history_path)
    history_key: str = Field(default=HISTORY_KEY, min_length=1)
    history_limit: int = Field(default=10, ge=1)
    tick_interval_ms: int = Field(default=200, gt=0)

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
    }

    @model_validator(mode="after")
    def check_duration(self) -> "AppSettings":
        """The configured duration must be one of the allowed durations."""
        if not self.allowed_durations:
            raise ValueError("allowed_durations must not be empty")
        if self.duration_seconds not in self.allowed_durations:
            raise ValueError(
                f"duration_seconds must be one of {list(self.allowed_durations)}, "
                f"got {self.duration_seconds}"
            )
        return self

    def is_allowed_duration(self, seconds: int) -> bool:
        return seconds in self.allowed_durations

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppSettings":
        """Build settings from ``TYPESPEED_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ValueError: If a variable is set to an invalid value.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        raw_duration = env.get(ENV_DURATION)
        if raw_duration:
            try:
                overrides["duration_seconds"] = int(raw_duration)
            except ValueError as e:
                raise ValueError(f"{ENV_DURATION} must be an integer, got {raw_duration!r}") from e

        raw_tick = env.get(ENV_TICK_MS)
        if raw_tick:
            try:
                overrides["tick_interval_ms"] = int(raw_tick)
            except ValueError as e:
                raise ValueError(f"{ENV_TICK_MS} must be an integer, got {raw_tick!r}") from e

        raw_path = env.get(ENV_HISTORY_PATH)
        if raw_path:
            overrides["history_path"] = Path(raw_path).expanduser()

        try:
            return cls(**overrides)
        except ValidationError as e:
            names = ", ".join(
                name for name in (ENV_DURATION, ENV_TICK_MS, ENV_HISTORY_PATH) if env.get(name)
            )
            raise ValueError(f"Invalid settings from environment ({names}): {e}") from e
