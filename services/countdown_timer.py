"""CountdownTimer: whole-second countdown against a configured duration."""

import math
import time
from typing import Callable, Optional


class CountdownTimer:
    """Tracks elapsed and remaining whole seconds for one test.

    The timer does not schedule anything itself; the UI polls it from a
    periodic tick.
    """

    def __init__(
        self, duration_seconds: int, clock: Callable[[], float] = time.monotonic
    ) -> None:
        """Initialize a stopped timer.

        Args:
            duration_seconds: Length of the test in seconds.
            clock: Monotonic clock returning seconds; injectable for tests.
        """
        self.duration_seconds: int = duration_seconds
        self._clock = clock
        self._started_at: Optional[float] = None
        self._stopped_at: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self._started_at is not None and self._stopped_at is None

    @property
    def has_started(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        """Start counting down. Does nothing if already started."""
        if self._started_at is None:
            self._started_at = self._clock()
            self._stopped_at = None

    def stop(self) -> None:
        """Freeze the elapsed time."""
        if self.is_running:
            self._stopped_at = self._clock()

    def reset(self, duration_seconds: Optional[int] = None) -> None:
        """Return to the stopped, not-started state, optionally with a new duration."""
        if duration_seconds is not None:
            self.duration_seconds = duration_seconds
        self._started_at = None
        self._stopped_at = None

    def elapsed_seconds(self) -> int:
        """Whole seconds since ``start()``; 0 before the timer starts."""
        if self._started_at is None:
            return 0
        end = self._stopped_at if self._stopped_at is not None else self._clock()
        return max(0, math.floor(end - self._started_at))

    def remaining_seconds(self) -> int:
        return max(0, self.duration_seconds - self.elapsed_seconds())

    def is_expired(self) -> bool:
        """True once a started timer has no time left."""
        return self.has_started and self.remaining_seconds() <= 0
