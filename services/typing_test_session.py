"""TypingTestSession: wires the scoring engine to the timer, texts and history.

The presenter forwards the raw input buffer and periodic ticks here; the session
chooses between the engine's append fast path and a full resync, starts the
countdown on first input, and finalizes the test exactly once.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from pydantic import BaseModel

from models.character_verdict import CharacterVerdict
from models.history_log import HistoryLog
from models.result_record import ResultRecord
from models.scoring_engine import ScoringEngine
from models.typing_metrics import TypingMetrics
from services.app_settings import AppSettings
from services.countdown_timer import CountdownTimer
from services.history_store import HistoryStore, HistoryStoreError, InMemoryHistoryStore
from services.text_source import TextSource

logger = logging.getLogger(__name__)


class LiveStats(BaseModel):
    """What the presenter shows in its stats panel."""

    metrics: TypingMetrics
    remaining_seconds: int
    elapsed_seconds: int
    finished: bool

    model_config = {"frozen": True}


class InputUpdate(BaseModel):
    """Result of one input event: the cells to repaint and the new stats."""

    verdicts: Tuple[CharacterVerdict, ...]
    changed_index: Optional[int] = None
    active_index: int
    stats: LiveStats

    model_config = {"frozen": True}


class TypingTestSession:
    """One typing test at a time, restartable with the same or a new text."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        text_source: Optional[TextSource] = None,
        history_store: Optional[HistoryStore] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """Initialize the session and pick a first text.

        Args:
            settings: Duration and history configuration.
            text_source: Where reference texts come from.
            history_store: Where finished results are persisted.
            clock: Monotonic clock for the countdown, injectable for tests.
        """
        self.settings = settings or AppSettings()
        self.text_source = text_source or TextSource()
        self.history_store = history_store or InMemoryHistoryStore(self.settings.history_limit)
        if clock is None:
            self.timer = CountdownTimer(self.settings.duration_seconds)
        else:
            self.timer = CountdownTimer(self.settings.duration_seconds, clock=clock)
        self.engine = ScoringEngine(self.text_source.pick())
        self._buffer: str = ""
        self._result: Optional[ResultRecord] = None

    @property
    def reference_text(self) -> str:
        return self.engine.reference_text

    @property
    def duration_seconds(self) -> int:
        return self.settings.duration_seconds

    @property
    def is_finished(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[ResultRecord]:
        return self._result

    def _live_elapsed(self) -> int:
        return self.duration_seconds - self.timer.remaining_seconds()

    def live_stats(self) -> LiveStats:
        """Current metrics with WPM over configured duration minus time remaining."""
        elapsed = self._live_elapsed()
        return LiveStats(
            metrics=self.engine.metrics(elapsed),
            remaining_seconds=self.timer.remaining_seconds(),
            elapsed_seconds=elapsed,
            finished=self.is_finished,
        )

    def reset(self, new_text: bool = False) -> LiveStats:
        """Start over, on a new random text when ``new_text`` is set."""
        self.timer.stop()
        text = self.text_source.pick() if new_text else self.engine.reference_text
        self.engine.set_reference(text)
        self.timer.reset(self.duration_seconds)
        self._buffer = ""
        self._result = None
        logger.debug("Test reset (new_text=%s, duration=%ds)", new_text, self.duration_seconds)
        return self.live_stats()

    def change_duration(self, seconds: int) -> LiveStats:
        """Switch to another allowed duration and restart on the same text.

        Raises:
            ValueError: If ``seconds`` is not an allowed duration.
        """
        if not self.settings.is_allowed_duration(seconds):
            raise ValueError(
                f"Duration must be one of {list(self.settings.allowed_durations)}, got {seconds}"
            )
        self.settings.duration_seconds = seconds
        return self.reset(new_text=False)

    def handle_input(self, buffer: str, is_paste: bool = False) -> Optional[InputUpdate]:
        """Score the new contents of the input box.

        Returns:
            The update to paint, or None when the input was rejected (pasted
            content, or the test is already over).
        """
        if is_paste:
            logger.info("Rejected pasted input")
            return None
        if self.is_finished:
            return None

        if not self.timer.has_started:
            self.timer.start()

        elapsed = self._live_elapsed()
        changed_index: Optional[int] = None
        if len(buffer) == len(self._buffer) + 1 and buffer.startswith(self._buffer):
            appended = self.engine.append_char(buffer[-1], elapsed)
            changed_index = appended.index
            verdicts = self.engine.verdicts
        else:
            verdicts = self.engine.resync(buffer, elapsed).verdicts
        self._buffer = buffer

        return InputUpdate(
            verdicts=verdicts,
            changed_index=changed_index,
            active_index=len(buffer),
            stats=self.live_stats(),
        )

    def tick(self) -> LiveStats:
        """Periodic timer callback; finishes the test when time runs out."""
        if self.timer.is_expired() and not self.is_finished:
            self.finish()
        return self.live_stats()

    def finish(self) -> ResultRecord:
        """Finalize the test over the full configured duration and save the result.

        Idempotent: later calls return the first result without saving again.

        Raises:
            HistoryStoreError: If the result could not be saved. The test is
                still finished and ``result`` holds the record.
        """
        if self._result is not None:
            return self._result

        self.timer.stop()
        # The final WPM always uses the full configured duration, not the measured time.
        self._result = self.engine.finalize(self.duration_seconds)
        try:
            self.history_store.save(self._result)
        except HistoryStoreError:
            logger.exception("Could not save result %s", self._result.summary())
            raise
        return self._result

    def history(self) -> HistoryLog:
        return self.history_store.load()
