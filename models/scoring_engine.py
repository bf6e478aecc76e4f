"""ScoringEngine: live diff scoring of typed input against a reference text.

The engine owns the reference text, the typed buffer and one verdict per
character cell. Appending a single character at the end of the buffer is scored
in constant time; any other edit (deletion, multi-character change) goes through
``resync`` which rescores the whole buffer.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel

from models.character_verdict import CharacterVerdict
from models.result_record import ResultRecord
from models.typing_metrics import TypingMetrics

logger = logging.getLogger(__name__)


class AppendResult(BaseModel):
    """Outcome of scoring one appended character."""

    index: int
    verdict: CharacterVerdict
    metrics: TypingMetrics

    model_config = {"frozen": True}


class ResyncResult(BaseModel):
    """Outcome of a full rescoring pass."""

    verdicts: Tuple[CharacterVerdict, ...]
    metrics: TypingMetrics

    model_config = {"frozen": True}


class ScoringEngine:
    """Scores a typed buffer against a reference text, one test at a time."""

    def __init__(self, reference_text: str) -> None:
        """Create an engine for ``reference_text``.

        Args:
            reference_text: The text to type. Must be non-empty.
        """
        self._reference: str = ""
        self._buffer: List[str] = []
        self._verdicts: List[CharacterVerdict] = []
        self._correct_count: int = 0
        self._incorrect_count: int = 0
        self._result: Optional[ResultRecord] = None
        self.set_reference(reference_text)

    @property
    def reference_text(self) -> str:
        return self._reference

    @property
    def buffer(self) -> str:
        return "".join(self._buffer)

    @property
    def verdicts(self) -> Tuple[CharacterVerdict, ...]:
        """Verdict per position in ``[0, max(len(reference), len(buffer)))``."""
        return tuple(self._verdicts)

    @property
    def typed_count(self) -> int:
        return len(self._buffer)

    @property
    def correct_count(self) -> int:
        return self._correct_count

    @property
    def incorrect_count(self) -> int:
        return self._incorrect_count

    @property
    def is_finalized(self) -> bool:
        return self._result is not None

    def set_reference(self, text: str) -> None:
        """Start a new test on ``text`` with an empty buffer and all cells unreached.

        Raises:
            ValueError: If ``text`` is empty.
        """
        if not text:
            raise ValueError("Reference text must not be empty")
        self._reference = text
        self._buffer = []
        self._verdicts = [CharacterVerdict.UNREACHED] * len(text)
        self._correct_count = 0
        self._incorrect_count = 0
        self._result = None
        logger.debug("Reference set (%d chars)", len(text))

    def _score(self, index: int, ch: str) -> CharacterVerdict:
        if index < len(self._reference) and ch == self._reference[index]:
            return CharacterVerdict.CORRECT
        # Anything typed past the end of the reference has no expected character.
        return CharacterVerdict.INCORRECT

    def metrics(self, elapsed_seconds: float = 0) -> TypingMetrics:
        """Snapshot of the counters with WPM for ``elapsed_seconds``."""
        return TypingMetrics.compute(
            correct_count=self._correct_count,
            incorrect_count=self._incorrect_count,
            elapsed_seconds=elapsed_seconds,
        )

    def append_char(self, ch: str, elapsed_seconds: float = 0) -> AppendResult:
        """Score one character typed at the end of the buffer.

        Args:
            ch: Exactly one character.
            elapsed_seconds: Elapsed time used for the WPM in the returned metrics.

        Returns:
            AppendResult: The index just typed, its verdict and updated metrics.

        Raises:
            ValueError: If ``ch`` is not a single character.
        """
        if len(ch) != 1:
            raise ValueError(f"append_char expects exactly one character, got {len(ch)}")

        index = len(self._buffer)
        if self.is_finalized:
            logger.warning("Ignoring keystroke after the test was finalized")
            return AppendResult(
                index=index,
                verdict=CharacterVerdict.UNREACHED,
                metrics=self.metrics(elapsed_seconds),
            )

        verdict = self._score(index, ch)
        self._buffer.append(ch)
        if index < len(self._verdicts):
            self._verdicts[index] = verdict
        else:
            self._verdicts.append(verdict)

        if verdict is CharacterVerdict.CORRECT:
            self._correct_count += 1
        else:
            self._incorrect_count += 1

        return AppendResult(index=index, verdict=verdict, metrics=self.metrics(elapsed_seconds))

    def resync(self, buffer: str, elapsed_seconds: float = 0) -> ResyncResult:
        """Replace the buffer and rescore every position from scratch.

        Used for deletions and any edit that is not a single trailing append.
        Positions at or past the end of ``buffer`` go back to UNREACHED.
        """
        if self.is_finalized:
            logger.warning("Ignoring resync after the test was finalized")
            return ResyncResult(verdicts=self.verdicts, metrics=self.metrics(elapsed_seconds))

        self._buffer = list(buffer)
        self._correct_count = 0
        self._incorrect_count = 0
        size = max(len(self._reference), len(self._buffer))
        verdicts = [CharacterVerdict.UNREACHED] * size
        for index, ch in enumerate(self._buffer):
            verdict = self._score(index, ch)
            verdicts[index] = verdict
            if verdict is CharacterVerdict.CORRECT:
                self._correct_count += 1
            else:
                self._incorrect_count += 1
        self._verdicts = verdicts

        return ResyncResult(verdicts=self.verdicts, metrics=self.metrics(elapsed_seconds))

    def finalize(self, elapsed_seconds: int) -> ResultRecord:
        """Freeze the current metrics into a ResultRecord.

        The engine ignores further input until the next ``set_reference``.
        Calling this again returns the same record.
        """
        if self._result is not None:
            return self._result

        metrics = self.metrics(elapsed_seconds)
        self._result = ResultRecord(
            wpm=metrics.wpm,
            accuracy_percent=metrics.accuracy_percent,
            duration_seconds=int(elapsed_seconds),
        )
        logger.info(
            "Test finalized: %d WPM, %d%% accuracy over %ds",
            metrics.wpm,
            metrics.accuracy_percent,
            int(elapsed_seconds),
        )
        return self._result
