"""Tests for ScoringEngine: incremental scoring, full resync and finalize."""

from datetime import datetime

import pytest

from models.character_verdict import CharacterVerdict
from models.scoring_engine import ScoringEngine
from models.typing_metrics import TypingMetrics

C = CharacterVerdict.CORRECT
X = CharacterVerdict.INCORRECT
U = CharacterVerdict.UNREACHED


def type_all(engine: ScoringEngine, text: str) -> None:
    for ch in text:
        engine.append_char(ch)


class TestSetReference:
    """Test cases for starting a test on a reference text."""

    def test_initial_state(self) -> None:
        """Test objective: A new engine has an empty buffer and all cells unreached."""
        engine = ScoringEngine("cat")

        assert engine.reference_text == "cat"
        assert engine.buffer == ""
        assert engine.verdicts == (U, U, U)
        assert engine.typed_count == 0
        assert engine.correct_count == 0
        assert engine.incorrect_count == 0
        assert not engine.is_finalized

    def test_set_reference_resets_state(self) -> None:
        """Test objective: set_reference clears buffer, counters and verdicts."""
        engine = ScoringEngine("cat")
        type_all(engine, "cbtxx")

        engine.set_reference("dog!")

        assert engine.reference_text == "dog!"
        assert engine.buffer == ""
        assert engine.verdicts == (U, U, U, U)
        assert engine.correct_count == 0
        assert engine.incorrect_count == 0

    def test_set_reference_reactivates_finalized_engine(self) -> None:
        """Test objective: A finalized engine accepts input again after set_reference."""
        engine = ScoringEngine("cat")
        engine.finalize(60)

        engine.set_reference("cat")
        result = engine.append_char("c")

        assert not engine.is_finalized
        assert result.verdict is C

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_reference_rejected(self, text: object) -> None:
        """Test objective: The reference text must be non-empty."""
        with pytest.raises(ValueError):
            ScoringEngine(text)  # type: ignore[arg-type]


class TestAppendChar:
    """Test cases for the single-character fast path."""

    def test_correct_character(self) -> None:
        """Test objective: A matching character is CORRECT and counted."""
        engine = ScoringEngine("cat")

        result = engine.append_char("c")

        assert result.index == 0
        assert result.verdict is C
        assert result.metrics.correct_count == 1
        assert result.metrics.incorrect_count == 0
        assert result.metrics.typed_count == 1
        assert engine.verdicts == (C, U, U)

    def test_incorrect_character(self) -> None:
        """Test objective: A mismatching character is INCORRECT and counted."""
        engine = ScoringEngine("cat")
        engine.append_char("c")

        result = engine.append_char("b")

        assert result.index == 1
        assert result.verdict is X
        assert engine.correct_count == 1
        assert engine.incorrect_count == 1
        assert engine.verdicts == (C, X, U)

    def test_space_matches_space(self) -> None:
        """Test objective: A typed space matches a space in the reference."""
        engine = ScoringEngine("a b")
        type_all(engine, "a ")

        assert engine.verdicts == (C, C, U)

    def test_case_sensitive(self) -> None:
        """Test objective: Characters are compared exactly, including case."""
        engine = ScoringEngine("Cat")

        assert engine.append_char("c").verdict is X

    def test_typing_beyond_end_is_incorrect(self) -> None:
        """Test objective: Characters past the reference end are always INCORRECT."""
        engine = ScoringEngine("hi")
        type_all(engine, "hi")

        results = [engine.append_char(ch) for ch in "xyz"]

        assert [r.index for r in results] == [2, 3, 4]
        assert all(r.verdict is X for r in results)
        assert engine.typed_count == 5
        assert engine.correct_count == 2
        assert engine.incorrect_count == 3
        assert engine.verdicts == (C, C, X, X, X)

    def test_typing_reference_char_beyond_end_is_still_incorrect(self) -> None:
        """Test objective: Even a plausible character past the end is INCORRECT."""
        engine = ScoringEngine("hi")
        type_all(engine, "hi")

        assert engine.append_char("i").verdict is X

    @pytest.mark.parametrize("ch", ["", "ab"])
    def test_requires_single_character(self, ch: str) -> None:
        """Test objective: The fast path accepts exactly one character."""
        engine = ScoringEngine("cat")

        with pytest.raises(ValueError):
            engine.append_char(ch)
        assert engine.buffer == ""

    def test_metrics_use_elapsed_seconds(self) -> None:
        """Test objective: The returned metrics compute WPM for the given elapsed time."""
        engine = ScoringEngine("abcde")
        type_all(engine, "abcd")

        result = engine.append_char("e", elapsed_seconds=60)

        assert result.metrics.wpm == 1


class TestResync:
    """Test cases for full recompute after deletions and other edits."""

    def test_example_cat_cbt(self) -> None:
        """Test objective: R="cat", B="cbt" scores correct/incorrect/correct at 67%."""
        engine = ScoringEngine("cat")

        result = engine.resync("cbt")

        assert result.verdicts == (C, X, C)
        assert result.metrics.correct_count == 2
        assert result.metrics.incorrect_count == 1
        assert result.metrics.accuracy_percent == 67

    def test_deletion_reverts_to_unreached(self) -> None:
        """Test objective: Deleting the last character reverts its cell to UNREACHED."""
        engine = ScoringEngine("cat")
        type_all(engine, "cbt")

        result = engine.resync("cb")

        assert result.verdicts == (C, X, U)
        assert result.metrics.correct_count == 1
        assert result.metrics.incorrect_count == 1
        assert result.metrics.typed_count == 2
        assert engine.buffer == "cb"

    def test_resync_beyond_end(self) -> None:
        """Test objective: R="hi", B="hixyz" gives three extra INCORRECT cells."""
        engine = ScoringEngine("hi")

        result = engine.resync("hixyz")

        assert result.verdicts == (C, C, X, X, X)
        assert result.metrics.typed_count == 5
        assert result.metrics.incorrect_count == 3

    def test_resync_shrinks_verdicts_back_to_reference_length(self) -> None:
        """Test objective: Deleting overflow characters trims the verdict list."""
        engine = ScoringEngine("hi")
        type_all(engine, "hixyz")

        result = engine.resync("hix")

        assert result.verdicts == (C, C, X)
        result = engine.resync("")
        assert result.verdicts == (U, U)
        assert result.metrics.accuracy_percent == 100

    def test_resync_is_idempotent(self) -> None:
        """Test objective: Two resyncs with the same buffer give identical results."""
        engine = ScoringEngine("hello world")

        first = engine.resync("helo wrld")
        second = engine.resync("helo wrld")

        assert first == second

    def test_mid_buffer_edit(self) -> None:
        """Test objective: Replacing an earlier character rescores that position."""
        engine = ScoringEngine("cat")
        type_all(engine, "cbt")

        result = engine.resync("cat")

        assert result.verdicts == (C, C, C)
        assert engine.incorrect_count == 0

    @pytest.mark.parametrize(
        "reference,buffer",
        [
            ("cat", ""),
            ("cat", "c"),
            ("cat", "xyz"),
            ("The quick brown fox.", "The quikc brown"),
            ("hello world", "hello world"),
            ("ab", "ab  ab"),
        ],
    )
    def test_incremental_matches_full_recompute(self, reference: str, buffer: str) -> None:
        """Test objective: Appending B one char at a time equals one resync(B)."""
        incremental = ScoringEngine(reference)
        type_all(incremental, buffer)
        full = ScoringEngine(reference)
        full.resync(buffer)

        assert incremental.verdicts == full.verdicts
        assert incremental.correct_count == full.correct_count
        assert incremental.incorrect_count == full.incorrect_count
        assert incremental.metrics(30) == full.metrics(30)

    @pytest.mark.parametrize(
        "reference,buffer",
        [
            ("cat", "cbt"),
            ("practice makes perfect", "practise makes"),
            ("abc", "abc"),
            ("abc", "zzz"),
        ],
    )
    def test_counts_match_positionwise_comparison(self, reference: str, buffer: str) -> None:
        """Test objective: correct == matching positions and correct + incorrect == len(B)."""
        engine = ScoringEngine(reference)

        metrics = engine.resync(buffer).metrics

        expected_correct = sum(1 for i, ch in enumerate(buffer) if ch == reference[i])
        assert metrics.correct_count == expected_correct
        assert metrics.correct_count + metrics.incorrect_count == len(buffer)


class TestFinalize:
    """Test cases for freezing a result."""

    def test_finalize_builds_result_record(self) -> None:
        """Test objective: finalize freezes WPM, accuracy, duration and a timestamp."""
        engine = ScoringEngine("a" * 300)
        engine.resync("a" * 250)

        record = engine.finalize(60)

        assert record.wpm == 50
        assert record.accuracy_percent == 100
        assert record.duration_seconds == 60
        assert isinstance(record.recorded_at, datetime)
        assert engine.is_finalized

    def test_finalize_matches_live_metrics(self) -> None:
        """Test objective: The final record equals the metrics computed for the same elapsed time."""
        engine = ScoringEngine("hello world")
        engine.resync("hello wrld!")
        live: TypingMetrics = engine.metrics(30)

        record = engine.finalize(30)

        assert record.wpm == live.wpm
        assert record.accuracy_percent == live.accuracy_percent

    def test_engine_is_inert_after_finalize(self) -> None:
        """Test objective: Input after finalize leaves the state untouched."""
        engine = ScoringEngine("cat")
        engine.append_char("c")
        engine.finalize(15)

        appended = engine.append_char("a")
        resynced = engine.resync("xyz")

        assert appended.verdict is U
        assert appended.index == 1
        assert resynced.verdicts == (C, U, U)
        assert engine.buffer == "c"
        assert engine.correct_count == 1

    def test_finalize_twice_returns_same_record(self) -> None:
        """Test objective: A second finalize returns the first record."""
        engine = ScoringEngine("cat")
        first = engine.finalize(15)

        assert engine.finalize(120) is first

    def test_finalize_with_nothing_typed(self) -> None:
        """Test objective: An untouched test finalizes at 0 WPM and 100% accuracy."""
        record = ScoringEngine("cat").finalize(30)

        assert record.wpm == 0
        assert record.accuracy_percent == 100
