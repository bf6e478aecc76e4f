"""Per-character verdicts produced by the scoring engine."""

from enum import Enum


class CharacterVerdict(str, Enum):
    """State of a single character cell in the reference text."""

    UNREACHED = "unreached"
    CORRECT = "correct"
    INCORRECT = "incorrect"

    @property
    def is_scored(self) -> bool:
        """True for positions the user has already typed."""
        return self is not CharacterVerdict.UNREACHED
