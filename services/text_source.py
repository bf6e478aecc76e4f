"""TextSource: supplies sample texts for typing tests."""

import logging
import random
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TEXTS: Tuple[str, ...] = (
    "The quick brown fox jumps over the lazy dog.",
    "Practice makes perfect. Keep typing every day to improve speed and accuracy.",
    "Learning to code is like learning a new language. Patience and practice help a lot.",
    "Small consistent steps lead to big results over time.",
    "Design, build, and ship. Feedback will guide your improvements.",
)


class TextSource:
    """Random pick from a fixed pool of reference texts."""

    def __init__(
        self, texts: Optional[Sequence[str]] = None, rng: Optional[random.Random] = None
    ) -> None:
        """Create a source over ``texts`` (defaults to the built-in samples).

        Raises:
            ValueError: If the pool is empty or holds an empty text.
        """
        pool = tuple(DEFAULT_TEXTS if texts is None else texts)
        if not pool:
            raise ValueError("Text pool must not be empty")
        if any(not text for text in pool):
            raise ValueError("Text pool must not contain empty texts")
        self.texts: Tuple[str, ...] = pool
        self._rng = rng or random.Random()

    def pick(self) -> str:
        """Return one text from the pool at random."""
        text = self._rng.choice(self.texts)
        logger.debug("Picked text: %s...", text[:20])
        return text
