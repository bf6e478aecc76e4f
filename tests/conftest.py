"""Pytest configuration for the test suite."""

import random
import sys
from pathlib import Path
from typing import List

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from services.app_settings import AppSettings
from services.history_store import InMemoryHistoryStore
from services.text_source import TextSource
from services.typing_test_session import TypingTestSession

SAMPLE_TEXTS: List[str] = ["cat", "hello world"]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """Test objective: Provide a controllable clock for countdown tests."""
    return FakeClock()


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    """Test objective: Provide settings pointing at a temporary history file."""
    return AppSettings(duration_seconds=60, history_path=tmp_path / "history.json")


@pytest.fixture
def single_text_source() -> TextSource:
    """Test objective: Provide a text source that always returns "cat"."""
    return TextSource(["cat"], rng=random.Random(0))


@pytest.fixture
def session(
    settings: AppSettings, single_text_source: TextSource, fake_clock: FakeClock
) -> TypingTestSession:
    """Test objective: Provide a session with in-memory history and a fake clock."""
    return TypingTestSession(
        settings=settings,
        text_source=single_text_source,
        history_store=InMemoryHistoryStore(),
        clock=fake_clock,
    )
