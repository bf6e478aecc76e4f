"""
Pytest configuration and fixtures for desktop_ui tests.
"""
import os

# Must be set before pytest-qt creates the QApplication.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from desktop_ui.typing_test_screen import TypingTestScreen
from services.typing_test_session import TypingTestSession


@pytest.fixture
def screen(qtbot, session: TypingTestSession) -> TypingTestScreen:
    """Create a TypingTestScreen on the "cat" session without dialogs."""
    widget = TypingTestScreen(session, show_dialogs=False)
    qtbot.addWidget(widget)
    return widget
