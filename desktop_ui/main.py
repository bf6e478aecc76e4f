"""Entry point for the Typespeed desktop application.

Usage:
    typespeed [loud|quiet]
"""

import logging
import os
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from desktop_ui.typing_test_screen import TypingTestScreen
from helpers.debug_util import DEBUG_MODE_ENV
from services.app_settings import AppSettings
from services.history_store import open_history_store
from services.typing_test_session import TypingTestSession

logger = logging.getLogger(__name__)


def setup_logging(debug_mode: str = "quiet") -> None:
    """Configure root logging; "loud" also enables debug records."""
    logging.basicConfig(
        level=logging.DEBUG if debug_mode == "loud" else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_debug_mode(argv: List[str]) -> str:
    """Return "loud" or "quiet" from the command line, defaulting to quiet."""
    for arg in argv:
        if arg.lower() in ("loud", "quiet"):
            return arg.lower()
    return "quiet"


def build_session(settings: Optional[AppSettings] = None) -> TypingTestSession:
    """Create a session backed by the JSON history file from ``settings``."""
    settings = settings or AppSettings.from_env()
    store = open_history_store(
        settings.history_path, key=settings.history_key, max_entries=settings.history_limit
    )
    logger.info("Using history file %s", settings.history_path)
    return TypingTestSession(settings=settings, history_store=store)


def main(argv: Optional[List[str]] = None) -> int:
    """Launch the typing test window and run the Qt event loop."""
    args = sys.argv[1:] if argv is None else argv
    debug_mode = parse_debug_mode(args)
    os.environ[DEBUG_MODE_ENV] = debug_mode
    setup_logging(debug_mode)

    try:
        session = build_session()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Typespeed")
    screen = TypingTestScreen(session)
    screen.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
