"""Debug utilities for controlling debug output across the app.

Provides a centralized way to handle debug messages, supporting both quiet mode
(logging only) and loud mode (print to stdout).
"""

import logging
import os
from typing import Optional

DEBUG_MODE_ENV = "TYPESPEED_DEBUG_MODE"
DEBUG_MODES = ("quiet", "loud")


class DebugUtil:
    """Manage debug output based on debug mode setting.

    Supports two modes:
    - "quiet": Debug messages are logged only
    - "loud": Debug messages are printed to stdout
    """

    def __init__(self, mode: Optional[str] = None) -> None:
        """Initialize the debug mode.

        Args:
            mode: Explicit mode. When omitted, the TYPESPEED_DEBUG_MODE
                environment variable is read. Defaults to "quiet" if not set
                or invalid.
        """
        raw_mode = mode if mode is not None else os.environ.get(DEBUG_MODE_ENV, "quiet")
        self._mode = self._normalize(raw_mode)
        self._logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _normalize(mode: str) -> str:
        lowered = mode.lower()
        return lowered if lowered in DEBUG_MODES else "quiet"

    def debug_mode(self) -> str:
        """Get the current debug mode ("quiet" or "loud")."""
        return self._mode

    def debugMessage(self, *args: object) -> None:
        """Output a debug message based on the current debug mode.

        In "quiet" mode: Messages are logged using the logger.
        In "loud" mode: Messages are printed to stdout using print().
        """
        message = " ".join(str(arg) for arg in args)
        if not message:
            return
        if self._mode == "loud":
            print("[DEBUG]", message)
        else:
            self._logger.debug(message)

    def set_mode(self, mode: str) -> None:
        """Change the debug mode. Invalid values default to "quiet"."""
        self._mode = self._normalize(mode)

    def is_loud(self) -> bool:
        return self._mode == "loud"

    def is_quiet(self) -> bool:
        return self._mode == "quiet"
