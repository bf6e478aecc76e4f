"""Helper utilities for the Typespeed application.

This package contains small utilities shared by the desktop UI and the
services: debug output control and error message dialogs.
"""

from .debug_util import DebugUtil  # noqa: F401
