"""PySide6 desktop user interface for Typespeed."""
