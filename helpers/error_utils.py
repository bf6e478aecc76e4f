"""
Error reporting for the Typespeed desktop UI.

Failures the user should know about (for example a history file that cannot be
written) are always logged, and shown in a critical message box when dialogs
are enabled.
"""

import logging
from typing import Optional

from PySide6.QtWidgets import QMessageBox, QWidget

logger = logging.getLogger(__name__)


def ErrorMsgBox(
    error_message: str,
    title: str = "Error",
    details: Optional[str] = None,
    parent: Optional[QWidget] = None,
) -> None:
    """Show a modal critical message box.

    Args:
        error_message: Main text of the dialog
        title: Window title
        details: Informative text shown under the main message
        parent: Parent widget
    """
    try:
        box = QMessageBox(parent)
        box.setIcon(QMessageBox.Icon.Critical)
        box.setWindowTitle(title)
        box.setText(error_message)
        if details:
            box.setInformativeText(details)
        box.exec()
    except RuntimeError as e:
        logger.error("Failed to display error message box: %s", e)


def report_error(
    error_message: str,
    error: Optional[BaseException] = None,
    title: str = "Error",
    parent: Optional[QWidget] = None,
    show_dialog: bool = True,
) -> str:
    """Log ``error_message`` and optionally show it to the user.

    Returns:
        The text logged, message and error details combined.
    """
    details = str(error) if error is not None else None
    logged = f"{error_message} ({details})" if details else error_message
    logger.error("%s: %s", title, logged)
    if show_dialog:
        ErrorMsgBox(error_message, title=title, details=details, parent=parent)
    return logged
