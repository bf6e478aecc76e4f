"""Tests for error reporting without showing dialogs."""

import logging

import pytest

from helpers.error_utils import report_error


def test_report_error_logs_message_and_details(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        logged = report_error(
            "Could not save the result to history.",
            OSError("disk full"),
            title="History Error",
            show_dialog=False,
        )

    assert logged == "Could not save the result to history. (disk full)"
    assert "History Error: Could not save the result to history. (disk full)" in caplog.text


def test_report_error_without_exception(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        logged = report_error("Something went wrong", show_dialog=False)

    assert logged == "Something went wrong"
    assert "Error: Something went wrong" in caplog.text
