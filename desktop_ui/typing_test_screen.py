"""TypingTestScreen - timed typing test with live feedback and result history.

The widget only paints what the TypingTestSession returns; all scoring happens
in the session's ScoringEngine.
"""

import logging
from typing import Optional, Sequence

from PySide6.QtCore import QMimeData, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QFont, QTextCharFormat, QTextCursor
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from helpers.debug_util import DebugUtil
from helpers.error_utils import report_error
from models.character_verdict import CharacterVerdict
from models.history_log import HistoryLog
from models.result_record import ResultRecord
from services.history_store import HistoryStoreError
from services.typing_test_session import InputUpdate, LiveStats, TypingTestSession

logger = logging.getLogger(__name__)

SPACE_MARKER = "•"
NEWLINE_MARKER = "↵"


def display_text_for(reference: str) -> str:
    """One visible display character per reference character."""
    return reference.replace(" ", SPACE_MARKER).replace("\n", NEWLINE_MARKER)


class PasteBlockingInput(QPlainTextEdit):
    """Plain text input that drops anything pasted or dropped into it."""

    paste_rejected = Signal()

    def insertFromMimeData(self, source: QMimeData) -> None:  # noqa: N802
        self.paste_rejected.emit()


class TypingTestScreen(QWidget):
    """Typing test window: text cells, input box, stats, controls and history."""

    test_finished = Signal(object)  # ResultRecord

    def __init__(
        self,
        session: TypingTestSession,
        show_dialogs: bool = True,
        parent: Optional[QWidget] = None,
    ) -> None:
        """Initialize the screen for ``session``.

        Args:
            session: The test session to drive.
            show_dialogs: Show the result and error dialogs (disabled in tests).
            parent: Parent widget.
        """
        super().__init__(parent)
        self.setWindowTitle("Typing Speed Test")
        self.setMinimumSize(720, 520)

        self.session = session
        self.show_dialogs = show_dialogs
        self.debug_util = DebugUtil()
        self._active_index: int = 0

        self._setup_ui()
        self._init_text_formats()

        self.timer = QTimer(self)
        self.timer.setInterval(self.session.settings.tick_interval_ms)
        self.timer.timeout.connect(self._on_tick)

        self._render_text()
        self._show_stats(self.session.live_stats())
        self._load_history()

    def _setup_ui(self) -> None:
        """Set up the widgets and layouts."""
        main_layout = QVBoxLayout(self)

        title_label = QLabel("<h1>Typing Speed Test</h1>")
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        main_layout.addWidget(title_label)

        controls_layout = QHBoxLayout()
        controls_layout.addWidget(QLabel("Duration:"))
        self.duration_combo = QComboBox()
        for seconds in self.session.settings.allowed_durations:
            self.duration_combo.addItem(f"{seconds}s", seconds)
        self.duration_combo.setCurrentIndex(
            self.duration_combo.findData(self.session.duration_seconds)
        )
        # Connected after population so filling the combo does not reset the test.
        self.duration_combo.currentIndexChanged.connect(self._on_duration_changed)
        controls_layout.addWidget(self.duration_combo)
        controls_layout.addStretch(1)

        self.new_text_button = QPushButton("New Text")
        self.new_text_button.clicked.connect(self._on_new_text)
        controls_layout.addWidget(self.new_text_button)

        self.restart_button = QPushButton("Restart")
        self.restart_button.clicked.connect(self._on_restart)
        controls_layout.addWidget(self.restart_button)
        main_layout.addLayout(controls_layout)

        stats_layout = QHBoxLayout()
        bold = QFont("Arial", 12, QFont.Weight.Bold)
        self.time_left_label = QLabel()
        self.wpm_label = QLabel()
        self.correct_label = QLabel()
        self.incorrect_label = QLabel()
        self.typed_label = QLabel()
        self.accuracy_label = QLabel()
        for label in (
            self.time_left_label,
            self.wpm_label,
            self.correct_label,
            self.incorrect_label,
            self.typed_label,
            self.accuracy_label,
        ):
            label.setFont(bold)
            stats_layout.addWidget(label)
        main_layout.addLayout(stats_layout)

        self.display_text = QTextEdit()
        self.display_text.setReadOnly(True)
        self.display_text.setFont(QFont("Courier New", 14))
        self.display_text.setMinimumHeight(120)
        main_layout.addWidget(self.display_text)

        self.typing_input = PasteBlockingInput()
        self.typing_input.setFont(QFont("Courier New", 12))
        self.typing_input.setMinimumHeight(80)
        self.typing_input.textChanged.connect(self._on_text_changed)
        self.typing_input.paste_rejected.connect(self._on_paste_rejected)
        main_layout.addWidget(self.typing_input)

        main_layout.addWidget(QLabel("<h3>History</h3>"))
        self.history_list = QListWidget()
        self.history_list.setMaximumHeight(160)
        main_layout.addWidget(self.history_list)

    def _init_text_formats(self) -> None:
        """Create the character formats reused for painting cells."""
        self.correct_format = QTextCharFormat()
        self.correct_format.setForeground(QColor(0, 128, 0))
        self.correct_format.setBackground(QColor(220, 255, 220))

        self.error_format = QTextCharFormat()
        self.error_format.setForeground(QColor(200, 0, 0))
        self.error_format.setBackground(QColor(255, 220, 220))

        self.default_format = QTextCharFormat()
        self.default_format.setForeground(QColor(0, 0, 0))
        self.default_format.setBackground(QColor(255, 255, 255))
        self.default_format.setFontUnderline(False)

        self.active_format = QTextCharFormat()
        self.active_format.setFontUnderline(True)
        self.active_format.setBackground(QColor(255, 245, 200))

    def _format_for(self, verdict: CharacterVerdict) -> QTextCharFormat:
        if verdict is CharacterVerdict.CORRECT:
            return self.correct_format
        if verdict is CharacterVerdict.INCORRECT:
            return self.error_format
        return self.default_format

    def _paint_cell(self, cursor: QTextCursor, index: int, verdict: CharacterVerdict) -> None:
        if index >= len(self.session.reference_text):
            return
        cursor.setPosition(index)
        cursor.movePosition(QTextCursor.MoveOperation.Right, QTextCursor.MoveMode.KeepAnchor)
        fmt = QTextCharFormat(self._format_for(verdict))
        if index == self._active_index:
            fmt.merge(self.active_format)
        cursor.setCharFormat(fmt)

    def _paint(self, verdicts: Sequence[CharacterVerdict], indices: Sequence[int]) -> None:
        """Repaint the given cell indices from ``verdicts``."""
        self.display_text.blockSignals(True)
        cursor = QTextCursor(self.display_text.document())
        for index in indices:
            verdict = verdicts[index] if index < len(verdicts) else CharacterVerdict.UNREACHED
            self._paint_cell(cursor, index, verdict)
        self.display_text.blockSignals(False)

    def _render_text(self) -> None:
        """Show the reference text with every cell unreached and the first one active."""
        self._active_index = 0
        self.display_text.setPlainText(display_text_for(self.session.reference_text))
        verdicts = self.session.engine.verdicts
        self._paint(verdicts, range(len(verdicts)))

    def _apply_update(self, update: InputUpdate) -> None:
        previous_active = self._active_index
        self._active_index = update.active_index
        if update.changed_index is None:
            indices: Sequence[int] = range(len(update.verdicts))
        else:
            indices = sorted({previous_active, update.changed_index, update.active_index})
        self._paint(update.verdicts, indices)
        self._show_stats(update.stats)

    def _show_stats(self, stats: LiveStats) -> None:
        metrics = stats.metrics
        self.time_left_label.setText(f"Time: {stats.remaining_seconds}s")
        self.wpm_label.setText(f"WPM: {metrics.wpm}")
        self.correct_label.setText(f"Correct: {metrics.correct_count}")
        self.incorrect_label.setText(f"Incorrect: {metrics.incorrect_count}")
        self.typed_label.setText(f"Typed: {metrics.typed_count}")
        self.accuracy_label.setText(f"Accuracy: {metrics.accuracy_percent}%")

    def _show_history(self, history: HistoryLog) -> None:
        self.history_list.clear()
        for record in history.records:
            self.history_list.addItem(record.summary())

    def _load_history(self) -> None:
        self._show_history(self.session.history())

    def _on_text_changed(self) -> None:
        if self.session.is_finished:
            return
        update = self.session.handle_input(self.typing_input.toPlainText())
        if update is None:
            return
        if not self.timer.isActive():
            self.timer.start()
        self._apply_update(update)

    def _on_paste_rejected(self) -> None:
        self.session.handle_input(self.typing_input.toPlainText(), is_paste=True)
        self.debug_util.debugMessage("Paste rejected")

    def _on_tick(self) -> None:
        was_finished = self.session.is_finished
        try:
            stats = self.session.tick()
        except HistoryStoreError as e:
            report_error(
                "Could not save the result to history.",
                e,
                title="History Error",
                parent=self,
                show_dialog=self.show_dialogs,
            )
            stats = self.session.live_stats()
        if stats.finished and not was_finished:
            self._on_finished()
            # The final numbers use the full configured duration.
            result = self.session.result
            if result is not None:
                self.wpm_label.setText(f"WPM: {result.wpm}")
                self.accuracy_label.setText(f"Accuracy: {result.accuracy_percent}%")
                self.time_left_label.setText("Time: 0s")
            return
        self._show_stats(stats)

    def _on_finished(self) -> None:
        self.timer.stop()
        self.typing_input.setReadOnly(True)
        self.typing_input.setEnabled(False)
        result = self.session.result
        self._load_history()
        if result is None:
            return
        logger.debug("Test finished: %s", result.summary())
        self.test_finished.emit(result)
        if self.show_dialogs:
            self._show_result_dialog(result)

    def _show_result_dialog(self, result: ResultRecord) -> None:
        QMessageBox.information(
            self,
            "Test finished!",
            f"WPM: {result.wpm}\nAccuracy: {result.accuracy_percent}%",
        )

    def _reset(self, new_text: bool) -> None:
        self.timer.stop()
        self._show_fresh_test(self.session.reset(new_text=new_text))

    def _show_fresh_test(self, stats: LiveStats) -> None:
        """Clear the input and repaint after the session has been reset."""
        self.typing_input.blockSignals(True)
        self.typing_input.clear()
        self.typing_input.blockSignals(False)
        self.typing_input.setEnabled(True)
        self.typing_input.setReadOnly(False)
        self._render_text()
        self._show_stats(stats)
        self.typing_input.setFocus()

    def _on_new_text(self) -> None:
        self._reset(new_text=True)

    def _on_restart(self) -> None:
        self._reset(new_text=False)

    def _on_duration_changed(self, index: int) -> None:
        seconds = self.duration_combo.itemData(index)
        if seconds is None:
            return
        self.timer.stop()
        self._show_fresh_test(self.session.change_duration(int(seconds)))
