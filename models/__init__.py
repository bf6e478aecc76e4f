"""
Models package for Typespeed.

This package contains the scoring engine and the data models it produces.
"""

from models.character_verdict import CharacterVerdict
from models.history_log import HistoryLog
from models.result_record import ResultRecord
from models.scoring_engine import AppendResult, ResyncResult, ScoringEngine
from models.typing_metrics import TypingMetrics

__all__ = [
    "AppendResult",
    "CharacterVerdict",
    "HistoryLog",
    "ResultRecord",
    "ResyncResult",
    "ScoringEngine",
    "TypingMetrics",
]
