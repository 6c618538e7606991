"""
Per-lesson and per-quiz progress records.

Both records are keyed by content id in their owning store and persisted as
one JSON object per store (``lesson_progress`` / ``quiz_progress``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Set

from ..utils.clock import parse_timestamp


@dataclass
class LessonProgress:
    """Cards completed in one lesson."""

    last_access_date: datetime
    completed_cards: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "completed_cards": sorted(self.completed_cards),
            "last_access_date": self.last_access_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LessonProgress:
        return cls(
            completed_cards=set(data.get("completed_cards", [])),
            last_access_date=parse_timestamp(data["last_access_date"]),
        )


@dataclass
class QuizProgress:
    """Best score and correctly answered questions for one quiz."""

    last_attempt_date: datetime
    best_score: int = 0
    correct_answers: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "correct_answers": sorted(self.correct_answers),
            "last_attempt_date": self.last_attempt_date.isoformat(),
            "best_score": self.best_score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> QuizProgress:
        return cls(
            correct_answers=set(data.get("correct_answers", [])),
            last_attempt_date=parse_timestamp(data["last_attempt_date"]),
            best_score=int(data.get("best_score", 0)),
        )


def lesson_progress_map_to_dict(progress: Dict[str, LessonProgress]) -> Dict[str, Any]:
    return {lesson_id: record.to_dict() for lesson_id, record in progress.items()}


def lesson_progress_map_from_dict(data: Dict[str, Any]) -> Dict[str, LessonProgress]:
    return {lesson_id: LessonProgress.from_dict(record) for lesson_id, record in data.items()}


def quiz_progress_map_to_dict(progress: Dict[str, QuizProgress]) -> Dict[str, Any]:
    return {quiz_id: record.to_dict() for quiz_id, record in progress.items()}


def quiz_progress_map_from_dict(data: Dict[str, Any]) -> Dict[str, QuizProgress]:
    return {quiz_id: QuizProgress.from_dict(record) for quiz_id, record in data.items()}
