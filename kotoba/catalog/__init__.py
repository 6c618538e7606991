"""
Built-in content catalog.

The lessons and quizzes that ship with the package live in ``builtin.json``
next to this module. They are validated against ``catalog.schema.json`` on
first load, given stable ids and tagged ``builtin``; the loaded catalog is
shared and never changes.

Stable ids:
- lesson cards: ``lesson-01-card-01``, ``lesson-01-card-02``, ...
- quiz questions: ``quiz-01-q-01``, ``quiz-01-q-02``, ...

Persisted progress refers to these ids, so they must not depend on anything
but the entry's position in the data file.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ..config import config
from ..models.content import (
    ContentOrigin,
    Flashcard,
    LessonContent,
    QuizContent,
    QuizQuestion,
)
from ..utils.validation import get_validator

logger = logging.getLogger(__name__)

CATALOG_FILE = "builtin.json"


@dataclass(frozen=True)
class ContentCatalog:
    """Immutable set of built-in lessons and quizzes, ordered by number."""

    lessons: Tuple[LessonContent, ...] = ()
    quizzes: Tuple[QuizContent, ...] = ()

    def get_lesson(self, lesson_id: str) -> Optional[LessonContent]:
        return next((lesson for lesson in self.lessons if lesson.id == lesson_id), None)

    def get_quiz(self, quiz_id: str) -> Optional[QuizContent]:
        return next((quiz for quiz in self.quizzes if quiz.id == quiz_id), None)

    def lesson_by_number(self, lesson_number: int) -> Optional[LessonContent]:
        return next(
            (lesson for lesson in self.lessons if lesson.lesson_number == lesson_number),
            None,
        )

    @property
    def card_count(self) -> int:
        return sum(len(lesson.flashcards) for lesson in self.lessons)


def _build_lesson(entry: Dict[str, Any]) -> LessonContent:
    lesson_id = entry["id"]
    cards = tuple(
        Flashcard(
            id=f"{lesson_id}-card-{position:02d}",
            front=card["front"],
            back=card["back"],
            furigana=card.get("furigana"),
            front_image=card.get("front_image"),
            back_image=card.get("back_image"),
        )
        for position, card in enumerate(entry["flashcards"], start=1)
    )
    return LessonContent(
        id=lesson_id,
        lesson_number=entry["lesson_number"],
        title=entry["title"],
        flashcards=cards,
        origin=ContentOrigin.BUILTIN,
    )


def _build_quiz(entry: Dict[str, Any]) -> QuizContent:
    quiz_id = entry["id"]
    questions = tuple(
        QuizQuestion(
            id=f"{quiz_id}-q-{position:02d}",
            question=item["question"],
            correct_answer=item["correct_answer"],
            wrong_answers=tuple(item["wrong_answers"]),
            furigana=item.get("furigana"),
            question_image=item.get("question_image"),
        )
        for position, item in enumerate(entry["questions"], start=1)
    )
    return QuizContent(
        id=quiz_id,
        lesson_number=entry["lesson_number"],
        title=entry["title"],
        questions=questions,
        origin=ContentOrigin.BUILTIN,
    )


def parse_catalog(data: Dict[str, Any]) -> ContentCatalog:
    """
    Build a catalog from decoded catalog JSON.

    Args:
        data: Document matching ``catalog.schema.json``

    Returns:
        ContentCatalog with lessons and quizzes sorted by lesson number

    Raises:
        ValidationError: If the document does not match the schema
    """
    get_validator("catalog").check(data)

    # sorted() is stable, so equal numbers keep file order
    lessons = sorted(
        (_build_lesson(entry) for entry in data["lessons"]),
        key=lambda lesson: lesson.lesson_number,
    )
    quizzes = sorted(
        (_build_quiz(entry) for entry in data["quizzes"]),
        key=lambda quiz: quiz.lesson_number,
    )
    return ContentCatalog(lessons=tuple(lessons), quizzes=tuple(quizzes))


def load_catalog_file(path: Path | str) -> ContentCatalog:
    """Load and validate a catalog data file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    catalog = parse_catalog(data)
    logger.debug(
        "Loaded catalog %s: %d lessons, %d cards, %d quizzes",
        path,
        len(catalog.lessons),
        catalog.card_count,
        len(catalog.quizzes),
    )
    return catalog


_catalog: Optional[ContentCatalog] = None
_catalog_lock = threading.Lock()


def load_catalog() -> ContentCatalog:
    """Get the shared built-in catalog, loading it on first use."""
    global _catalog
    with _catalog_lock:
        if _catalog is None:
            _catalog = load_catalog_file(config.paths.catalog_dir / CATALOG_FILE)
        return _catalog


__all__ = [
    "CATALOG_FILE",
    "ContentCatalog",
    "load_catalog",
    "load_catalog_file",
    "parse_catalog",
]
