"""
Lesson and quiz content: flashcards, multiple-choice questions and their
containers.

Content is immutable once built. Every lesson and quiz carries an ``origin``
tag so built-in catalog entries can be told apart from user-authored ones
without relying on list position.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ContentOrigin(str, Enum):
    """Where a lesson or quiz came from."""

    BUILTIN = "builtin"
    CUSTOM = "custom"


def new_content_id(prefix: str) -> str:
    """Generate a unique id for user-authored content."""
    return f"{prefix}-{uuid.uuid4()}"


@dataclass(frozen=True)
class Flashcard:
    """
    One front/back vocabulary card.

    Attributes:
        id: Card identifier (unique across all lessons)
        front: Japanese text
        back: English meaning
        furigana: Optional reading aid
        front_image: Optional opaque image reference for the front
        back_image: Optional opaque image reference for the back
    """

    id: str
    front: str
    back: str
    furigana: Optional[str] = None
    front_image: Optional[str] = None
    back_image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "front": self.front,
            "furigana": self.furigana,
            "back": self.back,
            "front_image": self.front_image,
            "back_image": self.back_image,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Flashcard:
        return cls(
            id=data["id"],
            front=data["front"],
            back=data["back"],
            furigana=data.get("furigana"),
            front_image=data.get("front_image"),
            back_image=data.get("back_image"),
        )


@dataclass(frozen=True)
class LessonContent:
    """Numbered lesson holding an ordered run of flashcards."""

    id: str
    lesson_number: int
    title: str
    flashcards: Tuple[Flashcard, ...] = ()
    origin: ContentOrigin = ContentOrigin.CUSTOM

    def __post_init__(self):
        # Accept any sequence, store a tuple
        object.__setattr__(self, "flashcards", tuple(self.flashcards))

    @property
    def is_builtin(self) -> bool:
        return self.origin is ContentOrigin.BUILTIN

    def with_origin(self, origin: ContentOrigin) -> LessonContent:
        """Copy of this lesson tagged with ``origin``."""
        if self.origin is origin:
            return self
        return replace(self, origin=origin)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "lesson_number": self.lesson_number,
            "title": self.title,
            "origin": self.origin.value,
            "flashcards": [card.to_dict() for card in self.flashcards],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LessonContent:
        return cls(
            id=data["id"],
            lesson_number=int(data["lesson_number"]),
            title=data["title"],
            flashcards=tuple(Flashcard.from_dict(c) for c in data.get("flashcards", [])),
            origin=ContentOrigin(data.get("origin", ContentOrigin.CUSTOM.value)),
        )


@dataclass(frozen=True)
class QuizQuestion:
    """
    Multiple-choice question with one correct answer.

    Attributes:
        id: Question identifier
        question: Prompt shown to the learner
        correct_answer: The right option
        wrong_answers: Distractor options
        furigana: Optional reading aid for the prompt
        question_image: Optional opaque image reference
    """

    id: str
    question: str
    correct_answer: str
    wrong_answers: Tuple[str, ...] = ()
    furigana: Optional[str] = None
    question_image: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "wrong_answers", tuple(self.wrong_answers))

    def options(self) -> list[str]:
        """All answer options, distractors first."""
        return [*self.wrong_answers, self.correct_answer]

    def is_correct(self, answer: str) -> bool:
        return answer == self.correct_answer

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "question": self.question,
            "furigana": self.furigana,
            "correct_answer": self.correct_answer,
            "wrong_answers": list(self.wrong_answers),
            "question_image": self.question_image,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> QuizQuestion:
        return cls(
            id=data["id"],
            question=data["question"],
            correct_answer=data["correct_answer"],
            wrong_answers=tuple(data.get("wrong_answers", [])),
            furigana=data.get("furigana"),
            question_image=data.get("question_image"),
        )


@dataclass(frozen=True)
class QuizContent:
    """Numbered quiz holding an ordered run of questions."""

    id: str
    lesson_number: int
    title: str
    questions: Tuple[QuizQuestion, ...] = ()
    origin: ContentOrigin = ContentOrigin.CUSTOM

    def __post_init__(self):
        object.__setattr__(self, "questions", tuple(self.questions))

    @property
    def is_builtin(self) -> bool:
        return self.origin is ContentOrigin.BUILTIN

    def with_origin(self, origin: ContentOrigin) -> QuizContent:
        """Copy of this quiz tagged with ``origin``."""
        if self.origin is origin:
            return self
        return replace(self, origin=origin)

    def get_question(self, question_id: str) -> Optional[QuizQuestion]:
        return next((q for q in self.questions if q.id == question_id), None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "lesson_number": self.lesson_number,
            "title": self.title,
            "origin": self.origin.value,
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> QuizContent:
        return cls(
            id=data["id"],
            lesson_number=int(data["lesson_number"]),
            title=data["title"],
            questions=tuple(QuizQuestion.from_dict(q) for q in data.get("questions", [])),
            origin=ContentOrigin(data.get("origin", ContentOrigin.CUSTOM.value)),
        )


@dataclass(frozen=True)
class SearchResult:
    """One flashcard matched by a search query."""

    id: str
    japanese_text: str
    english_text: str
    lesson_number: int
    lesson_title: str
    furigana: Optional[str] = field(default=None)

    @classmethod
    def from_flashcard(cls, card: Flashcard, lesson: LessonContent) -> SearchResult:
        return cls(
            id=card.id,
            japanese_text=card.front,
            english_text=card.back,
            lesson_number=lesson.lesson_number,
            lesson_title=lesson.title,
            furigana=card.furigana,
        )
