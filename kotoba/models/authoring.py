"""
Builders for user-authored flashcards, lessons, questions and quizzes.

Each builder validates its draft first and raises ``ContentValidationError``
instead of producing content with empty required fields.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..utils.validation import (
    is_blank,
    optional_text,
    validate_flashcard_draft,
    validate_lesson_draft,
    validate_question_draft,
    validate_quiz_draft,
)
from .content import (
    ContentOrigin,
    Flashcard,
    LessonContent,
    QuizContent,
    QuizQuestion,
    new_content_id,
)


def build_flashcard(
    front: str,
    back: str,
    furigana: Optional[str] = None,
    front_image: Optional[str] = None,
    back_image: Optional[str] = None,
) -> Flashcard:
    """
    Build a user-authored flashcard.

    Args:
        front: Japanese text (required)
        back: English meaning (required)
        furigana: Reading aid; blank means none
        front_image: Opaque image reference
        back_image: Opaque image reference

    Raises:
        ContentValidationError: If front or back is blank
    """
    validate_flashcard_draft(front, back).raise_for_errors()
    return Flashcard(
        id=new_content_id("card"),
        front=front,
        back=back,
        furigana=optional_text(furigana),
        front_image=front_image,
        back_image=back_image,
    )


def build_lesson(title: str, flashcards: Sequence[Flashcard], lesson_number: int) -> LessonContent:
    """
    Build a user-authored lesson.

    Raises:
        ContentValidationError: If the title is blank or there are no cards
    """
    validate_lesson_draft(title, flashcards).raise_for_errors()
    return LessonContent(
        id=new_content_id("lesson"),
        lesson_number=lesson_number,
        title=title,
        flashcards=tuple(flashcards),
        origin=ContentOrigin.CUSTOM,
    )


def build_quiz_question(
    question: str,
    correct_answer: str,
    wrong_answers: Iterable[str],
    furigana: Optional[str] = None,
    question_image: Optional[str] = None,
) -> QuizQuestion:
    """
    Build a user-authored quiz question.

    Blank wrong answers after the first are dropped.

    Raises:
        ContentValidationError: If a required field is blank
    """
    wrong = list(wrong_answers)
    validate_question_draft(question, correct_answer, wrong).raise_for_errors()
    return QuizQuestion(
        id=new_content_id("question"),
        question=question,
        correct_answer=correct_answer,
        wrong_answers=tuple(answer for answer in wrong if not is_blank(answer)),
        furigana=optional_text(furigana),
        question_image=question_image,
    )


def build_quiz(title: str, questions: Sequence[QuizQuestion], lesson_number: int) -> QuizContent:
    validate_quiz_draft(title, questions).raise_for_errors()
    return QuizContent(
        id=new_content_id("quiz"),
        lesson_number=lesson_number,
        title=title,
        questions=tuple(questions),
        origin=ContentOrigin.CUSTOM,
    )
