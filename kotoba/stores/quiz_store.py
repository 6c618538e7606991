"""
Quiz Store: built-in and custom quizzes with best scores.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..catalog import ContentCatalog, load_catalog
from ..models.authoring import build_quiz
from ..models.content import QuizContent, QuizQuestion
from ..models.progress import (
    QuizProgress,
    quiz_progress_map_from_dict,
    quiz_progress_map_to_dict,
)
from ..utils.clock import Clock
from ..utils.persistence import (
    CUSTOM_QUIZZES_KEY,
    QUIZ_PROGRESS_KEY,
    PersistencePort,
    RecordStore,
)
from ..utils.validation import (
    ContentValidationError,
    is_blank,
    validate_question_draft,
    validate_quiz_draft,
)
from .base import ContentStore

logger = logging.getLogger(__name__)


class QuizStore(ContentStore[QuizContent, QuizProgress]):
    """
    Quizzes plus the learner's best score on each.

    Usage:
        store = QuizStore(persistence)
        store.update_quiz_score("quiz-01", 2)
        store.get_best_score("quiz-01")   # 2
    """

    kind = "quiz"
    kind_plural = "quizzes"
    content_key = CUSTOM_QUIZZES_KEY
    progress_key = QUIZ_PROGRESS_KEY

    def __init__(
        self,
        persistence: PersistencePort | RecordStore,
        catalog: Optional[ContentCatalog] = None,
        clock: Optional[Clock] = None,
    ):
        self.catalog = catalog or load_catalog()
        super().__init__(persistence, self.catalog.quizzes, clock=clock)

    def _parse_content(self, data: Dict[str, Any]) -> QuizContent:
        return QuizContent.from_dict(data)

    def _parse_progress(self, data: Dict[str, Any]) -> Dict[str, QuizProgress]:
        return quiz_progress_map_from_dict(data)

    def _dump_progress(self, progress: Dict[str, QuizProgress]) -> Dict[str, Any]:
        return quiz_progress_map_to_dict(progress)

    def _validate_content(self, quiz: QuizContent) -> None:
        errors = list(validate_quiz_draft(quiz.title, quiz.questions).errors)
        if is_blank(quiz.id):
            errors.append("Quiz id is required")
        for question in quiz.questions:
            errors.extend(
                validate_question_draft(
                    question.question, question.correct_answer, question.wrong_answers
                ).errors
            )
            if is_blank(question.id):
                errors.append("Question id is required")
        if errors:
            raise ContentValidationError(errors)

    # ==================== Quizzes ====================

    @property
    def quizzes(self) -> List[QuizContent]:
        """All quizzes, built-in first."""
        return self._all()

    @property
    def custom_quizzes(self) -> List[QuizContent]:
        return self._custom()

    def get_quiz(self, quiz_id: str) -> Optional[QuizContent]:
        return self._find(quiz_id)

    def add_custom_quiz(self, quiz: QuizContent) -> QuizContent:
        """
        Append a user-authored quiz and persist the custom quizzes.

        Raises:
            ContentValidationError: If the quiz or one of its questions has blank
                required fields
        """
        added = self._add_custom(quiz)
        logger.debug("Added custom quiz %s (%r)", added.id, added.title)
        return added

    def create_custom_quiz(self, title: str, questions: Sequence[QuizQuestion]) -> QuizContent:
        """
        Validate a quiz draft, number it and add it.

        Raises:
            ContentValidationError: If the title is blank or there are no questions
        """
        with self._lock:
            quiz = build_quiz(title, questions, lesson_number=self.next_number())
            return self.add_custom_quiz(quiz)

    def delete_quiz(self, index: int) -> bool:
        return self.delete_quizzes([index])

    def delete_quizzes(self, indexes: Iterable[int]) -> bool:
        """
        Delete custom quizzes by list position, all or nothing.

        Returns:
            True if the quizzes were deleted
        """
        return self._delete(indexes)

    # ==================== Scores ====================

    def update_quiz_score(
        self,
        quiz_id: str,
        score: int,
        correct_question_ids: Iterable[str] = (),
    ) -> QuizProgress:
        """
        Record a finished attempt.

        The best score only ever goes up; correctly answered question ids
        accumulate across attempts.

        Args:
            quiz_id: Quiz identifier
            score: Number of correct answers in this attempt
            correct_question_ids: Questions answered correctly in this attempt

        Raises:
            ValueError: If score is negative
        """
        if score < 0:
            raise ValueError(f"score cannot be negative: {score}")

        now = self._clock.now()
        correct = set(correct_question_ids)

        def mutate(record: QuizProgress) -> None:
            record.last_attempt_date = now
            record.best_score = max(record.best_score, score)
            record.correct_answers |= correct

        record = self._update_progress(quiz_id, lambda: QuizProgress(last_attempt_date=now), mutate)
        logger.debug("Quiz %s scored %d (best %d)", quiz_id, score, record.best_score)
        return self.progress_for(quiz_id)

    def get_best_score(self, quiz_id: str) -> int:
        with self._lock:
            record = self._progress.get(quiz_id)
            return record.best_score if record else 0

    def progress_for(self, quiz_id: str) -> Optional[QuizProgress]:
        """Copy of the stored progress record, if any."""
        with self._lock:
            record = self._progress.get(quiz_id)
            if record is None:
                return None
            return QuizProgress(
                last_attempt_date=record.last_attempt_date,
                best_score=record.best_score,
                correct_answers=set(record.correct_answers),
            )
