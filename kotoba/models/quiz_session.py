"""
Quiz Session: one attempt at a multiple-choice quiz.

Answer options are shuffled per question, each correct answer earns points
straight away, and completing the session records the score with the quiz
store and ticks the daily quiz goal.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..config import ProgressConfig, config
from ..utils.clock import Clock, SystemClock
from .content import QuizContent, QuizQuestion
from .learner_profile import LearnerModel

if TYPE_CHECKING:
    from ..stores.quiz_store import QuizStore

logger = logging.getLogger(__name__)


@dataclass
class QuestionResponse:
    """
    Learner's answer to one question.

    Attributes:
        question_id: Question identifier
        question_text: Question prompt (for reference)
        learner_answer: Option the learner picked
        correct_answer: The right option
        is_correct: Whether the pick was right
        points_awarded: Points granted for this answer
        answered_at: When the answer was submitted
    """

    question_id: str
    question_text: str
    learner_answer: str
    correct_answer: str
    is_correct: bool
    points_awarded: int
    answered_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "question_id": self.question_id,
            "question_text": self.question_text,
            "learner_answer": self.learner_answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
            "points_awarded": self.points_awarded,
            "answered_at": self.answered_at.isoformat(),
        }


@dataclass(frozen=True)
class QuizResult:
    """Summary of a completed session."""

    quiz_id: str
    score: int
    total_questions: int
    points_earned: int
    best_score: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "quiz_id": self.quiz_id,
            "score": self.score,
            "total_questions": self.total_questions,
            "points_earned": self.points_earned,
            "best_score": self.best_score,
        }


class QuizSession:
    """
    Drives one pass through a quiz.

    Usage:
        session = QuizSession(quiz, learner, quiz_store)
        for question in quiz.questions:
            options = session.answer_options(question.id)
            session.submit_answer(question.id, options[0])
        result = session.complete()
    """

    def __init__(
        self,
        quiz: QuizContent,
        learner: LearnerModel,
        quiz_store: QuizStore,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        settings: Optional[ProgressConfig] = None,
    ):
        """
        Initialize quiz session.

        Args:
            quiz: Quiz to take
            learner: Receives points and the daily quiz goal
            quiz_store: Receives the final score
            rng: Random source for option shuffling (seed it for repeatable order)
            clock: Source of timestamps
            settings: Progress rules (defaults to the global config)
        """
        self.session_id = f"qs-{uuid.uuid4()}"
        self.quiz = quiz
        self.learner = learner
        self.quiz_store = quiz_store
        self._rng = rng or random.Random()
        self._clock = clock or SystemClock()
        self._settings = settings or config.progress

        self.started_at = self._clock.now()
        self.completed_at: Optional[datetime] = None
        self.responses: List[QuestionResponse] = []
        self._options: Dict[str, List[str]] = {}
        self._result: Optional[QuizResult] = None

    # ==================== Progress ====================

    @property
    def total_questions(self) -> int:
        return len(self.quiz.questions)

    @property
    def score(self) -> int:
        """Correct answers so far."""
        return sum(1 for r in self.responses if r.is_correct)

    @property
    def points_earned(self) -> int:
        return sum(r.points_awarded for r in self.responses)

    @property
    def is_complete(self) -> bool:
        return self._result is not None

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        """First question without an answer, or None when all are answered."""
        answered = {r.question_id for r in self.responses}
        return next((q for q in self.quiz.questions if q.id not in answered), None)

    def answer_options(self, question_id: str) -> List[str]:
        """
        Shuffled answer options for a question.

        The order is fixed the first time a question's options are requested.

        Raises:
            ValueError: If the question is not part of this quiz
        """
        question = self._get_question(question_id)
        if question_id not in self._options:
            options = question.options()
            self._rng.shuffle(options)
            self._options[question_id] = options
        return list(self._options[question_id])

    # ==================== Answering ====================

    def submit_answer(self, question_id: str, answer: str) -> QuestionResponse:
        """
        Grade an answer and award points when it is correct.

        Args:
            question_id: Question identifier
            answer: Option the learner picked

        Returns:
            QuestionResponse with grading result

        Raises:
            ValueError: If the answer is empty, the question is unknown or
                already answered, or the session is complete
        """
        if self.is_complete:
            raise ValueError(f"Quiz session {self.session_id} is already complete")

        if not answer or not answer.strip():
            raise ValueError("Learner answer cannot be empty")

        question = self._get_question(question_id)

        if any(r.question_id == question_id for r in self.responses):
            raise ValueError(f"Question {question_id} already answered")

        is_correct = question.is_correct(answer)
        points = self._settings.points_per_correct_answer if is_correct else 0
        if points:
            self.learner.add_points(points)

        response = QuestionResponse(
            question_id=question_id,
            question_text=question.question,
            learner_answer=answer,
            correct_answer=question.correct_answer,
            is_correct=is_correct,
            points_awarded=points,
            answered_at=self._clock.now(),
        )
        self.responses.append(response)
        return response

    def complete(self) -> QuizResult:
        """
        Finish the session.

        Records the score and correctly answered questions with the quiz
        store and sets the daily quiz goal. Unanswered questions count as
        wrong.

        Raises:
            ValueError: If the session was already completed
        """
        if self.is_complete:
            raise ValueError(f"Quiz session {self.session_id} is already complete")

        correct_ids = [r.question_id for r in self.responses if r.is_correct]
        progress = self.quiz_store.update_quiz_score(self.quiz.id, self.score, correct_ids)
        self.learner.update_daily_goals(quiz_completed=True)

        self.completed_at = self._clock.now()
        self._result = QuizResult(
            quiz_id=self.quiz.id,
            score=self.score,
            total_questions=self.total_questions,
            points_earned=self.points_earned,
            best_score=progress.best_score if progress else self.score,
        )
        logger.info(
            "Quiz %s completed: %d/%d (best %d)",
            self.quiz.id,
            self._result.score,
            self._result.total_questions,
            self._result.best_score,
        )
        return self._result

    @property
    def result(self) -> Optional[QuizResult]:
        return self._result

    def to_dict(self) -> Dict[str, Any]:
        """Convert quiz session to dictionary."""
        return {
            "session_id": self.session_id,
            "quiz_id": self.quiz.id,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "responses": [r.to_dict() for r in self.responses],
            "total_questions": self.total_questions,
            "score": self.score,
            "points_earned": self.points_earned,
        }

    def _get_question(self, question_id: str) -> QuizQuestion:
        question = self.quiz.get_question(question_id)
        if question is None:
            raise ValueError(f"Question {question_id} not found in quiz {self.quiz.id}")
        return question
