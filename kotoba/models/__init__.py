"""
Data models for Kotoba.

This module contains core data models:
- Content: lessons, flashcards, quizzes and questions
- LearnerModel: profile with points, streak and daily goals
- QuizSession: one attempt at a quiz
- Progress records for lessons and quizzes
"""

from .content import (
    ContentOrigin,
    Flashcard,
    LessonContent,
    QuizContent,
    QuizQuestion,
    SearchResult,
)
from .progress import LessonProgress, QuizProgress
from .learner_profile import (
    DailyGoals,
    LearnerModel,
    LearnerProfile,
    LessonSummary,
    PointsChanged,
)
from .authoring import build_flashcard, build_lesson, build_quiz, build_quiz_question
from .quiz_session import QuestionResponse, QuizResult, QuizSession

__all__ = [
    # Content
    "ContentOrigin",
    "Flashcard",
    "LessonContent",
    "QuizContent",
    "QuizQuestion",
    "SearchResult",
    # Progress
    "LessonProgress",
    "QuizProgress",
    # Learner
    "DailyGoals",
    "LearnerModel",
    "LearnerProfile",
    "LessonSummary",
    "PointsChanged",
    # Authoring
    "build_flashcard",
    "build_lesson",
    "build_quiz",
    "build_quiz_question",
    # Quiz sessions
    "QuestionResponse",
    "QuizResult",
    "QuizSession",
]
