"""
Kotoba: Japanese vocabulary companion core.

Flashcard lessons and multiple-choice quizzes, learner progress with points,
levels, streaks and daily goals, and search over lesson content.
"""

from .config import config
from .models import (
    LearnerModel,
    LearnerProfile,
    LessonContent,
    QuizContent,
    QuizSession,
)
from .app import KotobaApp

__version__ = "0.1.0"

__all__ = [
    "config",
    "KotobaApp",
    "LearnerModel",
    "LearnerProfile",
    "LessonContent",
    "QuizContent",
    "QuizSession",
]
