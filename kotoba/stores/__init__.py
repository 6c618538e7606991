"""
Content stores: built-in plus custom lessons and quizzes with progress.
"""

from .lesson_store import LessonStore
from .quiz_store import QuizStore

__all__ = [
    "LessonStore",
    "QuizStore",
]
