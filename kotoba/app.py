"""
Kotoba application container.

Builds and wires the learner model, lesson and quiz stores and search for
one learner on one persistence port. There are no global store instances:
a presentation layer creates one ``KotobaApp`` and talks to its parts.

Usage:
    app = KotobaApp.create()          # file storage under the data dir
    app.activate_session()            # on launch / foreground
    app.lessons.mark_card_completed("lesson-01", "lesson-01-card-01")
    session = app.start_quiz("quiz-01")
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any, Dict, Optional

from .catalog import ContentCatalog, load_catalog
from .config import config
from .models.learner_profile import LearnerModel
from .models.quiz_session import QuizSession
from .stores.lesson_store import LessonStore
from .stores.quiz_store import QuizStore
from .utils.clock import Clock, SystemClock
from .utils.persistence import FilePersistence, PersistencePort, RecordStore
from .utils.search import DebouncedSearch, SearchIndex

logger = logging.getLogger(__name__)


class KotobaApp:
    """Explicitly wired set of components for one learner."""

    def __init__(
        self,
        persistence: PersistencePort,
        clock: Optional[Clock] = None,
        catalog: Optional[ContentCatalog] = None,
        include_custom_in_search: Optional[bool] = None,
    ):
        """
        Initialize and load every component.

        Args:
            persistence: Persistence port shared by all components
            clock: Source of today/now (defaults to the system clock)
            catalog: Built-in content (defaults to the packaged catalog)
            include_custom_in_search: Search custom lessons too (defaults to config)
        """
        self.persistence = persistence
        self.clock = clock or SystemClock()
        self.catalog = catalog or load_catalog()

        records = RecordStore(persistence)
        self.learner = LearnerModel(records, clock=self.clock)
        self.lessons = LessonStore(
            records, catalog=self.catalog, learner=self.learner, clock=self.clock
        )
        self.quizzes = QuizStore(records, catalog=self.catalog, clock=self.clock)
        self.search_index = SearchIndex(
            self.catalog,
            lesson_store=self.lessons,
            include_custom=include_custom_in_search,
        )
        self.search = DebouncedSearch(self.search_index)

    @classmethod
    def create(
        cls,
        persistence: Optional[PersistencePort] = None,
        clock: Optional[Clock] = None,
        data_dir: Optional[Path | str] = None,
    ) -> KotobaApp:
        """
        Build an app, using file storage when no port is given.

        Args:
            persistence: Persistence port to use as-is
            clock: Source of today/now
            data_dir: Directory for file storage (defaults to the configured data dir)
        """
        if persistence is None:
            directory = Path(data_dir) if data_dir else config.paths.data_dir
            persistence = FilePersistence(directory)
            logger.debug("Using file storage in %s", directory)
        return cls(persistence, clock=clock)

    def activate_session(self) -> Dict[str, Any]:
        """
        Run the start-of-session rules: update the streak, then reset daily
        goals if the day has changed.

        Returns:
            Dict with the new streak and whether goals were reset
        """
        streak = self.learner.update_streak()
        goals_reset = self.learner.reset_daily_goals_if_needed()
        return {"streak": streak, "daily_goals_reset": goals_reset}

    def start_quiz(self, quiz_id: str, rng: Optional[random.Random] = None) -> QuizSession:
        """
        Start a session for a quiz in the store.

        Raises:
            ValueError: If no quiz has this id
        """
        quiz = self.quizzes.get_quiz(quiz_id)
        if quiz is None:
            raise ValueError(f"Quiz {quiz_id} not found")
        return QuizSession(quiz, self.learner, self.quizzes, rng=rng, clock=self.clock)

    def get_learner_summary(self) -> Dict[str, Any]:
        """
        Snapshot for a home screen.

        Returns:
            Dict with profile figures, today's goals and recent lessons
        """
        profile = self.learner.profile
        target = self.learner.settings.daily_lesson_target
        goals = profile.daily_goals
        return {
            "name": profile.name,
            "points": profile.points,
            "level": profile.level,
            "points_to_next_level": profile.points_to_next_level,
            "level_progress": profile.level_progress,
            "streak": profile.streak,
            "daily_goals": {
                **goals.to_dict(),
                "lesson_target": target,
                "completed_count": goals.completed_count(target),
                "all_met": goals.goals_met(target),
            },
            "recent_lessons": [lesson.to_dict() for lesson in profile.recent_lessons],
        }

    def close(self) -> None:
        """Cancel pending searches."""
        self.search.cancel()
