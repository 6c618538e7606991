"""
Learner Model: profile, points and levels, streaks and daily goals.

This module owns the learner's cumulative state:
- Profile name and image reference
- Points with levels derived from them
- Recently opened lessons (most recent first, bounded)
- Daily login streak
- Daily goals that reset at the start of each calendar day

Every mutation is written through to the ``savedUser`` record immediately.
"""

from __future__ import annotations

import logging
import threading
from copy import deepcopy
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from ..config import ProgressConfig, config
from ..utils.clock import Clock, SystemClock, parse_date, parse_timestamp
from ..utils.persistence import USER_KEY, PersistencePort, RecordStore
from ..utils.progress import level_for_points, level_progress, points_to_next_level

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


@dataclass
class DailyGoals:
    """
    Today's goal counters.

    Attributes:
        last_reset_date: Calendar day these counters belong to
        lessons_completed: Lessons finished today
        practice_completed: Whether writing practice was done today
        quiz_completed: Whether a quiz was taken today
    """

    last_reset_date: date
    lessons_completed: int = 0
    practice_completed: bool = False
    quiz_completed: bool = False

    @classmethod
    def empty(cls, today: date) -> DailyGoals:
        return cls(last_reset_date=today)

    def completed_count(self, lesson_target: int = 2) -> int:
        """Number of the three daily goals that are met."""
        return sum(
            [
                self.lessons_completed >= lesson_target,
                self.practice_completed,
                self.quiz_completed,
            ]
        )

    def goals_met(self, lesson_target: int = 2) -> bool:
        return self.completed_count(lesson_target) == 3

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "lessons_completed": self.lessons_completed,
            "practice_completed": self.practice_completed,
            "quiz_completed": self.quiz_completed,
            "last_reset_date": self.last_reset_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DailyGoals:
        return cls(
            last_reset_date=parse_date(data["last_reset_date"]),
            lessons_completed=int(data.get("lessons_completed", 0)),
            practice_completed=bool(data.get("practice_completed", False)),
            quiz_completed=bool(data.get("quiz_completed", False)),
        )


@dataclass
class LessonSummary:
    """Entry in the learner's recently opened lessons."""

    id: str
    title: str
    description: str
    progress: float
    last_accessed: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "progress": self.progress,
            "last_accessed": self.last_accessed.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LessonSummary:
        return cls(
            id=data["id"],
            title=data["title"],
            description=data["description"],
            progress=float(data["progress"]),
            last_accessed=parse_timestamp(data["last_accessed"]),
        )


@dataclass
class LearnerProfile:
    """
    The learner's cumulative state.

    ``level`` and the level-progress figures are derived from ``points`` and
    are never stored as the source of truth.
    """

    daily_goals: DailyGoals
    name: str = ""
    profile_image_ref: Optional[str] = None
    points: int = 0
    streak: int = 0
    last_login_date: Optional[date] = None
    recent_lessons: List[LessonSummary] = field(default_factory=list)

    @classmethod
    def fresh(cls, today: date) -> LearnerProfile:
        """Profile for a learner who has never used the app."""
        return cls(daily_goals=DailyGoals.empty(today))

    @property
    def level(self) -> int:
        return level_for_points(self.points)

    @property
    def points_to_next_level(self) -> int:
        return points_to_next_level(self.points)

    @property
    def level_progress(self) -> float:
        return level_progress(self.points)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (``level`` included for readers of the raw record)."""
        return {
            "schema_version": SCHEMA_VERSION,
            "name": self.name,
            "profile_image_ref": self.profile_image_ref,
            "points": self.points,
            "level": self.level,
            "streak": self.streak,
            "last_login_date": self.last_login_date.isoformat() if self.last_login_date else None,
            "daily_goals": self.daily_goals.to_dict(),
            "recent_lessons": [lesson.to_dict() for lesson in self.recent_lessons],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LearnerProfile:
        """
        Rebuild a profile from its record.

        A stored ``level`` is ignored; it is always recomputed from points.
        """
        points = int(data["points"])
        streak = int(data["streak"])
        if points < 0 or streak < 0:
            raise ValueError(f"points and streak must be >= 0, got {points} and {streak}")

        last_login = data.get("last_login_date")
        return cls(
            name=data.get("name", ""),
            profile_image_ref=data.get("profile_image_ref"),
            points=points,
            streak=streak,
            last_login_date=parse_date(last_login) if last_login else None,
            daily_goals=DailyGoals.from_dict(data["daily_goals"]),
            recent_lessons=[
                LessonSummary.from_dict(item) for item in data.get("recent_lessons", [])
            ],
        )


@dataclass(frozen=True)
class PointsChanged:
    """Notification sent to subscribers whenever the point total changes."""

    previous_points: int
    points: int
    level: int


PointsListener = Callable[[PointsChanged], None]


class LearnerModel:
    """
    Learner profile with points, streak and daily-goal rules.

    Thread-safe: all reads and mutations hold the instance lock. Subscribers
    are called after the lock is released.

    Usage:
        learner = LearnerModel(MemoryPersistence())
        unsubscribe = learner.subscribe(lambda event: print(event.level))
        learner.add_points(120)    # level 2
    """

    def __init__(
        self,
        persistence: PersistencePort | RecordStore,
        clock: Optional[Clock] = None,
        settings: Optional[ProgressConfig] = None,
    ):
        """
        Initialize and load the learner profile.

        Args:
            persistence: Persistence port (or an existing RecordStore)
            clock: Source of today/now (defaults to the system clock)
            settings: Progress rules (defaults to the global config)
        """
        self._records = (
            persistence if isinstance(persistence, RecordStore) else RecordStore(persistence)
        )
        self._clock = clock or SystemClock()
        self._settings = settings or config.progress
        self._lock = threading.RLock()
        self._listeners: List[PointsListener] = []
        self._profile = LearnerProfile.fresh(self._clock.today())
        self.load()

    # ==================== Persistence ====================

    def load(self) -> LearnerProfile:
        """
        (Re)load the profile from storage.

        An absent or unreadable record yields a fresh profile; nothing is
        raised.
        """
        with self._lock:
            self._profile = self._records.read(
                USER_KEY,
                LearnerProfile.from_dict,
                default=lambda: LearnerProfile.fresh(self._clock.today()),
            )
            limit = self._settings.recent_lessons_limit
            if len(self._profile.recent_lessons) > limit:
                self._profile.recent_lessons = self._profile.recent_lessons[:limit]
            return deepcopy(self._profile)

    def save(self) -> bool:
        """Write the profile record. Returns False if the write failed."""
        with self._lock:
            return self._records.write(USER_KEY, self._profile.to_dict())

    # ==================== Profile Access ====================

    @property
    def profile(self) -> LearnerProfile:
        """Snapshot of the profile (deep copy)."""
        with self._lock:
            return deepcopy(self._profile)

    @property
    def points(self) -> int:
        with self._lock:
            return self._profile.points

    @property
    def level(self) -> int:
        with self._lock:
            return self._profile.level

    @property
    def streak(self) -> int:
        with self._lock:
            return self._profile.streak

    @property
    def settings(self) -> ProgressConfig:
        """Progress rules this model applies."""
        return self._settings

    @property
    def daily_goals(self) -> DailyGoals:
        with self._lock:
            return replace(self._profile.daily_goals)

    def to_dict(self) -> Dict[str, Any]:
        """Export profile as dictionary."""
        with self._lock:
            return self._profile.to_dict()

    # ==================== Profile Updates ====================

    def update_name(self, name: str) -> None:
        with self._lock:
            self._profile.name = name
            self.save()

    def update_profile_image(self, image_ref: Optional[str]) -> None:
        """Replace the opaque profile image reference."""
        with self._lock:
            self._profile.profile_image_ref = image_ref
            self.save()

    # ==================== Points & Levels ====================

    def add_points(self, points: int) -> PointsChanged:
        """
        Award points; the level follows automatically.

        Args:
            points: Non-negative number of points

        Returns:
            The PointsChanged event delivered to subscribers

        Raises:
            ValueError: If points is negative or not an integer
        """
        if isinstance(points, bool) or not isinstance(points, int):
            raise ValueError(f"points must be an integer, got {points!r}")
        if points < 0:
            raise ValueError(f"points cannot be negative: {points}")

        with self._lock:
            previous = self._profile.points
            self._profile.points = previous + points
            self.save()
            event = PointsChanged(previous, self._profile.points, self._profile.level)

        self._notify(event)
        return event

    def reset_progress(self) -> None:
        """
        Clear points, level and recent lessons.

        Streak and daily goals are left as they are.
        """
        with self._lock:
            previous = self._profile.points
            self._profile.points = 0
            self._profile.recent_lessons = []
            self.save()
            event = PointsChanged(previous, 0, self._profile.level)

        logger.info("Learner progress reset (was %d points)", previous)
        self._notify(event)

    # ==================== Recent Lessons ====================

    def add_lesson(self, summary: LessonSummary) -> None:
        """Put a lesson at the front of the recent list, dropping the oldest past the limit."""
        with self._lock:
            lessons = [summary, *self._profile.recent_lessons]
            self._profile.recent_lessons = lessons[: self._settings.recent_lessons_limit]
            self.save()

    # ==================== Streak & Daily Goals ====================

    def update_streak(self) -> int:
        """
        Register today's activation and update the streak.

        - last login yesterday: streak + 1
        - last login today: unchanged
        - anything else (never, a gap, a future date): streak restarts at 1

        Returns:
            The new streak
        """
        with self._lock:
            today = self._clock.today()
            last_login = self._profile.last_login_date

            if last_login == today - timedelta(days=1):
                self._profile.streak += 1
            elif last_login != today:
                self._profile.streak = 1

            self._profile.last_login_date = today
            self.save()
            return self._profile.streak

    def reset_daily_goals_if_needed(self) -> bool:
        """
        Start a new set of daily goals when the calendar day has changed.

        Returns:
            True if the goals were reset
        """
        with self._lock:
            today = self._clock.today()
            if self._profile.daily_goals.last_reset_date == today:
                return False

            self._profile.daily_goals = DailyGoals.empty(today)
            self.save()
            logger.info("Daily goals reset for %s", today.isoformat())
            return True

    def update_daily_goals(
        self,
        lesson_completed: bool = False,
        practice_completed: bool = False,
        quiz_completed: bool = False,
    ) -> DailyGoals:
        """
        Record progress on today's goals.

        Only arguments passed as True have an effect; flags are never cleared
        here.
        """
        with self._lock:
            goals = self._profile.daily_goals
            if lesson_completed:
                goals.lessons_completed += 1
            if practice_completed:
                goals.practice_completed = True
            if quiz_completed:
                goals.quiz_completed = True
            self.save()
            return replace(goals)

    def daily_goals_met(self) -> bool:
        with self._lock:
            return self._profile.daily_goals.goals_met(self._settings.daily_lesson_target)

    # ==================== Observers ====================

    def subscribe(self, listener: PointsListener) -> Callable[[], None]:
        """
        Register a listener for point changes.

        Returns:
            A callable that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: PointsChanged) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Points listener %r failed", listener)

    def __repr__(self) -> str:
        """String representation."""
        with self._lock:
            return (
                f"LearnerModel(name='{self._profile.name}', "
                f"points={self._profile.points}, "
                f"level={self._profile.level}, "
                f"streak={self._profile.streak})"
            )
