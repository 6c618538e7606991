"""
Lesson Store: built-in and custom lessons with per-card completion.

Provides:
- The merged lesson list (catalog lessons first, then custom lessons)
- Custom lesson authoring and origin-protected deletion
- Card completion tracking and lesson progress ratios
- Recent-lesson reporting to the learner model
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..catalog import ContentCatalog, load_catalog
from ..models.authoring import build_lesson
from ..models.content import Flashcard, LessonContent
from ..models.learner_profile import LearnerModel, LessonSummary
from ..models.progress import (
    LessonProgress,
    lesson_progress_map_from_dict,
    lesson_progress_map_to_dict,
)
from ..utils.clock import Clock
from ..utils.persistence import (
    CUSTOM_LESSONS_KEY,
    LESSON_PROGRESS_KEY,
    PersistencePort,
    RecordStore,
)
from ..utils.progress import completion_ratio
from ..utils.validation import (
    ContentValidationError,
    is_blank,
    validate_flashcard_draft,
    validate_lesson_draft,
)
from .base import ContentStore

logger = logging.getLogger(__name__)


class LessonStore(ContentStore[LessonContent, LessonProgress]):
    """
    Lessons plus the learner's card completion.

    Usage:
        store = LessonStore(persistence, learner=learner)
        store.mark_card_completed("lesson-01", "lesson-01-card-01")
        store.get_progress("lesson-01")   # 0.05
    """

    kind = "lesson"
    kind_plural = "lessons"
    content_key = CUSTOM_LESSONS_KEY
    progress_key = LESSON_PROGRESS_KEY

    def __init__(
        self,
        persistence: PersistencePort | RecordStore,
        catalog: Optional[ContentCatalog] = None,
        learner: Optional[LearnerModel] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize lesson store.

        Args:
            persistence: Persistence port (or an existing RecordStore)
            catalog: Built-in content (defaults to the packaged catalog)
            learner: Learner model that receives recently opened lessons
            clock: Source of timestamps
        """
        self.catalog = catalog or load_catalog()
        self.learner = learner
        super().__init__(persistence, self.catalog.lessons, clock=clock)

    def _parse_content(self, data: Dict[str, Any]) -> LessonContent:
        return LessonContent.from_dict(data)

    def _parse_progress(self, data: Dict[str, Any]) -> Dict[str, LessonProgress]:
        return lesson_progress_map_from_dict(data)

    def _dump_progress(self, progress: Dict[str, LessonProgress]) -> Dict[str, Any]:
        return lesson_progress_map_to_dict(progress)

    def _validate_content(self, lesson: LessonContent) -> None:
        errors = list(validate_lesson_draft(lesson.title, lesson.flashcards).errors)
        if is_blank(lesson.id):
            errors.append("Lesson id is required")
        for card in lesson.flashcards:
            errors.extend(validate_flashcard_draft(card.front, card.back).errors)
            if is_blank(card.id):
                errors.append("Flashcard id is required")
        if errors:
            raise ContentValidationError(errors)

    # ==================== Lessons ====================

    @property
    def lessons(self) -> List[LessonContent]:
        """All lessons, built-in first."""
        return self._all()

    @property
    def custom_lessons(self) -> List[LessonContent]:
        return self._custom()

    def get_lesson(self, lesson_id: str) -> Optional[LessonContent]:
        return self._find(lesson_id)

    def add_custom_lesson(self, lesson: LessonContent) -> LessonContent:
        """
        Append a user-authored lesson and persist the custom lessons.

        The lesson is always stored as custom, whatever its tag.

        Raises:
            ContentValidationError: If the lesson or one of its cards has blank
                required fields
        """
        added = self._add_custom(lesson)
        logger.debug("Added custom lesson %s (%r)", added.id, added.title)
        return added

    def create_custom_lesson(self, title: str, flashcards: Sequence[Flashcard]) -> LessonContent:
        """
        Validate a lesson draft, number it and add it.

        Raises:
            ContentValidationError: If the title is blank or there are no cards
        """
        with self._lock:
            lesson = build_lesson(title, flashcards, lesson_number=self.next_number())
            return self.add_custom_lesson(lesson)

    def delete_lesson(self, index: int) -> bool:
        return self.delete_lessons([index])

    def delete_lessons(self, indexes: Iterable[int]) -> bool:
        """
        Delete custom lessons by list position.

        The whole call is rejected if any index is out of range or points at
        a built-in lesson. Progress recorded for deleted lessons is kept.

        Returns:
            True if the lessons were deleted
        """
        return self._delete(indexes)

    # ==================== Progress ====================

    def mark_card_completed(self, lesson_id: str, card_id: str) -> LessonProgress:
        """Record a completed card (idempotent) and touch the access date."""
        now = self._clock.now()

        def mutate(record: LessonProgress) -> None:
            record.completed_cards.add(card_id)
            record.last_access_date = now

        self._update_progress(lesson_id, lambda: LessonProgress(last_access_date=now), mutate)
        return self.progress_for(lesson_id)

    def progress_for(self, lesson_id: str) -> Optional[LessonProgress]:
        """Copy of the stored progress record, if any."""
        with self._lock:
            record = self._progress.get(lesson_id)
            if record is None:
                return None
            return LessonProgress(
                last_access_date=record.last_access_date,
                completed_cards=set(record.completed_cards),
            )

    def get_progress(self, lesson_id: str) -> float:
        """
        Share of the lesson's cards that are completed.

        Returns:
            Ratio in [0, 1]; 0.0 for unknown lessons, lessons without cards
            or lessons never opened
        """
        with self._lock:
            record = self._progress.get(lesson_id)
            lesson = self._find(lesson_id)
            if record is None or lesson is None:
                return 0.0
            return completion_ratio(len(record.completed_cards), len(lesson.flashcards))

    def lesson_accessed(self, lesson: LessonContent) -> Optional[LessonSummary]:
        """
        Report an opened lesson to the learner's recent lessons.

        Lessons not in this store are ignored.
        """
        if self._find(lesson.id) is None:
            logger.debug("Ignoring access to unknown lesson %s", lesson.id)
            return None

        summary = LessonSummary(
            id=lesson.id,
            title=lesson.title,
            description=f"Lesson {lesson.lesson_number}",
            progress=self.get_progress(lesson.id),
            last_accessed=self._clock.now(),
        )
        if self.learner is not None:
            self.learner.add_lesson(summary)
        return summary
