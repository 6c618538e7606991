"""
Flashcard search.

``SearchIndex`` does a case-insensitive substring match over the Japanese
text, English meaning and furigana of every flashcard. ``DebouncedSearch``
sits in front of it for type-ahead input: each keystroke resubmits the query
and only the newest query's results are ever delivered.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Protocol, Sequence

from ..config import SearchConfig, config
from ..models.content import LessonContent, SearchResult

logger = logging.getLogger(__name__)

ResultsCallback = Callable[[List[SearchResult]], None]


class LessonSource(Protocol):
    """Anything that can list lessons (a catalog or a lesson store)."""

    @property
    def lessons(self) -> Sequence[LessonContent]: ...


def _matches(needle: str, *fields: Optional[str]) -> bool:
    return any(value is not None and needle in value.casefold() for value in fields)


class SearchIndex:
    """
    Search over flashcards from the built-in catalog, optionally with the
    learner's custom lessons.

    Usage:
        index = SearchIndex(catalog)
        index.search("水")   # [SearchResult(english_text="Water", lesson_number=1, ...)]
    """

    def __init__(
        self,
        catalog: LessonSource,
        lesson_store: Optional[LessonSource] = None,
        include_custom: Optional[bool] = None,
        settings: Optional[SearchConfig] = None,
    ):
        """
        Initialize search index.

        Args:
            catalog: Built-in lessons
            lesson_store: Merged lesson list, searched when custom lessons are included
            include_custom: Search custom lessons too (defaults to the search config)
            settings: Search configuration (defaults to the global config)
        """
        self.settings = settings or config.search
        self.catalog = catalog
        self.lesson_store = lesson_store
        if include_custom is None:
            include_custom = self.settings.include_custom_lessons
        self.include_custom = include_custom

    def _lessons(self) -> Sequence[LessonContent]:
        if self.include_custom and self.lesson_store is not None:
            return self.lesson_store.lessons
        return self.catalog.lessons

    def search(self, query: str) -> List[SearchResult]:
        """
        Find flashcards whose front, back or furigana contains the query.

        Args:
            query: Text to look for; surrounding whitespace is ignored

        Returns:
            One result per matching card, ordered by lesson number (lessons
            with equal numbers keep their list order); empty for a blank query
        """
        needle = (query or "").strip().casefold()
        if not needle:
            return []

        results = [
            SearchResult.from_flashcard(card, lesson)
            for lesson in self._lessons()
            for card in lesson.flashcards
            if _matches(needle, card.front, card.back, card.furigana)
        ]
        results.sort(key=lambda result: result.lesson_number)
        logger.debug("Search %r matched %d cards", query, len(results))
        return results


class DebouncedSearch:
    """
    Delayed, cancellable search where the last request wins.

    Every ``submit`` starts a new generation and cancels the pending timer.
    When a timer fires, its results are delivered only if no newer query was
    submitted in the meantime, even if the search itself already ran.

    Usage:
        debounced = DebouncedSearch(index)
        debounced.submit("wa", show)
        debounced.submit("water", show)   # only "water" results reach show()
    """

    def __init__(
        self,
        index: SearchIndex,
        delay: Optional[float] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        """
        Initialize debounced search.

        Args:
            index: Index that runs the actual search
            delay: Seconds to wait before searching (defaults to the search config)
            timer_factory: Builds the timer; replaceable in tests
        """
        self.index = index
        self.delay = index.settings.debounce_seconds if delay is None else delay
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._generation = 0
        self._timer: Optional[threading.Timer] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def submit(self, query: str, on_results: ResultsCallback) -> int:
        """
        Schedule a search, superseding any pending one.

        A blank query cancels pending work and delivers an empty list right
        away.

        Returns:
            Generation number of this request
        """
        blank = not (query or "").strip()

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._cancel_timer()

            if not blank:
                timer = self._timer_factory(
                    self.delay, self._run, args=(generation, query, on_results)
                )
                timer.daemon = True
                self._timer = timer
                timer.start()

        if blank:
            on_results([])
        return generation

    def cancel(self) -> None:
        """Drop pending work; results of earlier requests are never delivered."""
        with self._lock:
            self._generation += 1
            self._cancel_timer()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the pending search (if any) has finished.

        Returns:
            True if nothing is pending afterwards
        """
        with self._lock:
            timer = self._timer
        if timer is not None:
            timer.join(timeout)
            return not timer.is_alive()
        return True

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _run(self, generation: int, query: str, on_results: ResultsCallback) -> None:
        if not self._is_current(generation):
            return

        results = self.index.search(query)

        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping superseded results for %r", query)
                return
            self._timer = None

        try:
            on_results(results)
        except Exception:
            logger.exception("Search results callback failed for %r", query)
