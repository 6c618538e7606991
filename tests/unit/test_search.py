"""
Unit tests for flashcard search and debounced type-ahead search.
"""

import threading

import pytest

from kotoba.config import SearchConfig
from kotoba.utils.search import DebouncedSearch, SearchIndex


class FakeTimer:
    """Timer that only fires when the test says so."""

    created = []

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args, **self.kwargs)

    def join(self, timeout=None):
        pass

    def is_alive(self):
        return False


@pytest.fixture
def index(catalog, lesson_store):
    """Index over the built-in catalog only."""
    return SearchIndex(catalog, lesson_store, include_custom=False)


@pytest.fixture
def fake_timers():
    FakeTimer.created = []
    return FakeTimer.created


@pytest.fixture
def debounced(index, fake_timers):
    return DebouncedSearch(index, delay=0.3, timer_factory=FakeTimer)


class TestSearchIndex:
    """Test substring matching over flashcards."""

    def test_kanji_lookup(self, index):
        """Test searching 水 finds the Water card in lesson 1."""
        results = index.search("水")

        assert len(results) == 1
        result = results[0]
        assert result.english_text == "Water"
        assert result.japanese_text == "水"
        assert result.lesson_number == 1
        assert result.lesson_title == "Japanese Survival Words"
        assert result.id == "lesson-01-card-18"

    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query(self, index, query):
        """Test blank queries return nothing."""
        assert index.search(query) == []

    def test_case_insensitive(self, index):
        """Test English matching ignores case."""
        assert [r.japanese_text for r in index.search("WATER")] == ["水"]

    def test_whitespace_trimmed(self, index):
        """Test surrounding whitespace is ignored."""
        assert len(index.search("  water ")) == 1

    def test_results_ordered_by_lesson(self, index):
        """Test results follow lesson order, then card order."""
        results = index.search("ji")

        assert [r.japanese_text for r in results] == ["じ", "ぢ"]
        assert results[1].english_text == "JI (rare)"
        assert all(r.lesson_number == 3 for r in results)

    def test_multiple_matches(self, index):
        """Test every matching card is returned."""
        results = index.search("good")

        assert [r.english_text for r in results] == [
            "Good morning",
            "Good evening",
            "Good night",
        ]

    def test_no_match(self, index):
        """Test a query matching nothing."""
        assert index.search("xylophone") == []

    def test_custom_lessons_excluded_by_default(self, catalog, lesson_store, sample_flashcards):
        """Test custom lessons are only searched when asked."""
        lesson_store.create_custom_lesson("Animals", sample_flashcards)

        catalog_only = SearchIndex(catalog, lesson_store, include_custom=False)
        everything = SearchIndex(catalog, lesson_store, include_custom=True)

        assert catalog_only.search("neko") == []
        results = everything.search("neko")
        assert [r.japanese_text for r in results] == ["猫"]
        assert results[0].furigana == "neko"
        assert results[0].lesson_number == 5

    def test_include_custom_from_settings(self, catalog, lesson_store):
        """Test the default scope comes from the search config."""
        settings = SearchConfig(debounce_seconds=0.0, include_custom_lessons=True)

        assert SearchIndex(catalog, lesson_store, settings=settings).include_custom is True


class TestDebouncedSearch:
    """Test last-request-wins delivery."""

    def test_search_is_delayed(self, debounced, fake_timers):
        """Test nothing is delivered until the timer fires."""
        delivered = []

        debounced.submit("water", delivered.append)

        assert delivered == []
        assert debounced.pending
        assert fake_timers[0].interval == 0.3
        assert fake_timers[0].daemon is True
        assert fake_timers[0].started

        fake_timers[0].fire()

        assert [[r.english_text for r in batch] for batch in delivered] == [["Water"]]
        assert not debounced.pending

    def test_superseded_request_dropped(self, debounced, fake_timers):
        """Test only the newest query's results are delivered."""
        delivered = []

        debounced.submit("wat", delivered.append)
        debounced.submit("good", delivered.append)

        assert fake_timers[0].cancelled
        # A timer that already began running still must not deliver
        fake_timers[0].fire()
        fake_timers[1].fire()

        assert len(delivered) == 1
        assert len(delivered[0]) == 3

    def test_generation_increases(self, debounced):
        """Test each submit returns a newer generation."""
        first = debounced.submit("a", lambda results: None)
        second = debounced.submit("b", lambda results: None)

        assert second == first + 1
        assert debounced.generation == second

    def test_blank_query_delivers_immediately(self, debounced, fake_timers):
        """Test a blank query clears results at once and cancels pending work."""
        delivered = []

        debounced.submit("water", delivered.append)
        debounced.submit("  ", delivered.append)

        assert delivered == [[]]
        assert len(fake_timers) == 1
        assert fake_timers[0].cancelled
        assert not debounced.pending

        fake_timers[0].fire()
        assert delivered == [[]]

    def test_cancel(self, debounced, fake_timers):
        """Test cancel drops pending work."""
        delivered = []

        debounced.submit("water", delivered.append)
        debounced.cancel()
        fake_timers[0].fire()

        assert delivered == []
        assert not debounced.pending

    def test_callback_failure_logged(self, debounced, fake_timers, caplog):
        """Test a failing callback doesn't escape the timer thread."""

        def explode(results):
            raise RuntimeError("display gone")

        debounced.submit("water", explode)
        fake_timers[0].fire()

        assert "Search results callback failed" in caplog.text

    def test_default_delay_from_settings(self, catalog):
        """Test the delay falls back to the search config."""
        settings = SearchConfig(debounce_seconds=0.05, include_custom_lessons=False)
        index = SearchIndex(catalog, settings=settings)

        assert DebouncedSearch(index).delay == 0.05

    def test_real_timer(self, index):
        """Test the debounce with a real timer thread."""
        delivered = []
        done = threading.Event()

        def receive(results):
            delivered.append(results)
            done.set()

        debounced = DebouncedSearch(index, delay=0.01)
        debounced.submit("水", receive)

        assert done.wait(timeout=5)
        assert debounced.wait(timeout=5)
        assert [r.english_text for r in delivered[0]] == ["Water"]
