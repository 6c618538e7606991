"""
Shared pytest fixtures and configuration for Kotoba tests.

This file is automatically discovered by pytest and provides
fixtures available to all tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Make the package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from kotoba.app import KotobaApp
from kotoba.catalog import load_catalog
from kotoba.models.authoring import build_flashcard
from kotoba.models.learner_profile import LearnerModel
from kotoba.stores.lesson_store import LessonStore
from kotoba.stores.quiz_store import QuizStore
from kotoba.utils.clock import FixedClock
from kotoba.utils.persistence import MemoryPersistence


class FailingPersistence(MemoryPersistence):
    """Memory store whose writes fail, like a full disk."""

    def save(self, key, data):
        raise OSError("No space left on device")


@pytest.fixture
def memory_store():
    """Empty in-memory persistence port."""
    return MemoryPersistence()


@pytest.fixture
def failing_store():
    """Persistence port that rejects every write."""
    return FailingPersistence()


@pytest.fixture
def clock():
    """
    Clock fixed at 2024-11-19 09:00 UTC.

    Move it with ``clock.advance(days=1)``.
    """
    return FixedClock(datetime(2024, 11, 19, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def catalog():
    """The packaged built-in catalog."""
    return load_catalog()


@pytest.fixture
def learner(memory_store, clock):
    """Learner model on a fresh store."""
    return LearnerModel(memory_store, clock=clock)


@pytest.fixture
def lesson_store(memory_store, catalog, learner, clock):
    """Lesson store sharing the learner's persistence."""
    return LessonStore(memory_store, catalog=catalog, learner=learner, clock=clock)


@pytest.fixture
def quiz_store(memory_store, catalog, clock):
    """Quiz store sharing the learner's persistence."""
    return QuizStore(memory_store, catalog=catalog, clock=clock)


@pytest.fixture
def app(memory_store, clock):
    """Fully wired app on in-memory storage."""
    kotoba_app = KotobaApp.create(persistence=memory_store, clock=clock)
    yield kotoba_app
    kotoba_app.close()


@pytest.fixture
def sample_flashcards():
    """Two user-authored flashcards."""
    return [
        build_flashcard("猫", "Cat", furigana="neko"),
        build_flashcard("犬", "Dog", furigana="inu"),
    ]


# Pytest hooks for better test output


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
