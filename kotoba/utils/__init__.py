"""
Utility modules for Kotoba.

This module contains utility functions:
- clock: injectable today/now sources
- progress: level and completion-ratio helpers
- validation: JSON Schema and authoring-draft validation
- persistence: key-value persistence ports and validated JSON records
- search: flashcard search with debouncing
"""

from .clock import Clock, FixedClock, SystemClock
from .progress import (
    POINTS_PER_LEVEL,
    completion_ratio,
    level_for_points,
    level_progress,
    points_to_next_level,
)
from .validation import (
    ContentValidationError,
    SchemaValidator,
    ValidationResult,
    get_validator,
)
from .persistence import (
    FilePersistence,
    MemoryPersistence,
    PersistencePort,
    RecordStore,
)
from .search import DebouncedSearch, SearchIndex

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    # Progress
    "POINTS_PER_LEVEL",
    "completion_ratio",
    "level_for_points",
    "level_progress",
    "points_to_next_level",
    # Validation
    "ContentValidationError",
    "SchemaValidator",
    "ValidationResult",
    "get_validator",
    # Persistence
    "FilePersistence",
    "MemoryPersistence",
    "PersistencePort",
    "RecordStore",
    # Search
    "DebouncedSearch",
    "SearchIndex",
]
