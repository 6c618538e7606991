"""
Record persistence with validation.

Every persisted record is one JSON document stored under a string key in a
byte-oriented key-value store (the persistence port). Records are validated
against their bundled JSON Schema when read back; anything unreadable is
discarded and the caller falls back to a default.

Keys:
- savedUser: learner profile
- custom_lessons / custom_quizzes: user-authored content only
- lesson_progress / quiz_progress: completion maps keyed by content id
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, TypeVar

from jsonschema import ValidationError

from .validation import get_validator

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_KEY = "savedUser"
CUSTOM_LESSONS_KEY = "custom_lessons"
LESSON_PROGRESS_KEY = "lesson_progress"
CUSTOM_QUIZZES_KEY = "custom_quizzes"
QUIZ_PROGRESS_KEY = "quiz_progress"

# Record key -> bundled schema name
RECORD_SCHEMAS = {
    USER_KEY: "learner_profile",
    CUSTOM_LESSONS_KEY: "custom_lessons",
    LESSON_PROGRESS_KEY: "lesson_progress",
    CUSTOM_QUIZZES_KEY: "custom_quizzes",
    QUIZ_PROGRESS_KEY: "quiz_progress",
}

# Errors that mean "this record is unusable", not "the program is broken"
DECODE_ERRORS = (
    UnicodeDecodeError,
    json.JSONDecodeError,
    ValidationError,
    KeyError,
    TypeError,
    ValueError,
)


class PersistencePort(Protocol):
    """Byte-oriented key-value store."""

    def load(self, key: str) -> Optional[bytes]: ...

    def save(self, key: str, data: bytes) -> None: ...


class MemoryPersistence:
    """In-process store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._records: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def load(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._records.get(key)

    def save(self, key: str, data: bytes) -> None:
        with self._lock:
            self._records[key] = bytes(data)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._records)


class FilePersistence:
    """
    Directory-backed store, one ``<key>.json`` file per record.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so a record is either the old or the new blob.
    """

    def __init__(self, directory: Path | str):
        """
        Initialize file store.

        Args:
            directory: Directory holding the record files (created if missing)
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def save(self, key: str, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}-", suffix=".tmp", dir=self.directory)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self._path(key))
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


class RecordStore:
    """
    Typed JSON records on top of a persistence port.

    Usage:
        records = RecordStore(MemoryPersistence())
        records.write(USER_KEY, profile.to_dict())
        profile = records.read(USER_KEY, LearnerProfile.from_dict, default=fresh_profile)
    """

    def __init__(self, port: PersistencePort, validate: bool = True):
        """
        Initialize record store.

        Args:
            port: Underlying byte store
            validate: Whether to check records against their schema on read
        """
        self.port = port
        self.validate = validate

    def read(self, key: str, parse: Callable[[Any], T], default: Callable[[], T]) -> T:
        """
        Load, validate and parse one record.

        Args:
            key: Record key
            parse: Builds the in-memory value from decoded JSON
            default: Produces the fallback value

        Returns:
            Parsed record, or ``default()`` when absent or unreadable
        """
        raw = self.port.load(key)
        if raw is None:
            return default()

        try:
            data = json.loads(raw.decode("utf-8"))
            schema_name = RECORD_SCHEMAS.get(key)
            if self.validate and schema_name:
                get_validator(schema_name).check(data)
            return parse(data)
        except DECODE_ERRORS as e:
            logger.warning("Discarding unreadable record %r: %s", key, e)
            return default()

    def write(self, key: str, payload: Any) -> bool:
        """
        Serialize and save one record, replacing any previous value.

        Returns:
            True if the port accepted the write
        """
        data = json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")
        try:
            self.port.save(key, data)
        except OSError as e:
            logger.error("Failed to save record %r: %s", key, e)
            return False
        logger.debug("Saved record %r (%d bytes)", key, len(data))
        return True
