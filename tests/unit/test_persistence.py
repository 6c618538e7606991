"""
Unit tests for the persistence port implementations and the record store.
"""

import json

import pytest

from kotoba.utils.persistence import (
    CUSTOM_LESSONS_KEY,
    LESSON_PROGRESS_KEY,
    RECORD_SCHEMAS,
    USER_KEY,
    FilePersistence,
    MemoryPersistence,
    RecordStore,
)


class TestMemoryPersistence:
    """Test the in-memory port."""

    def test_absent_key(self):
        """Test missing keys load as None."""
        assert MemoryPersistence().load(USER_KEY) is None

    def test_save_replaces(self):
        """Test a save replaces the previous blob."""
        store = MemoryPersistence()
        store.save("k", b"one")
        store.save("k", b"two")

        assert store.load("k") == b"two"
        assert store.keys() == ["k"]

    def test_initial_records(self):
        """Test seeding the store."""
        store = MemoryPersistence({"a": b"1"})
        assert store.load("a") == b"1"


class TestFilePersistence:
    """Test the directory-backed port."""

    def test_round_trip(self, tmp_path):
        """Test bytes come back unchanged."""
        store = FilePersistence(tmp_path / "records")
        store.save(USER_KEY, "名前".encode("utf-8"))

        assert store.load(USER_KEY) == "名前".encode("utf-8")
        assert (tmp_path / "records" / "savedUser.json").exists()

    def test_absent_key(self, tmp_path):
        """Test missing files load as None."""
        assert FilePersistence(tmp_path).load(LESSON_PROGRESS_KEY) is None

    def test_no_temp_files_left(self, tmp_path):
        """Test writes leave only the record files behind."""
        store = FilePersistence(tmp_path)
        store.save(USER_KEY, b"{}")
        store.save(USER_KEY, b"[]")

        assert sorted(p.name for p in tmp_path.iterdir()) == ["savedUser.json"]
        assert store.load(USER_KEY) == b"[]"


class TestRecordStore:
    """Test decoding, validation and write failures."""

    def test_every_key_has_a_schema(self):
        """Test all five record keys are validated."""
        assert set(RECORD_SCHEMAS) == {
            "savedUser",
            "custom_lessons",
            "lesson_progress",
            "custom_quizzes",
            "quiz_progress",
        }

    def test_absent_record_uses_default(self, memory_store):
        """Test the default is produced for a missing record."""
        records = RecordStore(memory_store)
        assert records.read(CUSTOM_LESSONS_KEY, list, default=lambda: ["fallback"]) == ["fallback"]

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b"\xff\xfe\x00",
            b'{"lessons": 1}',
        ],
    )
    def test_unreadable_record_uses_default(self, raw, caplog):
        """Test undecodable or invalid records fall back with a warning."""
        records = RecordStore(MemoryPersistence({CUSTOM_LESSONS_KEY: raw}))

        assert records.read(CUSTOM_LESSONS_KEY, list, default=list) == []
        assert "Discarding unreadable record 'custom_lessons'" in caplog.text

    def test_parse_errors_use_default(self, memory_store):
        """Test a parser raising ValueError counts as unreadable."""

        def parse(data):
            raise ValueError("bad data")

        memory_store.save(CUSTOM_LESSONS_KEY, b"[]")
        records = RecordStore(memory_store)

        assert records.read(CUSTOM_LESSONS_KEY, parse, default=lambda: "default") == "default"

    def test_validation_can_be_disabled(self, memory_store):
        """Test schema checks are skipped when validate is False."""
        memory_store.save(CUSTOM_LESSONS_KEY, b'{"not": "a list"}')

        records = RecordStore(memory_store, validate=False)

        assert records.read(CUSTOM_LESSONS_KEY, dict, default=dict) == {"not": "a list"}

    def test_write_keeps_japanese_readable(self, memory_store):
        """Test records are stored as UTF-8 without escaping."""
        records = RecordStore(memory_store)

        assert records.write("notes", {"front": "水"}) is True

        raw = memory_store.load("notes")
        assert "水".encode("utf-8") in raw
        assert json.loads(raw.decode("utf-8")) == {"front": "水"}

    def test_write_failure_reported(self, failing_store, caplog):
        """Test a failing port returns False and logs an error."""
        records = RecordStore(failing_store)

        assert records.write(USER_KEY, {}) is False
        assert "Failed to save record 'savedUser'" in caplog.text
        assert any(r.levelname == "ERROR" for r in caplog.records)
