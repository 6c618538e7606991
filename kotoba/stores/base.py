"""
Shared machinery for the lesson and quiz stores.

A content store merges the built-in catalog entries with user-authored
entries loaded from storage, and keeps a per-entry progress map next to
them. Custom entries and the progress map are separate records and are
written through after every mutation.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Sequence, TypeVar

from ..models.content import ContentOrigin
from ..utils.clock import Clock, SystemClock
from ..utils.persistence import PersistencePort, RecordStore

logger = logging.getLogger(__name__)

ContentT = TypeVar("ContentT")
ProgressT = TypeVar("ProgressT")


class ContentStore(Generic[ContentT, ProgressT]):
    """
    Built-in plus custom content with a progress map.

    Subclasses set the record keys and the codec hooks; ``kind`` is used in
    log and error messages ("lesson", "quiz").
    """

    kind = "content"
    kind_plural = "content"
    content_key = ""
    progress_key = ""

    def __init__(
        self,
        persistence: PersistencePort | RecordStore,
        builtin: Sequence[ContentT],
        clock: Optional[Clock] = None,
    ):
        """
        Initialize store and load persisted state.

        Args:
            persistence: Persistence port (or an existing RecordStore)
            builtin: Catalog entries, already ordered by number
            clock: Source of timestamps (defaults to the system clock)
        """
        self._records = (
            persistence if isinstance(persistence, RecordStore) else RecordStore(persistence)
        )
        self._builtin = tuple(item.with_origin(ContentOrigin.BUILTIN) for item in builtin)
        self._clock = clock or SystemClock()
        self._lock = threading.RLock()
        self._items: List[ContentT] = []
        self._progress: Dict[str, ProgressT] = {}
        self.initialize()

    # ==================== Codec hooks ====================

    def _parse_content(self, data: Dict[str, Any]) -> ContentT:
        raise NotImplementedError

    def _parse_progress(self, data: Dict[str, Any]) -> Dict[str, ProgressT]:
        raise NotImplementedError

    def _dump_progress(self, progress: Dict[str, ProgressT]) -> Dict[str, Any]:
        raise NotImplementedError

    def _validate_content(self, item: ContentT) -> None:
        """
        Check an entry before it is stored.

        Raises:
            ContentValidationError: If the entry has blank required fields
        """
        raise NotImplementedError

    # ==================== Loading ====================

    def initialize(self) -> None:
        """
        (Re)load the merged content list and the progress map.

        Built-in entries come first in catalog order, then persisted custom
        entries. Absent or unreadable records load as empty.
        """
        with self._lock:
            custom = self._records.read(self.content_key, self._parse_custom_list, default=list)
            self._items = [*self._builtin, *custom]
            self._progress = self._records.read(
                self.progress_key, self._parse_progress, default=dict
            )
            logger.debug(
                "Loaded %d built-in and %d custom %s, %d progress records",
                len(self._builtin),
                len(custom),
                self.kind_plural,
                len(self._progress),
            )

    def _parse_custom_list(self, data: List[Dict[str, Any]]) -> List[ContentT]:
        # Anything stored under the custom key is custom, whatever its tag says
        return [
            self._parse_content(entry).with_origin(ContentOrigin.CUSTOM)
            for entry in data
        ]

    # ==================== Queries ====================

    def _all(self) -> List[ContentT]:
        with self._lock:
            return list(self._items)

    def _custom(self) -> List[ContentT]:
        with self._lock:
            return [item for item in self._items if not item.is_builtin]

    def _find(self, content_id: str) -> Optional[ContentT]:
        with self._lock:
            return next((item for item in self._items if item.id == content_id), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def next_number(self) -> int:
        """Number for the next custom entry (one past the current count)."""
        with self._lock:
            return len(self._items) + 1

    # ==================== Mutations ====================

    def _add_custom(self, item: ContentT) -> ContentT:
        # One invalid entry would make the whole stored list unreadable
        self._validate_content(item)
        tagged = item.with_origin(ContentOrigin.CUSTOM)
        with self._lock:
            self._items.append(tagged)
            self._save_custom()
        return tagged

    def _delete(self, indexes: Iterable[int]) -> bool:
        """
        Remove custom entries by position, all or nothing.

        Returns:
            True if the entries were removed, False if the call was rejected
        """
        targets = sorted(set(indexes))
        with self._lock:
            if not targets:
                return False

            out_of_range = [i for i in targets if i < 0 or i >= len(self._items)]
            if out_of_range:
                logger.warning(
                    "Cannot delete %s at %s: out of range", self.kind_plural, out_of_range
                )
                return False

            if any(self._items[i].is_builtin for i in targets):
                logger.warning("Cannot delete built-in %s", self.kind_plural)
                return False

            for i in reversed(targets):
                removed = self._items.pop(i)
                logger.debug("Deleted %s %s", self.kind, removed.id)
            self._save_custom()
            return True

    def _update_progress(
        self,
        content_id: str,
        create: Callable[[], ProgressT],
        mutate: Callable[[ProgressT], None],
    ) -> ProgressT:
        with self._lock:
            record = self._progress.get(content_id)
            if record is None:
                record = create()
                self._progress[content_id] = record
            mutate(record)
            self._save_progress()
            return record

    # ==================== Persistence ====================

    def _save_custom(self) -> bool:
        # Only user-authored entries are persisted; the catalog ships with the package
        payload = [item.to_dict() for item in self._custom()]
        return self._records.write(self.content_key, payload)

    def _save_progress(self) -> bool:
        with self._lock:
            return self._records.write(self.progress_key, self._dump_progress(self._progress))
