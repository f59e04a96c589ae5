from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol, Sequence

from gearx.core.errors import InvalidPercentileInput
from gearx.engine.percentiles.validation import coerce_table, validate_max_marks
from gearx.engine.percentiles.value_objects import PercentileMapDocument
from gearx.i18n.en_messages import PercentileMessages


class PercentileMapStore(Protocol):
    """Key-value persistence for percentile maps, keyed by test id.

    ``save`` is an upsert that replaces the whole document; ``load`` returns
    ``None`` for unknown tests and for stored documents whose table is not a
    usable sequence.
    """

    def save(self, test_id: str, table: Sequence[float], max_marks: int) -> str:
        ...

    def load(self, test_id: str) -> Optional[PercentileMapDocument]:
        ...


def prepare_document(test_id: str, table: Sequence[float], max_marks: int) -> PercentileMapDocument:
    """Validate inputs to ``save`` and stamp a new document."""
    if not test_id or not str(test_id).strip():
        raise InvalidPercentileInput(PercentileMessages.TEST_ID_REQUIRED)
    max_marks = validate_max_marks(max_marks)
    if not isinstance(table, (list, tuple)) or not table:
        raise InvalidPercentileInput(PercentileMessages.EMPTY_TABLE)
    values = coerce_table(table)
    if values is None:
        raise InvalidPercentileInput(PercentileMessages.MALFORMED_TABLE)
    return PercentileMapDocument(
        test_id=str(test_id).strip(),
        max_marks=max_marks,
        table=values,
        updated_at=datetime.now(timezone.utc),
    )


class InMemoryPercentileMapStore:
    """Process-local store for callers without a database (CLI previews, tests)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: Dict[str, PercentileMapDocument] = {}

    def save(self, test_id: str, table: Sequence[float], max_marks: int) -> str:
        document = prepare_document(test_id, table, max_marks)
        with self._lock:
            self._documents[document.test_id] = document
        return document.test_id

    def load(self, test_id: str) -> Optional[PercentileMapDocument]:
        with self._lock:
            return self._documents.get(test_id)

    def delete(self, test_id: str) -> bool:
        with self._lock:
            return self._documents.pop(test_id, None) is not None

    def __len__(self) -> int:
        return len(self._documents)


__all__ = ["PercentileMapStore", "InMemoryPercentileMapStore", "prepare_document"]
