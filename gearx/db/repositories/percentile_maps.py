from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from gearx.db.repositories.base import Repository
from gearx.engine.percentiles.store import prepare_document
from gearx.engine.percentiles.value_objects import PercentileMapDocument
from gearx.models.percentile import PercentileMap


@dataclass
class PercentileMapRepository(Repository[Session]):
    """SQL-backed percentile map store keyed by test id."""

    def save(self, test_id: str, table: Sequence[float], max_marks: int) -> str:
        """Upsert the map for ``test_id``, replacing any previous table entirely."""
        document = prepare_document(test_id, table, max_marks)
        existing = self.db.get(PercentileMap, document.test_id)
        if existing is None:
            existing = PercentileMap(test_id=document.test_id)
            self.db.add(existing)
        existing.max_marks = document.max_marks
        existing.percentile_table = list(document.table)
        existing.updated_at = document.updated_at or datetime.now(timezone.utc)
        self.db.flush()
        return document.test_id

    def load(self, test_id: str) -> Optional[PercentileMapDocument]:
        entity = self.db.get(PercentileMap, test_id)
        if entity is None or not isinstance(entity.percentile_table, list):
            return None
        return PercentileMapDocument(
            test_id=entity.test_id or test_id,
            max_marks=int(entity.max_marks),
            table=tuple(entity.percentile_table),
            updated_at=entity.updated_at,
        )

    def delete(self, test_id: str) -> bool:
        entity = self.db.get(PercentileMap, test_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.flush()
        return True

    def list_test_ids(self) -> List[str]:
        rows = self.db.execute(select(PercentileMap.test_id).order_by(PercentileMap.test_id)).all()
        return [str(row[0]) for row in rows]
