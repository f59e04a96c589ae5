from __future__ import annotations

from dataclasses import dataclass, field
from hashlib import sha256
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gearx.core.config import settings
from gearx.core.errors import InvalidPercentileInput, PercentileMapNotFoundError, PercentileParseError
from gearx.core.logging import get_logger
from gearx.db.repositories import AuditLogRepository, PercentileMapRepository
from gearx.engine.percentiles.builder import build_percentile_table
from gearx.engine.percentiles.lookup import resolve_percentile
from gearx.engine.percentiles.validation import validate_max_marks
from gearx.engine.percentiles.value_objects import (
    PercentileLookupResult,
    PercentileMapDocument,
    PercentileTableResult,
)
from gearx.i18n.en_messages import PercentileMessages

logger = get_logger("gearx.services.percentiles", component="services")

MAX_TEST_ID_LENGTH = 128

__all__ = [
    "ImportSummary",
    "preview_percentile_map",
    "import_percentile_map",
    "get_percentile_map",
    "delete_percentile_map",
    "resolve_score_percentile",
]


@dataclass(frozen=True, slots=True)
class ImportSummary:
    test_id: str
    max_marks: int
    slots: int
    anchors: int
    payload_hash: str
    errors: List[str] = field(default_factory=list)


def _check_test_id(test_id: str) -> str:
    cleaned = (test_id or "").strip()
    if not cleaned:
        raise InvalidPercentileInput(PercentileMessages.TEST_ID_REQUIRED)
    if len(cleaned) > MAX_TEST_ID_LENGTH:
        raise InvalidPercentileInput(PercentileMessages.TEST_ID_MAX_LENGTH)
    return cleaned


def _check_max_marks(max_marks: int) -> int:
    value = validate_max_marks(max_marks)
    if value > settings.max_marks_limit:
        raise InvalidPercentileInput(
            PercentileMessages.MAX_MARKS_TOO_LARGE.format(limit=settings.max_marks_limit),
            detail={"max_marks": value},
        )
    return value


def preview_percentile_map(raw_text: str, max_marks: int) -> PercentileTableResult:
    """Build a table without persisting it (live preview while pasting)."""
    return build_percentile_table(raw_text, _check_max_marks(max_marks))


def import_percentile_map(
    db: Session,
    test_id: str,
    raw_text: str,
    max_marks: int,
    *,
    actor: str = "system",
) -> ImportSummary:
    """Build a dense table from ``raw_text`` and replace the stored map for ``test_id``.

    Line errors do not block the import. When no row is usable nothing is
    written and :class:`PercentileParseError` carries the errors.
    The caller owns the transaction.
    """
    test_id = _check_test_id(test_id)
    max_marks = _check_max_marks(max_marks)
    result = build_percentile_table(raw_text, max_marks)
    if result.table is None:
        logger.warning(
            "percentile_import_rejected",
            extra={"structured_data": {"test_id": test_id, "errors": len(result.errors)}},
        )
        raise PercentileParseError(detail={"test_id": test_id, "errors": result.errors})

    payload_hash = sha256((raw_text or "").encode("utf-8")).hexdigest()
    PercentileMapRepository(db).save(test_id, result.table, max_marks)
    AuditLogRepository(db).record(actor, f"percentile_import:{test_id}", payload_hash)
    logger.info(
        "percentile_import_saved",
        extra={
            "structured_data": {
                "test_id": test_id,
                "max_marks": max_marks,
                "anchors": result.anchor_count,
                "line_errors": len(result.errors),
                "actor": actor,
            }
        },
    )
    return ImportSummary(
        test_id=test_id,
        max_marks=max_marks,
        slots=len(result.table),
        anchors=result.anchor_count,
        payload_hash=payload_hash,
        errors=list(result.errors),
    )


def get_percentile_map(db: Session, test_id: str) -> PercentileMapDocument:
    document = PercentileMapRepository(db).load(test_id)
    if document is None:
        raise PercentileMapNotFoundError(PercentileMessages.MAP_NOT_FOUND.format(test_id=test_id))
    return document


def delete_percentile_map(db: Session, test_id: str, *, actor: str = "system") -> None:
    if not PercentileMapRepository(db).delete(test_id):
        raise PercentileMapNotFoundError(PercentileMessages.MAP_NOT_FOUND.format(test_id=test_id))
    AuditLogRepository(db).record(actor, f"percentile_delete:{test_id}", sha256(test_id.encode("utf-8")).hexdigest())


def resolve_score_percentile(
    db: Session,
    test_id: str,
    score: float,
    max_possible_score: float,
) -> PercentileLookupResult:
    """Percentile for ``score`` on ``test_id``.

    A missing map, or a storage failure while reading it, selects the
    fallback heuristic.
    """
    document: Optional[PercentileMapDocument]
    try:
        document = PercentileMapRepository(db).load(test_id)
    except SQLAlchemyError:
        logger.exception("percentile_map_load_failed", extra={"structured_data": {"test_id": test_id}})
        document = None
    result = resolve_percentile(score, document, max_possible_score)
    if result.used_fallback:
        logger.info(
            "percentile_fallback_used",
            extra={"structured_data": {"test_id": test_id, "map_present": document is not None}},
        )
    return result
