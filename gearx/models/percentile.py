from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from gearx.db.database import Base

__all__ = ["PercentileMap"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PercentileMap(Base):
    """Dense mark -> percentile table for one test; replaced wholesale on import."""

    __tablename__ = "percentile_maps"

    test_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    max_marks: Mapped[int] = mapped_column(Integer, nullable=False)
    percentile_table: Mapped[list] = mapped_column("map", JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
