from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

__all__ = [
    "PercentileCsvRequest",
    "PercentilePreviewResponse",
    "PercentileImportResponse",
    "PercentileMapResponse",
]


class PercentileCsvRequest(BaseModel):
    csv_text: str = Field(description="Lines of 'marks,percentile'; an optional header row is ignored")
    max_marks: int = Field(ge=0, description="Maximum attainable marks for the test")


class PercentilePreviewResponse(BaseModel):
    max_marks: int
    table: Optional[List[float]]
    errors: List[str]
    anchors: int


class PercentileImportResponse(BaseModel):
    test_id: str
    max_marks: int
    slots: int
    anchors: int
    hash: str
    errors: List[str]


class PercentileMapResponse(BaseModel):
    test_id: str
    max_marks: int
    table: List[float]
    updated_at: Optional[datetime] = None
