from __future__ import annotations

from .audit import AuditLog
from .percentile import PercentileMap

__all__ = ["AuditLog", "PercentileMap"]
