from gearx.db.repositories.audit import AuditLogRepository
from gearx.db.repositories.percentile_maps import PercentileMapRepository

__all__ = [
    "AuditLogRepository",
    "PercentileMapRepository",
]
