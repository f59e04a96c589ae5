from __future__ import annotations

from dataclasses import dataclass
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from gearx.db.repositories.base import Repository
from gearx.models.audit import AuditLog


@dataclass
class AuditLogRepository(Repository[Session]):
    def record(self, actor: str, action: str, payload_hash: str) -> AuditLog:
        entry = AuditLog(actor=actor, action=action[:200], payload_hash=payload_hash)
        self.db.add(entry)
        return entry

    def for_action_prefix(self, prefix: str) -> List[AuditLog]:
        stmt = select(AuditLog).where(AuditLog.action.startswith(prefix)).order_by(AuditLog.id)
        return list(self.db.execute(stmt).scalars())
