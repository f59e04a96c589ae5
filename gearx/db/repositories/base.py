from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.orm import Session


TSession = TypeVar("TSession", bound=Session)


@dataclass
class Repository(Generic[TSession]):
    """Base for repositories bound to one SQLAlchemy session.

    Repositories never commit; the caller's transaction scope does.
    """

    db: TSession

    def flush(self) -> None:
        self.db.flush()
