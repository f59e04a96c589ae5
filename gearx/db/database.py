from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url, URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from gearx.core.config import settings
from gearx.core.metrics import inc_counter, metrics_registry, record_last_run

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


@dataclass(frozen=True, slots=True)
class DatabaseGateway:
    """Encapsulates engine and session factory lifecycle."""

    engine: Engine
    session_factory: sessionmaker[Session]

    @contextmanager
    def session(self) -> Iterator[Session]:
        started = perf_counter()
        inc_counter("db.session.opens")
        session: Session = self.session_factory()
        try:
            yield session
        finally:
            metrics_registry.record("db.session.duration", (perf_counter() - started) * 1000.0)
            inc_counter("db.session.closes")
            session.close()

    @contextmanager
    def transactional(self) -> Iterator[Session]:
        session: Session = self.session_factory()
        started = perf_counter()
        committed = False
        inc_counter("db.transaction.opens")
        try:
            yield session
            session.commit()
            committed = True
            inc_counter("db.transaction.commits")
        except SQLAlchemyError as e:
            session.rollback()
            inc_counter("db.transaction.rollbacks")
            logger.error("transaction_rollback", extra={"structured_data": {"error": str(e)}})
            raise
        finally:
            elapsed_ms = (perf_counter() - started) * 1000.0
            metrics_registry.record("db.transaction.duration", elapsed_ms)
            record_last_run("db.transaction.duration", elapsed_ms, metadata={"committed": committed})
            session.close()


def _build_engine(database_url: str) -> Engine:
    url: URL = make_url(database_url)
    kwargs: dict[str, object] = {"echo": False, "future": True}

    pool_kwargs: dict[str, object] = {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": settings.db_pool_pre_ping,
    }

    if url.get_backend_name() == "sqlite":
        connect_args: dict[str, object] = {"check_same_thread": False}
        database = url.database or ""
        if database.startswith("file:"):
            connect_args["uri"] = True
        kwargs["connect_args"] = connect_args
        if database in ("", ":memory:", "file::memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = QueuePool
            kwargs.update(pool_kwargs)
    else:
        kwargs.update(pool_kwargs)

    return create_engine(database_url, **kwargs)


engine: Engine = _build_engine(settings.database_url)
SessionLocal: sessionmaker[Session] = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
database_gateway = DatabaseGateway(engine=engine, session_factory=SessionLocal)


def get_db():
    with database_gateway.session() as session:
        yield session


@contextmanager
def transactional_session() -> Iterator[Session]:
    """Context manager that manages commit/rollback for explicit transactions."""

    with database_gateway.transactional() as session:
        yield session


__all__ = [
    "Base",
    "DatabaseGateway",
    "database_gateway",
    "engine",
    "SessionLocal",
    "get_db",
    "transactional_session",
]
