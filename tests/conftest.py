import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ADMIN_EMAILS", "admin@gearx.dev,ops@gearx.dev")

import pytest
from fastapi.testclient import TestClient

import gearx.models  # noqa: F401
from gearx.core.metrics import metrics_registry
from gearx.db.database import Base, SessionLocal, engine
from gearx.main import app

ADMIN_HEADERS = {"X-Admin-Email": "admin@gearx.dev"}


@pytest.fixture(autouse=True)
def fresh_schema():
    # Every test starts from empty tables so stored maps never leak between tests
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    metrics_registry.reset()
    yield


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest.fixture()
def session():
    with SessionLocal() as db:
        yield db
