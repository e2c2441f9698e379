from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import init_db
from services import identity_service


@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(autouse=True)
def _identity_state(monkeypatch):
    identity_service.reset_throttle()
    monkeypatch.setattr(identity_service, "_listeners", [])
    yield
    identity_service.reset_throttle()


@pytest.fixture
def fixed_now():
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
