import os
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from core.config import BASE_DIR, DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {}


if DATABASE_URL.startswith("sqlite:///"):
    os.makedirs(os.path.join(BASE_DIR, "data"), exist_ok=True)

# Create engine
engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


def init_db(bind=None):
    """Create all tables. Importing models registers them on Base."""
    import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def get_db_context():
    """
    Session for one page action or script; closed on exit.

    Usage:
        with get_db_context() as db:
            result = db.query(Model).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
