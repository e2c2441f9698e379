from .database import get_db_context, init_db, engine, SessionLocal, Base
from .helpers import generate_id
from .session_context import SessionContext, ProfileReady

__all__ = [
    "get_db_context",
    "init_db",
    "engine",
    "SessionLocal",
    "Base",
    "generate_id",
    "SessionContext",
    "ProfileReady",
]
