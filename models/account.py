# models/account.py

from sqlalchemy import Column, String, DateTime

from core.database import Base
from core.helpers import generate_id
from core.time_utils import now_utc


class Account(Base):
    """Sign-in identity (the principal). Only display_name is ever edited."""

    __tablename__ = "accounts"

    id = Column(String, primary_key=True, default=generate_id)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=now_utc)

    def __repr__(self):
        return f"<Account {self.email}>"
