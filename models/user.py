from sqlalchemy import Column, String, DateTime

from core.database import Base
from core.time_utils import now_utc

ROLE_ADMIN = "Admin"
ROLE_DOCTOR = "Doctor"
ROLE_RECEPTIONIST = "Receptionist"
ROLE_PATIENT = "Patient"

ROLES = (ROLE_ADMIN, ROLE_DOCTOR, ROLE_RECEPTIONIST, ROLE_PATIENT)


class User(Base):
    """Role-bearing profile; id is the owning account id."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)

    name = Column(String, nullable=True)
    email = Column(String, index=True, nullable=True)

    role = Column(String, index=True, nullable=True)
    plan = Column(String, nullable=True)

    created_at = Column(DateTime, default=now_utc)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
