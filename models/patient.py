# models/patient.py

from sqlalchemy import Column, Integer, String, DateTime

from core.database import Base
from core.helpers import generate_id
from core.time_utils import now_utc


class Patient(Base):
    __tablename__ = "patients"

    id = Column(String, primary_key=True, default=generate_id)

    # Demographics
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=True)
    gender = Column(String, nullable=True)
    contact = Column(String, nullable=True)
    email = Column(String, index=True, nullable=True)

    # Account link; empty until the patient signs in (or is linked by email)
    user_id = Column(String, index=True, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=now_utc)

    def __repr__(self):
        return f"<Patient {self.id} - {self.name}>"
