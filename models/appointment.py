# models/appointment.py

from sqlalchemy import Column, String, DateTime

from core.database import Base
from core.helpers import generate_id
from core.time_utils import now_utc

STATUS_PENDING = "Pending"
STATUS_CONFIRMED = "Confirmed"
STATUS_COMPLETED = "Completed"
STATUS_CANCELLED = "Cancelled"

STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_COMPLETED, STATUS_CANCELLED)


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String, primary_key=True, default=generate_id)

    # No foreign keys: dangling ids render as placeholders
    patient_id = Column(String, index=True, nullable=False)
    doctor_id = Column(String, index=True, nullable=False)

    # Display names captured at booking time
    patient_name = Column(String, nullable=True)
    doctor_name = Column(String, nullable=True)

    date = Column(DateTime, nullable=False)  # stored as UTC
    reason = Column(String, nullable=True)
    status = Column(String, default=STATUS_PENDING)

    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=now_utc)

    def __repr__(self):
        return f"<Appointment {self.id} {self.status}>"
