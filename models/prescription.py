# models/prescription.py

from sqlalchemy import Column, String, DateTime, Text, JSON

from core.database import Base
from core.helpers import generate_id
from core.time_utils import now_utc


class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(String, primary_key=True, default=generate_id)
    patient_id = Column(String, index=True, nullable=False)
    doctor_id = Column(String, index=True, nullable=False)

    diagnosis = Column(String, nullable=True)
    # Ordered list of {"name", "dosage", "instruction"}
    medicines = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=now_utc)

    def __repr__(self):
        return f"<Prescription {self.id} for {self.patient_id}>"


class DiagnosisLog(Base):
    __tablename__ = "diagnosis_logs"

    id = Column(String, primary_key=True, default=generate_id)
    patient_id = Column(String, index=True, nullable=False)
    doctor_id = Column(String, index=True, nullable=False)
    symptoms = Column(Text, nullable=True)
    ai_response = Column(Text, nullable=True)
    risk_level = Column(String, default="Low")
    created_at = Column(DateTime, default=now_utc)
