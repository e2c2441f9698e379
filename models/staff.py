# models/staff.py

from sqlalchemy import Column, String, Text

from core.database import Base


class DoctorRecord(Base):
    __tablename__ = "doctors"

    id = Column(String, primary_key=True)  # account id
    name = Column(String, nullable=True)
    specialization = Column(String, nullable=True)
    experience = Column(String, nullable=True)
    contact = Column(String, nullable=True)
    bio = Column(Text, nullable=True)


class ReceptionistRecord(Base):
    __tablename__ = "receptionists"

    id = Column(String, primary_key=True)  # account id
    name = Column(String, nullable=True)
    specialization = Column(String, nullable=True)
    experience = Column(String, nullable=True)
    contact = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
