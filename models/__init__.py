from .account import Account
from .user import User, ROLES, ROLE_ADMIN, ROLE_DOCTOR, ROLE_RECEPTIONIST, ROLE_PATIENT
from .patient import Patient
from .staff import DoctorRecord, ReceptionistRecord
from .appointment import Appointment
from .prescription import Prescription, DiagnosisLog

__all__ = [
    "Account",
    "User",
    "ROLES",
    "ROLE_ADMIN",
    "ROLE_DOCTOR",
    "ROLE_RECEPTIONIST",
    "ROLE_PATIENT",
    "Patient",
    "DoctorRecord",
    "ReceptionistRecord",
    "Appointment",
    "Prescription",
    "DiagnosisLog",
]
