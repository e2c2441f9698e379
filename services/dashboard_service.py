"""Per-role data slices for the dashboards.

Every loader queries without ORDER BY and sorts in Python, newest first,
so no composite index is ever needed.
"""

from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import PersistenceError
from core.time_utils import sort_by_instant
from models.appointment import Appointment
from models.patient import Patient
from models.prescription import Prescription
from models.user import ROLES, ROLE_DOCTOR, User
from services.identity_service import get_account
from services.patient_service import find_patient_for_account
from services.timeline_service import build_timeline
from services.user_service import get_doctor_list

PLACEHOLDER = "—"


@dataclass
class DoctorView:
    doctor_id: str
    appointments: list = field(default_factory=list)
    prescriptions: list = field(default_factory=list)
    patients: list = field(default_factory=list)  # full directory, for names
    my_patients: list = field(default_factory=list)

    def patient_names(self) -> dict:
        return {p.id: p.name for p in self.patients}

    def timeline(self, patient_id):
        return build_timeline(patient_id, self.appointments, self.prescriptions)


@dataclass
class PatientView:
    patient: object
    appointments: list = field(default_factory=list)
    prescriptions: list = field(default_factory=list)
    doctors: dict = field(default_factory=dict)  # doctor id -> profile

    def timeline(self):
        return build_timeline(self.patient.id, self.appointments, self.prescriptions, self.doctors)


@dataclass
class ReceptionistView:
    patients: list = field(default_factory=list)
    appointments: list = field(default_factory=list)
    doctors: list = field(default_factory=list)

    def patient_names(self) -> dict:
        return {p.id: p.name for p in self.patients}

    def doctor_names(self) -> dict:
        return {d.id: d.name for d in self.doctors}


@dataclass
class AdminView:
    profiles_by_role: dict = field(default_factory=dict)
    patient_count: int = 0
    appointment_count: int = 0
    prescription_count: int = 0


@dataclass
class PatientFallback:
    """Stand-in when no patient record exists for the signed-in account."""

    id: str
    name: str | None = None
    email: str | None = None
    age: int | None = None
    gender: str | None = None
    contact: str | None = None
    created_at: object = None


def _load(fn):
    try:
        return fn()
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to load dashboard data: {exc}") from exc


# ------------------------------------------
# Shared helpers
# ------------------------------------------
def derive_my_patients(patients, appointments) -> list:
    """Directory entries that have at least one of the given appointments."""
    ids = {a.patient_id for a in appointments}
    return [p for p in patients if p.id in ids]


def name_lookup(names: dict, record_id, fallback: str | None = None) -> str:
    """Name for a foreign id; dangling ids get the booking-time name or a placeholder."""
    return names.get(record_id) or fallback or PLACEHOLDER


def filter_by_status(appointments, status: str | None) -> list:
    if not status:
        return list(appointments)
    return [a for a in appointments if (a.status or "Pending") == status]


def search_patients(patients, query: str | None) -> list:
    q = (query or "").strip().lower()
    if not q:
        return list(patients)
    return [
        p for p in patients
        if q in (p.name or "").lower() or q in (p.contact or "").lower()
    ]


# ------------------------------------------
# Loaders
# ------------------------------------------
def load_doctor_view(db: Session, doctor_id: str) -> DoctorView:
    def run():
        appointments = db.query(Appointment).filter(Appointment.doctor_id == doctor_id).all()
        prescriptions = db.query(Prescription).filter(Prescription.doctor_id == doctor_id).all()
        patients = db.query(Patient).all()
        return DoctorView(
            doctor_id=doctor_id,
            appointments=sort_by_instant(appointments, "date"),
            prescriptions=sort_by_instant(prescriptions, "created_at"),
            patients=patients,
            my_patients=derive_my_patients(patients, appointments),
        )

    return _load(run)


def load_patient_view(db: Session, account) -> PatientView:
    def run():
        patient = find_patient_for_account(db, account.id)
        if patient is None:
            patient = PatientFallback(
                id=account.id,
                name=getattr(account, "name", None) or getattr(account, "display_name", None),
                email=account.email,
            )
        appointments = db.query(Appointment).filter(Appointment.patient_id == patient.id).all()
        prescriptions = db.query(Prescription).filter(Prescription.patient_id == patient.id).all()
        doctors = {d.id: d for d in get_doctor_list(db)}
        return PatientView(
            patient=patient,
            appointments=sort_by_instant(appointments, "date"),
            prescriptions=sort_by_instant(prescriptions, "created_at"),
            doctors=doctors,
        )

    return _load(run)


def load_receptionist_view(db: Session) -> ReceptionistView:
    def run():
        return ReceptionistView(
            patients=db.query(Patient).all(),
            appointments=sort_by_instant(db.query(Appointment).all(), "date"),
            doctors=get_doctor_list(db),
        )

    return _load(run)


def load_admin_view(db: Session) -> AdminView:
    def run():
        grouped = {role: [] for role in ROLES}
        for profile in db.query(User).all():
            grouped.setdefault(profile.role or "Patient", []).append(profile)
        return AdminView(
            profiles_by_role=grouped,
            patient_count=db.query(Patient).count(),
            appointment_count=db.query(Appointment).count(),
            prescription_count=db.query(Prescription).count(),
        )

    return _load(run)


def doctor_choices(view) -> dict:
    """Doctor id -> display name for booking forms."""
    doctors = view.doctors.values() if isinstance(view.doctors, dict) else view.doctors
    return {d.id: d.name or "Doctor" for d in doctors if d.role == ROLE_DOCTOR}


def load_patient_dashboard(db: Session, account_id: str) -> PatientView:
    """Patient view for the signed-in account id."""
    account = get_account(db, account_id)
    if account is None:
        raise PersistenceError(f"Account {account_id} not found.")
    return load_patient_view(db, account)
