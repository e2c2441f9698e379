from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import DEFAULT_PLAN
from core.errors import NotFoundError, PersistenceError, ValidationError
from core.logging import get_logger
from models.patient import Patient
from models.user import ROLE_PATIENT, User
from services.identity_service import normalize_email, sign_up

log = get_logger(__name__)


def _parse_age(age):
    if age in (None, ""):
        return None
    try:
        age = int(age)
    except (TypeError, ValueError):
        raise ValidationError("Age must be a whole number.")
    if age < 0 or age > 150:
        raise ValidationError("Age must be between 0 and 150.")
    return age


# ------------------------------------------
# Register a patient (receptionist)
# ------------------------------------------
def register_patient(
    db: Session,
    name: str,
    *,
    age=None,
    gender: str = "",
    contact: str = "",
    email: str = "",
    created_by: str = "",
    password: str | None = None,
):
    """Create a patient record.

    With email and password a Patient account is created too and the record
    is keyed by the account id. Without them the record stays unlinked until
    the patient signs up with the same email.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Patient name is required.")
    age = _parse_age(age)
    email = normalize_email(email)

    record_id = None
    if email and password:
        account = sign_up(db, email, password, display_name=name, commit=False)
        record_id = account.id
        db.add(User(id=account.id, name=name, email=email, role=ROLE_PATIENT, plan=DEFAULT_PLAN))

    patient = Patient(
        name=name,
        age=age,
        gender=gender or "",
        contact=(contact or "").strip(),
        email=email,
        user_id=record_id or "",
        created_by=created_by or "",
    )
    if record_id:
        patient.id = record_id
    db.add(patient)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not register patient: {exc}") from exc

    db.refresh(patient)
    log.info("patient_registered", patient_id=patient.id, linked=bool(record_id))
    return patient


# ------------------------------------------
# Fetch patients
# ------------------------------------------
def find_patient_for_account(db: Session, account_id: str):
    """Record keyed by the account id, else the one linked through user_id."""
    patient = db.get(Patient, account_id)
    if patient is not None:
        return patient
    return db.query(Patient).filter(Patient.user_id == account_id).first()


# ------------------------------------------
# Update patient basic info
# ------------------------------------------
def update_patient(
    db: Session,
    patient_id: str,
    *,
    name: str,
    age=None,
    gender: str | None = None,
    contact: str | None = None,
):
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required.")
    age = _parse_age(age)

    patient = db.get(Patient, patient_id)
    if patient is None:
        raise NotFoundError(f"Patient {patient_id} not found.")

    patient.name = name
    patient.age = age
    if gender is not None:
        patient.gender = gender
    if contact is not None:
        patient.contact = contact.strip()

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not update patient: {exc}") from exc

    db.refresh(patient)
    return patient
