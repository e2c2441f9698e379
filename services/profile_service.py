"""Map a signed-in account to its role-bearing profile.

First sign-in provisions a Patient profile. If a receptionist already
registered a patient record with the same email, that record is linked to
the account instead of creating a second one.
"""

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import DEFAULT_PLAN
from core.errors import PersistenceError
from core.logging import get_logger
from models.patient import Patient
from models.user import ROLE_PATIENT, User

log = get_logger(__name__)

DEFAULT_PATIENT_NAME = "New Patient"


def find_unlinked_patients_by_email(db: Session, email: str):
    """Patient records registered with this email and not yet bound to an account."""
    if not email:
        return []
    return (
        db.query(Patient)
        .filter(func.lower(Patient.email) == email.strip().lower())
        .filter(or_(Patient.user_id.is_(None), Patient.user_id == ""))
        .order_by(Patient.created_at.asc(), Patient.id.asc())
        .all()
    )


def attach_patient_record(db: Session, account, name: str):
    """Link the oldest unlinked record with the account's email, else create one.

    Returns the record. Nothing is committed.
    """
    matches = find_unlinked_patients_by_email(db, account.email)
    if matches:
        record = matches[0]
        if len(matches) > 1:
            log.warning(
                "duplicate_patient_email",
                email=account.email,
                linked=record.id,
                ignored=[p.id for p in matches[1:]],
            )
        record.user_id = account.id
        log.info("patient_record_linked", account_id=account.id, patient_id=record.id)
        return record

    record = db.get(Patient, account.id)
    if record is None:
        record = Patient(
            id=account.id,
            name=name,
            email=account.email,
            age=None,
            gender="",
            contact="",
            user_id=account.id,
            created_by=account.id,
        )
        db.add(record)
    return record


def _provision(db: Session, account) -> User:
    name = account.display_name or DEFAULT_PATIENT_NAME
    record = attach_patient_record(db, account, name)

    profile = User(
        id=account.id,
        name=record.name or name,
        email=account.email,
        role=ROLE_PATIENT,
        plan=DEFAULT_PLAN,
    )
    db.add(profile)
    log.info("profile_provisioned", account_id=account.id, role=ROLE_PATIENT)
    return profile


def resolve_profile(db: Session, account) -> User:
    """Return the account's profile, creating or repairing it when needed."""
    try:
        profile = db.get(User, account.id)
        if profile is None:
            profile = _provision(db, account)
            db.commit()
            db.refresh(profile)
        elif not profile.role:
            profile.role = ROLE_PATIENT
            db.commit()
            db.refresh(profile)
        return profile
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not resolve profile: {exc}") from exc