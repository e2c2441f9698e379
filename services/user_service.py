from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD, DEFAULT_PLAN
from core.errors import NotFoundError, PersistenceError, ValidationError
from core.logging import get_logger
from models.staff import DoctorRecord, ReceptionistRecord
from models.user import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT, ROLE_RECEPTIONIST, ROLES, User
from services.identity_service import get_account_by_email, sign_up, update_display_name
from services.profile_service import attach_patient_record

log = get_logger(__name__)

STAFF_MODELS = {
    ROLE_DOCTOR: DoctorRecord,
    ROLE_RECEPTIONIST: ReceptionistRecord,
}


def register_account(db: Session, name: str, email: str, password: str, role: str):
    """Create an account and its profile with the given role.

    Used by the admin to create staff. A Patient account is linked to its
    patient record the same way a first sign-in is. Raises AuthError from
    the identity provider.
    """
    name = (name or "").strip()
    if role not in ROLES:
        raise ValidationError(f"Invalid role. Expected one of {', '.join(ROLES)}.")
    if not name:
        raise ValidationError("Name is required.")

    account = sign_up(db, email, password, display_name=name, commit=False)
    if role == ROLE_PATIENT:
        record = attach_patient_record(db, account, name)
        name = record.name or name

    profile = User(id=account.id, name=name, email=account.email, role=role, plan=DEFAULT_PLAN)
    db.add(profile)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not register account: {exc}") from exc

    db.refresh(profile)
    log.info("account_registered", account_id=account.id, role=role)
    return profile


def ensure_default_users(db: Session):
    """
    Creates the first admin on a fresh database.
    """
    if db.query(User).filter(User.role == ROLE_ADMIN).first():
        return None
    if get_account_by_email(db, DEFAULT_ADMIN_EMAIL):
        return None

    profile = register_account(db, "Administrator", DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD, ROLE_ADMIN)
    log.info("default_admin_created", email=DEFAULT_ADMIN_EMAIL)
    return profile


def get_profiles_by_role(db: Session, role: str):
    return db.query(User).filter(User.role == role).all()


def get_doctor_list(db: Session):
    """Return all profiles with the Doctor role."""
    return get_profiles_by_role(db, ROLE_DOCTOR)


def get_staff_profile(db: Session, role: str, uid: str) -> dict:
    """Role extension record merged over the basic profile fields."""
    model = STAFF_MODELS.get(role)
    if model is None:
        raise ValidationError(f"No staff profile for role {role}.")

    profile = db.get(User, uid)
    details = {
        "id": uid,
        "name": getattr(profile, "name", None),
        "email": getattr(profile, "email", None),
        "specialization": None,
        "experience": None,
        "contact": None,
        "bio": None,
    }
    record = db.get(model, uid)
    if record is not None:
        for key in ("name", "specialization", "experience", "contact", "bio"):
            value = getattr(record, key)
            if value is not None:
                details[key] = value
    return details


def update_staff_profile(
    db: Session,
    role: str,
    uid: str,
    *,
    name: str,
    specialization: str | None = None,
    experience: str | None = None,
    contact: str | None = None,
    bio: str | None = None,
):
    """Write the extension record and the profile name in one commit."""
    model = STAFF_MODELS.get(role)
    if model is None:
        raise ValidationError(f"No staff profile for role {role}.")
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required.")

    profile = db.get(User, uid)
    if profile is None:
        raise NotFoundError(f"Profile {uid} not found.")

    record = db.get(model, uid)
    if record is None:
        record = model(id=uid)
        db.add(record)

    record.name = name
    record.specialization = (specialization or "").strip()
    record.experience = str(experience).strip() if experience not in (None, "") else ""
    record.contact = (contact or "").strip()
    record.bio = (bio or "").strip()
    profile.name = name
    update_display_name(db, uid, name, commit=False)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Error updating profile: {exc}") from exc

    log.info("staff_profile_updated", account_id=uid, role=role)
    return get_staff_profile(db, role, uid)
