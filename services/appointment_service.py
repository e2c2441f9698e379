"""Appointment booking and status transitions.

Pending      -> Confirmed, Cancelled, Completed
Confirmed    -> Completed, Cancelled
Completed, Cancelled are terminal.

Illegal moves are rejected here, before the write, not only hidden in the
pages.
"""

from datetime import timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import InvalidTransitionError, NotFoundError, PersistenceError, ValidationError
from core.logging import get_logger
from core.time_utils import to_instant
from models.appointment import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    STATUS_PENDING,
    STATUSES,
    Appointment,
)
from models.user import ROLE_DOCTOR, ROLE_RECEPTIONIST

log = get_logger(__name__)

TRANSITIONS = {
    STATUS_PENDING: (STATUS_CONFIRMED, STATUS_CANCELLED, STATUS_COMPLETED),
    STATUS_CONFIRMED: (STATUS_COMPLETED, STATUS_CANCELLED),
    STATUS_COMPLETED: (),
    STATUS_CANCELLED: (),
}

# Which target statuses each role gets a button for
ROLE_ACTIONS = {
    ROLE_RECEPTIONIST: (STATUS_CONFIRMED, STATUS_CANCELLED),
    ROLE_DOCTOR: (STATUS_COMPLETED,),
}

DEFAULT_REASON = "General Visit"


def current_status(appointment) -> str:
    return getattr(appointment, "status", None) or STATUS_PENDING


def is_terminal(status: str | None) -> bool:
    return not TRANSITIONS.get(status or STATUS_PENDING, ())


def allowed_transitions(status: str | None):
    return TRANSITIONS.get(status or STATUS_PENDING, ())


def can_transition(status: str | None, new_status: str) -> bool:
    return new_status in allowed_transitions(status)


def offered_actions(status: str | None, role: str):
    """Transitions a role may trigger from ``status``, in display order."""
    legal = allowed_transitions(status)
    return tuple(s for s in ROLE_ACTIONS.get(role, ()) if s in legal)


# ------------------------------------------
# Booking
# ------------------------------------------
def book_appointment(
    db: Session,
    *,
    patient_id: str,
    doctor_id: str,
    when,
    reason: str | None = None,
    created_by: str = "",
    patient_name: str = "",
    doctor_name: str = "",
):
    if not patient_id or not doctor_id or when in (None, ""):
        raise ValidationError("Please select patient, doctor, and date.")
    instant = to_instant(when)
    if instant is None:
        raise ValidationError("Appointment date is not valid.")

    appointment = Appointment(
        patient_id=patient_id,
        doctor_id=doctor_id,
        patient_name=patient_name or "",
        doctor_name=doctor_name or "",
        # naive UTC in the database
        date=instant.astimezone(timezone.utc).replace(tzinfo=None),
        reason=(reason or "").strip() or DEFAULT_REASON,
        status=STATUS_PENDING,
        created_by=created_by or "",
    )
    db.add(appointment)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not book appointment: {exc}") from exc

    db.refresh(appointment)
    log.info("appointment_booked", appointment_id=appointment.id, doctor_id=doctor_id)
    return appointment


# ------------------------------------------
# Status transitions
# ------------------------------------------
def transition(db: Session, appointment_id: str, new_status: str):
    """Move an appointment to ``new_status`` after checking the table above."""
    if new_status not in STATUSES:
        raise ValidationError(f"Unknown status {new_status}.")

    appointment = db.get(Appointment, appointment_id)
    if appointment is None:
        raise NotFoundError(f"Appointment {appointment_id} not found.")

    status = current_status(appointment)
    if not can_transition(status, new_status):
        raise InvalidTransitionError(status, new_status)

    appointment.status = new_status
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("transition_failed", appointment_id=appointment_id, status=new_status, error=str(exc))
        raise PersistenceError(f"Could not update appointment: {exc}") from exc

    log.info("appointment_transition", appointment_id=appointment_id, old=status, new=new_status)
    return appointment


def apply_transition(db: Session, appointment_id: str, new_status: str, reload):
    """Write the transition, then return ``reload()``.

    ``reload`` re-runs the page's loader so every list and stat is rebuilt
    from the store. If the write fails nothing is reloaded and the caller's
    cached view stays as it was.
    """
    transition(db, appointment_id, new_status)
    return reload()
