"""Per-patient medical history built from already-loaded records."""

from dataclasses import dataclass
from datetime import datetime

from core.time_utils import EARLIEST, instant_of
from services.prescription_service import medicine_names

EVENT_APPOINTMENT = "appointment"
EVENT_PRESCRIPTION = "prescription"


@dataclass(frozen=True)
class TimelineEvent:
    type: str
    instant: datetime | None
    title: str
    detail: str
    source_id: str | None = None


def _doctor_label(doctors, doctor_id):
    if doctors is None:
        return None
    entry = doctors.get(doctor_id)
    if entry is None:
        return "Doctor"
    if isinstance(entry, str):
        return entry or "Doctor"
    return getattr(entry, "name", None) or "Doctor"


def _field(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def appointment_event(appointment, doctors=None) -> TimelineEvent:
    status = _field(appointment, "status") or "Pending"
    doctor = _doctor_label(doctors, _field(appointment, "doctor_id"))
    if doctor is None:
        title = f"Appointment — {status}"
    else:
        title = f"Appointment with Dr. {doctor} — {status}"
    return TimelineEvent(
        type=EVENT_APPOINTMENT,
        instant=instant_of(appointment, "date"),
        title=title,
        detail=_field(appointment, "reason") or "General visit",
        source_id=_field(appointment, "id"),
    )


def prescription_event(prescription, doctors=None) -> TimelineEvent:
    doctor = _doctor_label(doctors, _field(prescription, "doctor_id"))
    if isinstance(prescription, dict):
        names = [m.get("name") for m in prescription.get("medicines") or [] if m.get("name")]
    else:
        names = medicine_names(prescription)
    return TimelineEvent(
        type=EVENT_PRESCRIPTION,
        instant=instant_of(prescription, "created_at"),
        title="Prescription" if doctor is None else f"Prescription by Dr. {doctor}",
        detail=", ".join(names) or "No medicines listed",
        source_id=_field(prescription, "id"),
    )


def sort_timeline(events) -> list[TimelineEvent]:
    """Newest first; undated events last; ties keep input order."""
    return sorted(events, key=lambda e: e.instant or EARLIEST, reverse=True)


def build_timeline(patient_id, appointments=(), prescriptions=(), doctors=None) -> list[TimelineEvent]:
    """Merge the patient's appointments and prescriptions into one history.

    ``doctors`` (id -> name or profile) switches titles to the
    "with Dr. X" form used on the patient's own dashboard.
    """
    events = [
        appointment_event(a, doctors)
        for a in appointments
        if _field(a, "patient_id") == patient_id
    ]
    events.extend(
        prescription_event(p, doctors)
        for p in prescriptions
        if _field(p, "patient_id") == patient_id
    )
    return sort_timeline(events)
