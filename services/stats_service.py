"""Dashboard counters over loaded appointment lists. No I/O."""

from datetime import date, datetime, time

from core.time_utils import instant_of, local_date, local_now, to_instant
from models.appointment import STATUS_CANCELLED, STATUS_PENDING


def _status(appointment):
    if isinstance(appointment, dict):
        return appointment.get("status")
    return getattr(appointment, "status", None)


def count_today(appointments, today: date | None = None) -> int:
    """Appointments whose local calendar date is today."""
    today = today or local_now().date()
    count = 0
    for a in appointments:
        instant = instant_of(a)
        if instant is not None and local_date(instant) == today:
            count += 1
    return count


def month_start(now: datetime | None = None) -> datetime:
    now = now or local_now()
    if now.tzinfo is None:
        now = now.astimezone()
    return datetime.combine(now.date().replace(day=1), time.min, tzinfo=now.tzinfo)


def count_this_month(appointments, now: datetime | None = None) -> int:
    """Appointments at or after the first instant of the current month."""
    start = month_start(now)
    count = 0
    for a in appointments:
        instant = instant_of(a)
        if instant is not None and instant >= start:
            count += 1
    return count


def count_pending(appointments) -> int:
    return sum(1 for a in appointments if _status(a) == STATUS_PENDING)


def next_upcoming(appointments, now: datetime | None = None):
    """Earliest non-cancelled appointment at or after ``now``; None if there is none."""
    if now is None:
        now = local_now()
    elif isinstance(now, datetime) and now.tzinfo is None:
        now = now.astimezone()
    else:
        now = to_instant(now)
    upcoming = [
        (instant_of(a), a)
        for a in appointments
        if _status(a) != STATUS_CANCELLED
    ]
    upcoming = [(i, a) for i, a in upcoming if i is not None and i >= now]
    if not upcoming:
        return None
    return min(upcoming, key=lambda pair: pair[0])[1]


def appointments_on_day(appointments, day: date) -> list:
    """Appointments on a local calendar day, earliest first."""
    on_day = []
    for a in appointments:
        instant = instant_of(a)
        if instant is not None and local_date(instant) == day:
            on_day.append(a)
    return sorted(on_day, key=instant_of)


# ------------------------------------------
# Per-dashboard summaries
# ------------------------------------------
def doctor_stats(appointments, prescriptions, *, today=None, now=None) -> dict:
    return {
        "today": count_today(appointments, today),
        "monthly": count_this_month(appointments, now),
        "prescriptions": len(prescriptions),
    }


def receptionist_stats(patients, appointments, *, today=None) -> dict:
    return {
        "total_patients": len(patients),
        "today": count_today(appointments, today),
        "pending": count_pending(appointments),
    }


def patient_stats(appointments, prescriptions, *, now=None) -> dict:
    return {
        "appointments": len(appointments),
        "prescriptions": len(prescriptions),
        "next": next_upcoming(appointments, now),
    }
