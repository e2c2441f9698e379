from datetime import date, datetime, time, timezone


def now_utc() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_instant(value) -> datetime | None:
    """Normalize a stored date value to an aware datetime.

    Accepts datetime objects (naive values are taken as UTC), plain dates
    (local midnight), epoch seconds, ISO-8601 strings and timestamp-like
    objects exposing ``to_datetime()``/``seconds``. Anything unparseable
    returns None.
    """
    if value is None or value == "":
        return None
    if hasattr(value, "to_datetime"):
        value = value.to_datetime()
    elif isinstance(value, dict) and "seconds" in value:
        value = value["seconds"]
    elif not isinstance(value, (datetime, date, str, int, float)) and hasattr(value, "seconds"):
        value = value.seconds

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min).astimezone()
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # values this large are milliseconds
        if abs(value) > 1e11:
            value = value / 1000.0
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            # date-only / naive strings are local wall-clock values
            return parsed.astimezone()
        return parsed
    return None


def local_date(instant: datetime) -> date:
    """Calendar date of an instant in the machine's local timezone."""
    return instant.astimezone().date()


def local_now() -> datetime:
    return datetime.now().astimezone()


def format_date(value, fmt: str = "%b %d, %Y", default: str = "—") -> str:
    instant = to_instant(value)
    if instant is None:
        return default
    return instant.astimezone().strftime(fmt)


# Sort key for records whose date is missing or unparseable: oldest possible
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def instant_of(record, attr: str = "date") -> datetime | None:
    if isinstance(record, dict):
        return to_instant(record.get(attr))
    return to_instant(getattr(record, attr, None))


def sort_by_instant(records, attr: str = "date", descending: bool = True) -> list:
    """Sort records by a date attribute after normalizing it.

    Stable, so records with equal instants keep their input order.
    """
    return sorted(
        records,
        key=lambda r: instant_of(r, attr) or EARLIEST,
        reverse=descending,
    )
