from datetime import date, datetime, time, timezone


def normalize_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        try:
            return date.fromisoformat(value_text[:10])
        except ValueError:
            return None
    return None


def normalize_datetime(value, *, end_of_day=False):
    """Coerce ISO strings, dates and datetimes to a naive UTC datetime.

    A bare date maps to the start of that day, or its last microsecond when
    ``end_of_day`` is set, so date-only ranges include the whole end day.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        if len(value_text) == 10:
            parsed_date = normalize_date(value_text)
            if parsed_date is None:
                return None
            return normalize_datetime(parsed_date, end_of_day=end_of_day)
        try:
            value = datetime.fromisoformat(value_text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.max if end_of_day else time.min)
    return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
