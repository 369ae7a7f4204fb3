from datetime import datetime

from shopdesk.core.errors import ValidationError

MINUTE_SLOT = 5

BUCKET_ALIASES = {
    "minute": "minute",
    "minutes": "minute",
    "hour": "hour",
    "hourly": "hour",
    "day": "day",
    "daily": "day",
    "week": "week",
    "weekly": "week",
    "month": "month",
    "monthly": "month",
}


def normalize_bucket(value, default="day"):
    if value is None or not str(value).strip():
        return default
    key = str(value).strip().lower()
    bucket = BUCKET_ALIASES.get(key)
    if bucket is None:
        raise ValidationError(
            "Unknown bucket '{}'; expected one of minute, hour, day, week, month".format(value)
        )
    return bucket


def bucket_label(moment: datetime, bucket: str) -> str:
    if bucket == "minute":
        slot = moment.minute - moment.minute % MINUTE_SLOT
        return "{} {:02d}:{:02d}".format(moment.strftime("%Y-%m-%d"), moment.hour, slot)
    if bucket == "hour":
        return moment.strftime("%Y-%m-%d %H")
    if bucket == "week":
        return moment.strftime("%Y-%W")
    if bucket == "month":
        return moment.strftime("%Y-%m")
    return moment.strftime("%Y-%m-%d")


def bucketize(rows, bucket, *, timestamp, value):
    """Sum ``value(row)`` per bucket of ``timestamp(row)``.

    Only buckets that received at least one row are returned, ordered by label.
    Labels are zero-padded so lexical order is chronological.
    """
    totals = {}
    for row in rows:
        moment = timestamp(row)
        if moment is None:
            continue
        label = bucket_label(moment, bucket)
        totals[label] = totals.get(label, 0) + value(row)
    return [(label, totals[label]) for label in sorted(totals)]
