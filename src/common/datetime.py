"""Datetime utilities."""

from datetime import datetime, timedelta, timezone

from dateutil.parser import parse as parse_date

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}


def resolve_published_date(value: str | None) -> datetime:
    """Parse a feed date string, falling back to now (UTC) when missing or invalid.

    Naive results are treated as UTC.
    """
    if not value:
        return datetime.now(timezone.utc)

    try:
        dt = parse_date(value, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return datetime.now(timezone.utc)

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
