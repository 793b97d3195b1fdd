from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tzlocal import get_localzone


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
            return date.fromisoformat(value_text)
        except ValueError:
            return None
    return None


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (SQLite drops tzinfo) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_timezone(name: Optional[str]):
    """Map a REPORT_TZ value to a tzinfo.

    "local" is the host's named zone, DST rules included.
    """
    key = (name or "local").strip()
    if key.lower() == "local":
        return get_localzone()
    if key.lower() == "utc":
        return timezone.utc
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {key}") from exc


def local_day_bounds(start: date, end: date, tz) -> tuple[datetime, datetime]:
    """UTC instants covering the whole calendar days start..end in ``tz``."""
    start_local = datetime.combine(start, time.min, tzinfo=tz)
    end_local = datetime.combine(end + timedelta(days=1), time.min, tzinfo=tz)
    end_local = end_local - timedelta(microseconds=1)
    return start_local.astimezone(timezone.utc), end_local.astimezone(timezone.utc)


def month_start(today: date) -> date:
    return today.replace(day=1)
