"""
Timezone-aware helpers for turning a captain's local wall-clock times into
absolute instants.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dockslot.config import settings

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Naive values read back from SQLite are UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_valid_timezone(name: str | None) -> bool:
    if not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def resolve_timezone(name: str | None) -> ZoneInfo:
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, using %s", name, settings.default_timezone)
    return ZoneInfo(settings.default_timezone)


def local_today(tz: ZoneInfo, now: datetime | None = None) -> date:
    return as_utc(now or utcnow()).astimezone(tz).date()


def day_of_week(d: date) -> int:
    # 0 = Sunday .. 6 = Saturday
    return (d.weekday() + 1) % 7


def create_timestamp(d: date, t: time, tz: ZoneInfo) -> datetime:
    """Local date + wall time in tz -> UTC instant."""
    return datetime.combine(d, t, tzinfo=tz).astimezone(timezone.utc)


def day_bounds(d: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    start = create_timestamp(d, time.min, tz)
    end = create_timestamp(d + timedelta(days=1), time.min, tz)
    return start, end


def overlaps(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    # half-open intervals: touching ends do not overlap
    return start1 < end2 and end1 > start2


def format_hhmm(dt: datetime | time) -> str:
    return dt.strftime("%H:%M")
