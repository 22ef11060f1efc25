"""
Captain calendar rules: the weekly availability windows and blackout dates.
"""
from __future__ import annotations

import logging
from datetime import date, time, timedelta
from typing import List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dockslot.config import settings
from dockslot.core import errors
from dockslot.core.errors import DockSlotError
from dockslot.core.validation import parse_time, parse_uuid, sanitize_string
from dockslot.db.models.availability import AvailabilityWindow, BlackoutDate
from dockslot.db.models.profile import Profile
from dockslot.schemas.availability import AvailabilityWindowInput

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# New captains: every day but Monday, 06:00-21:00
DEFAULT_START_TIME = time(6, 0)
DEFAULT_END_TIME = time(21, 0)
DEFAULT_ACTIVE_DAYS = (0, 2, 3, 4, 5, 6)


# --------------------------
# Weekly windows
# --------------------------

def _validate_week(windows: Sequence[AvailabilityWindowInput]) -> List[tuple]:
    if windows is None or len(windows) != 7:
        raise DockSlotError(errors.VALIDATION, "Must provide availability for all 7 days of the week")

    seen_days = set()
    parsed = []
    for window in windows:
        day = window.day_of_week
        if not isinstance(day, int) or not 0 <= day <= 6:
            raise DockSlotError(errors.VALIDATION, f"Invalid day of week: {day}")
        if day in seen_days:
            raise DockSlotError(errors.VALIDATION, f"Duplicate entry for {DAY_NAMES[day]}")
        seen_days.add(day)

        start = parse_time(window.start_time)
        end = parse_time(window.end_time)
        # inactive days may carry placeholder times
        if window.is_active:
            if start is None:
                raise DockSlotError(errors.VALIDATION, f"{DAY_NAMES[day]}: Invalid start time format")
            if end is None:
                raise DockSlotError(errors.VALIDATION, f"{DAY_NAMES[day]}: Invalid end time format")
            if end <= start:
                raise DockSlotError(errors.VALIDATION, f"{DAY_NAMES[day]}: End time must be after start time")
        parsed.append((day, start or DEFAULT_START_TIME, end or DEFAULT_END_TIME, window.is_active))
    return parsed


def get_availability_windows(db: Session, captain: Profile) -> List[AvailabilityWindow]:
    ensure_availability_exists(db, captain.id)
    return (
        db.query(AvailabilityWindow)
        .filter(AvailabilityWindow.owner_id == captain.id)
        .order_by(AvailabilityWindow.day_of_week.asc())
        .all()
    )


def upsert_availability_windows(
    db: Session, captain: Profile, windows: Sequence[AvailabilityWindowInput]
) -> List[AvailabilityWindow]:
    """Replace the whole week. Rows are keyed by (owner_id, day_of_week)."""
    parsed = _validate_week(windows)

    try:
        existing = {
            w.day_of_week: w
            for w in db.query(AvailabilityWindow).filter(AvailabilityWindow.owner_id == captain.id).all()
        }
        for day, start, end, is_active in parsed:
            row = existing.get(day)
            if row is None:
                row = AvailabilityWindow(owner_id=captain.id, day_of_week=day)
                db.add(row)
            row.start_time = start
            row.end_time = end
            row.is_active = is_active
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error upserting availability windows for captain %s", captain.id)
        raise DockSlotError(errors.UNKNOWN, "Failed to save availability windows")

    logger.info("Saved weekly availability for captain %s", captain.id)
    return (
        db.query(AvailabilityWindow)
        .filter(AvailabilityWindow.owner_id == captain.id)
        .order_by(AvailabilityWindow.day_of_week.asc())
        .all()
    )


def create_default_availability(db: Session, captain_id) -> List[AvailabilityWindow]:
    """Insert the default week, leaving days that already exist untouched."""
    captain_uuid = parse_uuid(captain_id)
    if captain_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid captain ID format")

    try:
        present = {
            row.day_of_week
            for row in db.query(AvailabilityWindow.day_of_week).filter(AvailabilityWindow.owner_id == captain_uuid)
        }
        created = []
        for day in range(7):
            if day in present:
                continue
            window = AvailabilityWindow(
                owner_id=captain_uuid,
                day_of_week=day,
                start_time=DEFAULT_START_TIME,
                end_time=DEFAULT_END_TIME,
                is_active=day in DEFAULT_ACTIVE_DAYS,
            )
            db.add(window)
            created.append(window)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating default availability for captain %s", captain_uuid)
        raise DockSlotError(errors.UNKNOWN, "Failed to create default availability windows")

    return created


def has_availability_windows(db: Session, captain_id) -> bool:
    try:
        return (
            db.query(AvailabilityWindow.id).filter(AvailabilityWindow.owner_id == captain_id).first()
            is not None
        )
    except SQLAlchemyError:
        logger.exception("Error checking availability windows for captain %s", captain_id)
        raise DockSlotError(errors.UNKNOWN, "Failed to check availability windows")


def ensure_availability_exists(db: Session, captain_id) -> bool:
    """Returns True when defaults had to be created."""
    if has_availability_windows(db, captain_id):
        return False
    create_default_availability(db, captain_id)
    logger.info("Created default availability for captain %s", captain_id)
    return True


# --------------------------
# Blackout dates
# --------------------------

def _sanitize_reason(reason) -> str | None:
    return sanitize_string(reason, 500) or None


def list_blackout_dates(db: Session, captain: Profile, start: date | None = None, end: date | None = None) -> List[BlackoutDate]:
    query = db.query(BlackoutDate).filter(BlackoutDate.owner_id == captain.id)
    if start:
        query = query.filter(BlackoutDate.blackout_date >= start)
    if end:
        query = query.filter(BlackoutDate.blackout_date <= end)
    return query.order_by(BlackoutDate.blackout_date.asc()).all()


def create_blackout_date(db: Session, captain: Profile, blackout_date: date, reason: str | None = None) -> BlackoutDate:
    existing = (
        db.query(BlackoutDate)
        .filter(BlackoutDate.owner_id == captain.id, BlackoutDate.blackout_date == blackout_date)
        .first()
    )
    if existing:
        raise DockSlotError(errors.DUPLICATE, "This date is already blocked")

    blackout = BlackoutDate(owner_id=captain.id, blackout_date=blackout_date, reason=_sanitize_reason(reason))
    db.add(blackout)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating blackout date for captain %s", captain.id)
        raise DockSlotError(errors.UNKNOWN, "Failed to create blackout date")
    db.refresh(blackout)
    return blackout


def create_blackout_range(
    db: Session, captain: Profile, start_date: date, end_date: date, reason: str | None = None
) -> List[BlackoutDate]:
    if start_date > end_date:
        raise DockSlotError(errors.VALIDATION, "Start date must be before or equal to end date")
    if (end_date - start_date).days > settings.max_blackout_range_days:
        raise DockSlotError(
            errors.VALIDATION, f"Date range cannot exceed {settings.max_blackout_range_days} days"
        )

    existing = {
        row.blackout_date
        for row in db.query(BlackoutDate.blackout_date).filter(
            BlackoutDate.owner_id == captain.id,
            BlackoutDate.blackout_date >= start_date,
            BlackoutDate.blackout_date <= end_date,
        )
    }
    sanitized = _sanitize_reason(reason)

    created = []
    current = start_date
    while current <= end_date:
        if current not in existing:
            created.append(BlackoutDate(owner_id=captain.id, blackout_date=current, reason=sanitized))
        current += timedelta(days=1)

    if not created:
        raise DockSlotError(errors.DUPLICATE, "All dates in range are already blocked")

    db.add_all(created)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating blackout range for captain %s", captain.id)
        raise DockSlotError(errors.UNKNOWN, "Failed to create blackout dates")
    for blackout in created:
        db.refresh(blackout)
    return created


def delete_blackout_date(db: Session, captain: Profile, blackout_id) -> None:
    blackout_uuid = parse_uuid(blackout_id)
    if blackout_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid blackout ID")

    blackout = db.query(BlackoutDate).filter(BlackoutDate.id == blackout_uuid).first()
    if not blackout:
        raise DockSlotError(errors.NOT_FOUND, "Blackout date not found")
    if blackout.owner_id != captain.id:
        raise DockSlotError(errors.UNAUTHORIZED, "Unauthorized access")

    db.delete(blackout)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting blackout date %s", blackout_uuid)
        raise DockSlotError(errors.UNKNOWN, "Failed to delete blackout date")
