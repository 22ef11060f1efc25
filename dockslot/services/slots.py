"""
Slot generation for the public booking calendar.

A captain's day is described by recurring weekly windows, optional blackout
dates and the bookings that already hold time. For a requested date and trip
type, the calendar is the list of fixed-length slots that fit inside an
active window, each flagged as available or not.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dockslot.config import settings
from dockslot.core import errors
from dockslot.core.errors import DockSlotError
from dockslot.core.timeutils import (
    as_utc,
    create_timestamp,
    day_bounds,
    day_of_week,
    format_hhmm,
    local_today,
    overlaps,
    resolve_timezone,
    utcnow,
)
from dockslot.core.validation import parse_date, parse_time, parse_uuid
from dockslot.db.models.availability import AvailabilityWindow, BlackoutDate
from dockslot.db.models.booking import ACTIVE_BOOKING_STATUSES, Booking
from dockslot.db.models.profile import Profile
from dockslot.db.models.trip_type import TripType
from dockslot.schemas.availability import AvailabilityResult, AvailableDate, TimeSlot

logger = logging.getLogger(__name__)

Interval = Tuple[datetime, datetime]


def generate_time_slots(
    windows: Iterable,
    duration_hours: float,
    target_date: date,
    tz: ZoneInfo,
    busy: Sequence[Interval],
    buffer_minutes: int,
    now: datetime,
    interval_minutes: Optional[int] = None,
) -> List[TimeSlot]:
    """
    Walk each window from its start in fixed steps and emit every slot of
    `duration_hours` that ends inside the window.

    windows: objects with start_time / end_time (time or "HH:MM[:SS]")
    busy: (start, end) UTC instants of bookings that hold time
    A slot is unavailable if it overlaps a busy interval or starts before
    now + buffer_minutes.
    """
    step = timedelta(minutes=interval_minutes or settings.slot_interval_minutes)
    duration = timedelta(hours=float(duration_hours))
    earliest_start = as_utc(now) + timedelta(minutes=buffer_minutes or 0)

    slots: List[TimeSlot] = []
    seen = set()

    if duration <= timedelta(0):
        return slots

    for window in windows:
        start_t = parse_time(window.start_time)
        end_t = parse_time(window.end_time)
        if start_t is None or end_t is None:
            logger.warning("Skipping window with malformed times %r-%r", window.start_time, window.end_time)
            continue

        window_end = datetime.combine(target_date, end_t)
        current = datetime.combine(target_date, start_t)

        # walk stays on the target day
        while current.date() == target_date:
            if current + duration > window_end:
                break

            slot_start = create_timestamp(target_date, current.time(), tz)
            slot_end = slot_start + duration

            available = slot_start >= earliest_start
            if available:
                for busy_start, busy_end in busy:
                    if overlaps(slot_start, slot_end, busy_start, busy_end):
                        available = False
                        break

            label = format_hhmm(current)
            if label not in seen:
                seen.add(label)
                slots.append(
                    TimeSlot(
                        start_time=label,
                        end_time=format_hhmm(slot_end.astimezone(tz)),
                        available=available,
                    )
                )

            current += step

    return slots


def load_busy_intervals(db: Session, captain_id, target_date: date, tz: ZoneInfo) -> List[Interval]:
    day_start, day_end = day_bounds(target_date, tz)
    rows = (
        db.query(Booking.scheduled_start, Booking.scheduled_end)
        .filter(
            Booking.captain_id == captain_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.scheduled_start < day_end,
            Booking.scheduled_end > day_start,
        )
        .all()
    )
    return [(as_utc(start), as_utc(end)) for start, end in rows]


def get_profile_or_404(db: Session, captain_id, lock: bool = False) -> Profile:
    query = db.query(Profile).filter(Profile.id == captain_id)
    if lock:
        query = query.with_for_update()
    profile = query.first()
    if not profile:
        raise DockSlotError(errors.NOT_FOUND, "Captain not found")
    return profile


def get_trip_type_or_404(db: Session, captain_id, trip_type_id) -> TripType:
    trip_type = (
        db.query(TripType)
        .filter(TripType.id == trip_type_id, TripType.owner_id == captain_id, TripType.is_active == True)
        .first()
    )
    if not trip_type:
        raise DockSlotError(errors.NOT_FOUND, "Trip type not found")
    return trip_type


def ensure_accepting_bookings(profile: Profile) -> None:
    if profile.is_hibernating:
        raise DockSlotError(errors.HIBERNATING, "Captain is not accepting bookings")


def advance_booking_days(profile: Profile) -> int:
    if profile.advance_booking_days is None:
        return settings.default_advance_booking_days
    return profile.advance_booking_days


def check_booking_window(profile: Profile, target_date: date, tz: ZoneInfo, now: datetime) -> None:
    today = local_today(tz, now)
    if target_date < today:
        raise DockSlotError(errors.UNAVAILABLE, "Cannot book dates in the past")

    advance_days = advance_booking_days(profile)
    if target_date > today + timedelta(days=advance_days):
        raise DockSlotError(
            errors.UNAVAILABLE,
            f"Bookings can only be made up to {advance_days} days in advance",
        )


def availability_for_date(
    db: Session,
    profile: Profile,
    trip_type: TripType,
    target_date: date,
    now: Optional[datetime] = None,
) -> AvailabilityResult:
    """Slots for an already-resolved captain and trip type."""
    now = now or utcnow()
    tz = resolve_timezone(profile.timezone)
    dow = day_of_week(target_date)
    date_str = target_date.isoformat()

    ensure_accepting_bookings(profile)
    check_booking_window(profile, target_date, tz, now)

    blackout = (
        db.query(BlackoutDate)
        .filter(BlackoutDate.owner_id == profile.id, BlackoutDate.blackout_date == target_date)
        .first()
    )
    if blackout:
        return AvailabilityResult(
            date=date_str,
            day_of_week=dow,
            is_blackout=True,
            blackout_reason=blackout.reason,
            time_slots=[],
        )

    windows = (
        db.query(AvailabilityWindow)
        .filter(
            AvailabilityWindow.owner_id == profile.id,
            AvailabilityWindow.day_of_week == dow,
            AvailabilityWindow.is_active == True,
        )
        .order_by(AvailabilityWindow.start_time)
        .all()
    )
    if not windows:
        return AvailabilityResult(date=date_str, day_of_week=dow, is_blackout=False, time_slots=[])

    busy = load_busy_intervals(db, profile.id, target_date, tz)
    buffer_minutes = profile.booking_buffer_minutes
    if buffer_minutes is None:
        buffer_minutes = settings.default_booking_buffer_minutes

    time_slots = generate_time_slots(
        windows,
        trip_type.duration_hours,
        target_date,
        tz,
        busy,
        buffer_minutes,
        now,
    )
    return AvailabilityResult(date=date_str, day_of_week=dow, is_blackout=False, time_slots=time_slots)


def compute_availability(
    db: Session,
    captain_id,
    trip_type_id,
    date_str,
    now: Optional[datetime] = None,
) -> AvailabilityResult:
    captain_uuid = parse_uuid(captain_id)
    if captain_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid captain ID")
    trip_type_uuid = parse_uuid(trip_type_id)
    if trip_type_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid trip type ID")
    target_date = parse_date(date_str)
    if target_date is None:
        raise DockSlotError(errors.VALIDATION, "Invalid date format")

    try:
        profile = get_profile_or_404(db, captain_uuid)
        ensure_accepting_bookings(profile)
        trip_type = get_trip_type_or_404(db, captain_uuid, trip_type_uuid)
        return availability_for_date(db, profile, trip_type, target_date, now)
    except SQLAlchemyError:
        logger.exception("Failed to compute availability for captain %s", captain_uuid)
        raise DockSlotError(errors.DATABASE, "Failed to fetch availability")


def get_available_dates(db: Session, captain_id, days: int = 60, now: Optional[datetime] = None) -> List[AvailableDate]:
    """Coarse per-day view: an active weekday window and no blackout."""
    captain_uuid = parse_uuid(captain_id)
    if captain_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid captain ID")
    if days < 0:
        raise DockSlotError(errors.VALIDATION, "days must not be negative")

    try:
        profile = get_profile_or_404(db, captain_uuid)
        ensure_accepting_bookings(profile)

        tz = resolve_timezone(profile.timezone)
        today = local_today(tz, now)
        max_days = min(days, advance_booking_days(profile))
        last = today + timedelta(days=max_days)

        active_days = {
            row.day_of_week
            for row in db.query(AvailabilityWindow.day_of_week).filter(
                AvailabilityWindow.owner_id == captain_uuid,
                AvailabilityWindow.is_active == True,
            )
        }
        blackouts = {
            row.blackout_date
            for row in db.query(BlackoutDate.blackout_date).filter(
                BlackoutDate.owner_id == captain_uuid,
                BlackoutDate.blackout_date >= today,
                BlackoutDate.blackout_date <= last,
            )
        }
    except SQLAlchemyError:
        logger.exception("Failed to list available dates for captain %s", captain_uuid)
        raise DockSlotError(errors.DATABASE, "Failed to fetch availability")

    result = []
    for offset in range(max_days + 1):
        current = today + timedelta(days=offset)
        result.append(
            AvailableDate(
                date=current.isoformat(),
                has_availability=day_of_week(current) in active_days and current not in blackouts,
            )
        )
    return result
