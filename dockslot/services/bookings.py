"""
Booking creation from the public form, guest lookup and captain status changes.
"""
from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dockslot.config import settings
from dockslot.core import errors
from dockslot.core.errors import DockSlotError
from dockslot.core.timeutils import as_utc, create_timestamp, format_hhmm, resolve_timezone, utcnow
from dockslot.core.validation import (
    is_valid_email,
    is_valid_party_size,
    is_valid_phone,
    normalize_email,
    parse_date,
    parse_time,
    parse_uuid,
    sanitize_name,
    sanitize_notes,
)
from dockslot.db.models.booking import (
    ACTIVE_BOOKING_STATUSES,
    BOOKING_STATUSES,
    VALID_TRANSITIONS,
    Booking,
    BookingLog,
    GuestToken,
    Passenger,
)
from dockslot.db.models.profile import Profile
from dockslot.schemas.booking import (
    GuestBookingView,
    PassengerResponse,
    PublicBookingCreate,
    PublicBookingResult,
)
from dockslot.services.slots import (
    availability_for_date,
    ensure_accepting_bookings,
    get_profile_or_404,
    get_trip_type_or_404,
)

logger = logging.getLogger(__name__)

# no 0/O or 1/I
CONFIRMATION_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
TOKEN_ALPHABET = string.ascii_letters + string.digits

SLOT_INDEX_NAME = "uq_bookings_active_slot"


def generate_confirmation_code(length: int = 6) -> str:
    return "".join(secrets.choice(CONFIRMATION_ALPHABET) for _ in range(length))


def generate_guest_token(length: int = 32) -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def to_cents(amount) -> int:
    return int((Decimal(str(amount or 0)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_slot_conflict(exc: IntegrityError) -> bool:
    """True when the active-slot unique index rejected the insert."""
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag is not None else None
    if constraint_name:
        return constraint_name == SLOT_INDEX_NAME

    text = str(orig if orig is not None else exc)
    # SQLite names the columns instead of the index
    return SLOT_INDEX_NAME in text or "bookings.captain_id, bookings.scheduled_start" in text


def has_overlapping_booking(db: Session, captain_id, start: datetime, end: datetime) -> bool:
    return (
        db.query(Booking.id)
        .filter(
            Booking.captain_id == captain_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.scheduled_start < end,
            Booking.scheduled_end > start,
        )
        .first()
        is not None
    )


def validate_booking_request(params: PublicBookingCreate) -> None:
    """Field checks that need no datastore round trip."""
    if parse_uuid(params.captain_id) is None:
        raise DockSlotError(errors.VALIDATION, "Invalid captain ID")
    if parse_uuid(params.trip_type_id) is None:
        raise DockSlotError(errors.VALIDATION, "Invalid trip type ID")
    if parse_date(params.scheduled_date) is None:
        raise DockSlotError(errors.VALIDATION, "Invalid date format")
    start_time = parse_time(params.scheduled_time)
    # slots start on whole minutes
    if start_time is None or start_time.second or start_time.microsecond:
        raise DockSlotError(errors.VALIDATION, "Invalid time format")
    if not sanitize_name(params.guest_name):
        raise DockSlotError(errors.VALIDATION, "Guest name is required")
    if not is_valid_email(params.guest_email):
        raise DockSlotError(errors.VALIDATION, "Valid email is required")
    if params.guest_phone and not is_valid_phone(params.guest_phone):
        raise DockSlotError(errors.VALIDATION, "Invalid phone number format")
    if not is_valid_party_size(params.party_size, settings.max_party_size):
        raise DockSlotError(errors.CAPACITY, f"Party size must be between 1 and {settings.max_party_size}")

    for index, passenger in enumerate(params.passengers or [], start=1):
        if not sanitize_name(passenger.full_name):
            raise DockSlotError(errors.VALIDATION, f"Passenger {index}: name is required")
        if passenger.email and not is_valid_email(passenger.email):
            raise DockSlotError(errors.VALIDATION, f"Passenger {index}: invalid email")
        if passenger.phone and not is_valid_phone(passenger.phone):
            raise DockSlotError(errors.VALIDATION, f"Passenger {index}: invalid phone number format")


def create_public_booking(
    db: Session,
    params: PublicBookingCreate,
    now: Optional[datetime] = None,
) -> PublicBookingResult:
    """
    Re-check the requested slot and write the booking with its guest token,
    passengers and audit entry in one transaction.

    The captain row is locked before the re-check so concurrent bookings for
    the same captain are serialised. Just before the insert, any active
    booking overlapping the requested range rejects the request, and the
    active-slot unique index rejects a second booking at the same start
    where row locks are not available.
    """
    validate_booking_request(params)

    captain_id = parse_uuid(params.captain_id)
    trip_type_id = parse_uuid(params.trip_type_id)
    target_date = parse_date(params.scheduled_date)
    start_time = parse_time(params.scheduled_time)
    requested_label = format_hhmm(start_time)

    try:
        profile = get_profile_or_404(db, captain_id, lock=True)
        ensure_accepting_bookings(profile)
        trip_type = get_trip_type_or_404(db, captain_id, trip_type_id)

        tz = resolve_timezone(profile.timezone)
        scheduled_start = create_timestamp(target_date, start_time, tz)
        scheduled_end = scheduled_start + timedelta(hours=float(trip_type.duration_hours))

        # Verify availability one more time
        availability = availability_for_date(db, profile, trip_type, target_date, now)
        slot = next(
            (s for s in availability.time_slots if s.start_time == requested_label and s.available),
            None,
        )
        if slot is None:
            raise DockSlotError(errors.UNAVAILABLE, errors.MSG_SLOT_TAKEN)

        # last look at the range, inside this transaction, right before the insert
        if has_overlapping_booking(db, captain_id, scheduled_start, scheduled_end):
            raise DockSlotError(errors.UNAVAILABLE, errors.MSG_SLOT_TAKEN)

        confirmation_code = generate_confirmation_code()
        guest_token = generate_guest_token()
        total_price_cents = to_cents(trip_type.price_total)
        deposit_amount_cents = to_cents(trip_type.deposit_amount)

        guest_name = sanitize_name(params.guest_name)
        guest_email = normalize_email(params.guest_email)
        guest_phone = (params.guest_phone or "").strip() or None

        booking = Booking(
            captain_id=captain_id,
            trip_type_id=trip_type_id,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_phone=guest_phone,
            party_size=params.party_size,
            special_requests=sanitize_notes(params.special_requests) or None,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
            status="pending_deposit",
            payment_status="unpaid",
            confirmation_code=confirmation_code,
            total_price_cents=total_price_cents,
            deposit_paid_cents=0,
            balance_due_cents=total_price_cents,
        )
        db.add(booking)
        db.flush()

        db.add(
            GuestToken(
                booking_id=booking.id,
                token=guest_token,
                expires_at=scheduled_start + timedelta(days=settings.guest_token_ttl_days),
            )
        )

        # primary contact first, then the rest of the party
        db.add(
            Passenger(
                booking_id=booking.id,
                full_name=guest_name,
                email=guest_email,
                phone=guest_phone,
                is_primary_contact=True,
            )
        )
        for passenger in params.passengers or []:
            db.add(
                Passenger(
                    booking_id=booking.id,
                    full_name=sanitize_name(passenger.full_name),
                    email=normalize_email(passenger.email),
                    phone=(passenger.phone or "").strip() or None,
                    is_primary_contact=False,
                )
            )

        db.add(
            BookingLog(
                booking_id=booking.id,
                entry_type="booking_created",
                description="Booking created via public booking form",
                actor_type="guest",
            )
        )
        db.commit()
    except DockSlotError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        if is_slot_conflict(exc):
            logger.info("Slot %s %s already taken for captain %s", params.scheduled_date, requested_label, captain_id)
            raise DockSlotError(errors.UNAVAILABLE, errors.MSG_SLOT_TAKEN)
        logger.exception("Failed to create booking for captain %s", captain_id)
        raise DockSlotError(errors.DATABASE, "Failed to create booking")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create booking for captain %s", captain_id)
        raise DockSlotError(errors.DATABASE, "Failed to create booking")

    logger.info("Booking %s created for captain %s at %s", booking.id, captain_id, scheduled_start.isoformat())

    return PublicBookingResult(
        booking_id=booking.id,
        confirmation_code=confirmation_code,
        guest_token=guest_token,
        scheduled_start=scheduled_start,
        scheduled_end=scheduled_end,
        total_price_cents=total_price_cents,
        deposit_amount_cents=deposit_amount_cents,
    )


def get_booking_for_guest(db: Session, token: str, now: Optional[datetime] = None) -> GuestBookingView:
    if not token or len(token) != 32 or not token.isalnum():
        raise DockSlotError(errors.NOT_FOUND, "Booking not found")

    try:
        guest_token = db.query(GuestToken).filter(GuestToken.token == token).first()
        if not guest_token or as_utc(guest_token.expires_at) < as_utc(now or utcnow()):
            raise DockSlotError(errors.NOT_FOUND, "Booking not found")

        booking = guest_token.booking
        captain = booking.captain
        trip_title = booking.trip_type.title
        passengers = [PassengerResponse.model_validate(p) for p in booking.passengers]
    except SQLAlchemyError:
        logger.exception("Failed to load guest booking")
        raise DockSlotError(errors.DATABASE, "Failed to fetch booking")

    return GuestBookingView(
        booking_id=booking.id,
        confirmation_code=booking.confirmation_code,
        status=booking.status,
        trip_title=trip_title,
        scheduled_start=as_utc(booking.scheduled_start),
        scheduled_end=as_utc(booking.scheduled_end),
        party_size=booking.party_size,
        total_price_cents=booking.total_price_cents,
        balance_due_cents=booking.balance_due_cents,
        captain_name=captain.business_name or captain.full_name,
        meeting_spot_name=captain.meeting_spot_name,
        meeting_spot_address=captain.meeting_spot_address,
        passengers=passengers,
    )


def list_captain_bookings(db: Session, captain: Profile, status: Optional[str] = None) -> List[Booking]:
    query = db.query(Booking).filter(Booking.captain_id == captain.id)
    if status:
        if status not in BOOKING_STATUSES:
            raise DockSlotError(errors.VALIDATION, f"Unknown status: {status}")
        query = query.filter(Booking.status == status)
    return query.order_by(Booking.scheduled_start.asc()).all()


def update_booking_status(db: Session, captain: Profile, booking_id, new_status: str, note: Optional[str] = None) -> Booking:
    booking_uuid = parse_uuid(booking_id)
    if booking_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid booking ID")
    if new_status not in BOOKING_STATUSES:
        raise DockSlotError(errors.VALIDATION, f"Unknown status: {new_status}")

    booking = db.query(Booking).filter(Booking.id == booking_uuid).first()
    if not booking:
        raise DockSlotError(errors.NOT_FOUND, "Booking not found")
    if booking.captain_id != captain.id:
        raise DockSlotError(errors.UNAUTHORIZED, "Not your booking")

    old_status = booking.status
    if new_status not in VALID_TRANSITIONS.get(old_status, ()):
        raise DockSlotError(errors.VALIDATION, f"Cannot change booking from {old_status} to {new_status}")

    booking.status = new_status
    description = f"Status changed from {old_status} to {new_status}"
    if note:
        description = f"{description}: {sanitize_notes(note)}"
    db.add(
        BookingLog(
            booking_id=booking.id,
            entry_type="status_changed",
            description=description,
            actor_type="captain",
            actor_id=captain.id,
        )
    )

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update booking %s", booking_uuid)
        raise DockSlotError(errors.DATABASE, "Failed to update booking")

    db.refresh(booking)
    logger.info("Booking %s: %s -> %s", booking.id, old_status, new_status)
    return booking
