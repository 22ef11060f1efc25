"""
Captain accounts, settings and the public views of a captain.
"""
from __future__ import annotations

import logging
from typing import Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dockslot.config import settings
from dockslot.core import errors
from dockslot.core.errors import DockSlotError
from dockslot.core.security import generate_api_token, hash_token
from dockslot.core.timeutils import is_valid_timezone
from dockslot.core.validation import parse_uuid
from dockslot.db.models.profile import Profile
from dockslot.schemas.profile import CaptainRegister, CaptainSettingsUpdate, HibernationInfo
from dockslot.services.schedule import ensure_availability_exists

logger = logging.getLogger(__name__)

# an explicit null leaves these unchanged
NOT_NULL_SETTINGS = (
    "timezone",
    "booking_buffer_minutes",
    "advance_booking_days",
    "is_hibernating",
    "hibernation_show_return_date",
    "hibernation_show_contact_info",
)


def register_captain(db: Session, data: CaptainRegister) -> Tuple[Profile, str]:
    """Create the profile and its default week. Returns the plain API token once."""
    email = data.email.strip().lower()
    if db.query(Profile).filter(Profile.email == email).first():
        raise DockSlotError(errors.DUPLICATE, "Email already registered")

    timezone_name = data.timezone or settings.default_timezone
    if not is_valid_timezone(timezone_name):
        raise DockSlotError(errors.VALIDATION, f"Unknown timezone: {timezone_name}")

    token = generate_api_token()
    captain = Profile(
        email=email,
        full_name=data.full_name.strip(),
        business_name=data.business_name,
        phone=data.phone,
        timezone=timezone_name,
        booking_buffer_minutes=settings.default_booking_buffer_minutes,
        advance_booking_days=settings.default_advance_booking_days,
        api_token_hash=hash_token(token),
    )
    db.add(captain)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to register captain %s", email)
        raise DockSlotError(errors.DATABASE, "Failed to create captain")
    db.refresh(captain)

    ensure_availability_exists(db, captain.id)
    logger.info("Registered captain %s", captain.id)
    return captain, token


def update_settings(db: Session, captain: Profile, data: CaptainSettingsUpdate) -> Profile:
    changes = data.model_dump(exclude_unset=True)

    if "timezone" in changes and not is_valid_timezone(changes["timezone"]):
        raise DockSlotError(errors.VALIDATION, f"Unknown timezone: {changes['timezone']}")
    buffer_minutes = changes.get("booking_buffer_minutes")
    if buffer_minutes is not None and not 0 <= buffer_minutes <= 7 * 24 * 60:
        raise DockSlotError(errors.VALIDATION, "Booking buffer must be between 0 minutes and 7 days")
    advance_days = changes.get("advance_booking_days")
    if advance_days is not None and not 1 <= advance_days <= 730:
        raise DockSlotError(errors.VALIDATION, "Advance booking window must be between 1 and 730 days")

    for field, value in changes.items():
        if field in NOT_NULL_SETTINGS and value is None:
            continue
        setattr(captain, field, value)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update settings for captain %s", captain.id)
        raise DockSlotError(errors.DATABASE, "Failed to update settings")
    db.refresh(captain)
    return captain


def _get_captain(db: Session, captain_id) -> Profile:
    captain_uuid = parse_uuid(captain_id)
    if captain_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid captain ID")
    captain = db.query(Profile).filter(Profile.id == captain_uuid).first()
    if not captain:
        raise DockSlotError(errors.NOT_FOUND, "Captain not found")
    return captain


def get_public_profile(db: Session, captain_id) -> Profile:
    captain = _get_captain(db, captain_id)
    if captain.is_hibernating:
        raise DockSlotError(
            errors.HIBERNATING,
            captain.hibernation_message or "This captain is not currently accepting bookings",
        )
    return captain


def get_hibernation_info(db: Session, captain_id) -> HibernationInfo:
    captain = _get_captain(db, captain_id)
    if not captain.is_hibernating:
        raise DockSlotError(errors.VALIDATION, "Captain is accepting bookings")

    show_contact = captain.hibernation_show_contact_info
    return HibernationInfo(
        id=captain.id,
        business_name=captain.business_name,
        full_name=captain.full_name,
        email=captain.email if show_contact else None,
        phone=captain.phone if show_contact else None,
        timezone=captain.timezone,
        hibernation_message=captain.hibernation_message,
        hibernation_end_date=captain.hibernation_end_date if captain.hibernation_show_return_date else None,
    )
