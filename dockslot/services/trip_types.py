"""
Captain trip types. A trip type that any booking references is archived
instead of deleted so historical bookings stay valid.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dockslot.core import errors
from dockslot.core.errors import DockSlotError
from dockslot.core.validation import parse_uuid, sanitize_string
from dockslot.db.models.booking import Booking
from dockslot.db.models.profile import Profile
from dockslot.db.models.trip_type import TripType
from dockslot.schemas.trip_type import TripTypeCreate, TripTypeDeleteResult, TripTypeUpdate

logger = logging.getLogger(__name__)


def _check_values(title: Optional[str], duration_hours: float, price_total: float, deposit_amount: float) -> None:
    if title is not None and not sanitize_string(title, 200):
        raise DockSlotError(errors.VALIDATION, "Title is required")
    if duration_hours is None or duration_hours <= 0 or duration_hours > 24:
        raise DockSlotError(errors.VALIDATION, "Duration must be between 0 and 24 hours")
    if price_total is None or price_total < 0:
        raise DockSlotError(errors.VALIDATION, "Price must not be negative")
    if deposit_amount is None or deposit_amount < 0 or deposit_amount > price_total:
        raise DockSlotError(errors.VALIDATION, "Deposit must be between 0 and the total price")


def _get_owned(db: Session, captain: Profile, trip_type_id) -> TripType:
    trip_uuid = parse_uuid(trip_type_id)
    if trip_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid trip type ID")
    trip_type = db.query(TripType).filter(TripType.id == trip_uuid).first()
    if not trip_type:
        raise DockSlotError(errors.NOT_FOUND, "Trip type not found")
    if trip_type.owner_id != captain.id:
        raise DockSlotError(errors.UNAUTHORIZED, "You cannot modify another captain's trip type")
    return trip_type


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to %s trip type", action)
        raise DockSlotError(errors.UNKNOWN, f"Failed to {action} trip type")


def create_trip_type(db: Session, captain: Profile, data: TripTypeCreate) -> TripType:
    _check_values(data.title, data.duration_hours, data.price_total, data.deposit_amount)

    trip_type = TripType(
        owner_id=captain.id,
        title=sanitize_string(data.title, 200),
        description=sanitize_string(data.description, 2000) or None,
        duration_hours=data.duration_hours,
        price_total=data.price_total,
        deposit_amount=data.deposit_amount,
        is_active=True,
    )
    db.add(trip_type)
    _commit(db, "create")
    db.refresh(trip_type)
    return trip_type


def list_trip_types(db: Session, captain: Profile, include_archived: bool = False) -> List[TripType]:
    query = db.query(TripType).filter(TripType.owner_id == captain.id)
    if not include_archived:
        query = query.filter(TripType.is_active == True)
    return query.order_by(TripType.price_total.asc()).all()


def list_public_trip_types(db: Session, captain_id) -> List[TripType]:
    return (
        db.query(TripType)
        .filter(TripType.owner_id == captain_id, TripType.is_active == True)
        .order_by(TripType.price_total.asc())
        .all()
    )


def update_trip_type(db: Session, captain: Profile, trip_type_id, data: TripTypeUpdate) -> TripType:
    trip_type = _get_owned(db, captain, trip_type_id)
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field == "description"
    }

    _check_values(
        changes.get("title"),
        changes.get("duration_hours", trip_type.duration_hours),
        changes.get("price_total", trip_type.price_total),
        changes.get("deposit_amount", trip_type.deposit_amount),
    )

    # Update fields one-by-one
    for field, value in changes.items():
        setattr(trip_type, field, value)

    _commit(db, "update")
    db.refresh(trip_type)
    return trip_type


def delete_trip_type(db: Session, captain: Profile, trip_type_id) -> TripTypeDeleteResult:
    trip_type = _get_owned(db, captain, trip_type_id)

    # any booking, whatever its status, keeps the row alive
    referenced = db.query(Booking.id).filter(Booking.trip_type_id == trip_type.id).first() is not None
    if referenced:
        trip_type.is_active = False
        _commit(db, "archive")
        logger.info("Archived trip type %s (has bookings)", trip_type.id)
        return TripTypeDeleteResult(deleted=True, archived=True)

    db.delete(trip_type)
    _commit(db, "delete")
    logger.info("Deleted trip type %s", trip_type_id)
    return TripTypeDeleteResult(deleted=True, archived=False)


def restore_trip_type(db: Session, captain: Profile, trip_type_id) -> TripType:
    trip_type = _get_owned(db, captain, trip_type_id)
    trip_type.is_active = True
    _commit(db, "restore")
    db.refresh(trip_type)
    return trip_type
