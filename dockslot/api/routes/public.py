# dockslot/api/routes/public.py
# Guest-facing routes; no authentication.
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from dockslot.core import errors
from dockslot.core.errors import DockSlotError
from dockslot.core.validation import parse_uuid
from dockslot.db.base import get_db
from dockslot.schemas.availability import AvailabilityResult, AvailableDate
from dockslot.schemas.booking import GuestBookingView, PublicBookingCreate, PublicBookingResult
from dockslot.schemas.profile import HibernationInfo, PublicCaptainProfile
from dockslot.schemas.trip_type import PublicTripType
from dockslot.services import bookings as booking_service
from dockslot.services import captains as captain_service
from dockslot.services import slots
from dockslot.services import trip_types as trip_type_service

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/captains/{captain_id}", response_model=PublicCaptainProfile)
def public_captain_profile(captain_id: str, db: Session = Depends(get_db)):
    return captain_service.get_public_profile(db, captain_id)


@router.get("/captains/{captain_id}/hibernation", response_model=HibernationInfo)
def hibernation_info(captain_id: str, db: Session = Depends(get_db)):
    return captain_service.get_hibernation_info(db, captain_id)


@router.get("/captains/{captain_id}/trip-types", response_model=List[PublicTripType])
def public_trip_types(captain_id: str, db: Session = Depends(get_db)):
    captain = captain_service.get_public_profile(db, captain_id)
    return trip_type_service.list_public_trip_types(db, captain.id)


@router.get("/captains/{captain_id}/trip-types/{trip_type_id}", response_model=PublicTripType)
def public_trip_type(captain_id: str, trip_type_id: str, db: Session = Depends(get_db)):
    captain_uuid = parse_uuid(captain_id)
    if captain_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid captain ID")
    trip_type_uuid = parse_uuid(trip_type_id)
    if trip_type_uuid is None:
        raise DockSlotError(errors.VALIDATION, "Invalid trip type ID")
    return slots.get_trip_type_or_404(db, captain_uuid, trip_type_uuid)


@router.get("/captains/{captain_id}/trip-types/{trip_type_id}/availability", response_model=AvailabilityResult)
def trip_availability(
    captain_id: str,
    trip_type_id: str,
    date: str = Query(..., description="date in YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    return slots.compute_availability(db, captain_id, trip_type_id, date)


@router.get("/captains/{captain_id}/available-dates", response_model=List[AvailableDate])
def available_dates(
    captain_id: str,
    days: int = Query(60, ge=0, le=730),
    db: Session = Depends(get_db),
):
    return slots.get_available_dates(db, captain_id, days)


@router.post("/bookings", response_model=PublicBookingResult, status_code=201)
def create_booking(payload: PublicBookingCreate, db: Session = Depends(get_db)):
    return booking_service.create_public_booking(db, payload)


@router.get("/bookings/{token}", response_model=GuestBookingView)
def guest_booking(token: str, db: Session = Depends(get_db)):
    return booking_service.get_booking_for_guest(db, token)
