from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from dockslot.db.base import get_db
from dockslot.db.models.profile import Profile
from dockslot.schemas.booking import BookingResponse, BookingStatusUpdate
from dockslot.core.security import get_current_captain
from dockslot.services import bookings as booking_service

router = APIRouter(prefix="/bookings", tags=["bookings"])


# Captain views their bookings

@router.get("/captain/me", response_model=list[BookingResponse])
def captain_my_bookings(
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return booking_service.list_captain_bookings(db, current_captain, status)


# Captain moves a booking through its lifecycle

@router.post("/{booking_id}/status", response_model=BookingResponse)
def change_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return booking_service.update_booking_status(db, current_captain, booking_id, payload.status, payload.note)
