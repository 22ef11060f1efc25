# dockslot/api/routes/trip_types.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dockslot.db.base import get_db
from dockslot.db.models.profile import Profile
from dockslot.schemas.trip_type import (
    TripTypeCreate,
    TripTypeDeleteResult,
    TripTypeResponse,
    TripTypeUpdate,
)
from dockslot.core.security import get_current_captain
from dockslot.services import trip_types as trip_type_service


router = APIRouter(prefix="/trip-types", tags=["trip-types"])

# Captain creates trip type

@router.post("", response_model=TripTypeResponse, status_code=201)
def create_trip_type(
    payload: TripTypeCreate,
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return trip_type_service.create_trip_type(db, current_captain, payload)


# Captain views their trip types

@router.get("", response_model=list[TripTypeResponse])
def get_my_trip_types(
    include_archived: bool = Query(False),
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return trip_type_service.list_trip_types(db, current_captain, include_archived)


# Captain updates a trip type

@router.put("/{trip_type_id}", response_model=TripTypeResponse)
def update_trip_type(
    trip_type_id: str,
    payload: TripTypeUpdate,
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return trip_type_service.update_trip_type(db, current_captain, trip_type_id, payload)


# Captain deletes a trip type (archived when bookings reference it)

@router.delete("/{trip_type_id}", response_model=TripTypeDeleteResult)
def delete_trip_type(
    trip_type_id: str,
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return trip_type_service.delete_trip_type(db, current_captain, trip_type_id)


@router.post("/{trip_type_id}/restore", response_model=TripTypeResponse)
def restore_trip_type(
    trip_type_id: str,
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return trip_type_service.restore_trip_type(db, current_captain, trip_type_id)
