# dockslot/api/routes/availability.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from dockslot.db.base import get_db
from dockslot.db.models.profile import Profile
from dockslot.schemas.availability import (
    AvailabilityWindowInput,
    AvailabilityWindowResponse,
    BlackoutDateCreate,
    BlackoutDateResponse,
    BlackoutRangeCreate,
    EnsureAvailabilityResponse,
)
from dockslot.core.security import get_current_captain
from dockslot.services import schedule

router = APIRouter(prefix="/availability", tags=["availability"])


# Captain weekly windows

@router.get("/weekly", response_model=List[AvailabilityWindowResponse])
def list_weekly_availability(db: Session = Depends(get_db), current_captain: Profile = Depends(get_current_captain)):
    return schedule.get_availability_windows(db, current_captain)


@router.put("/weekly", response_model=List[AvailabilityWindowResponse])
def save_weekly_availability(
    payload: List[AvailabilityWindowInput],
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    # all 7 days at once
    return schedule.upsert_availability_windows(db, current_captain, payload)


@router.post("/weekly/defaults", response_model=EnsureAvailabilityResponse)
def ensure_weekly_defaults(db: Session = Depends(get_db), current_captain: Profile = Depends(get_current_captain)):
    created = schedule.ensure_availability_exists(db, current_captain.id)
    return {"created": created}


# Captain blackout dates

@router.get("/blackouts", response_model=List[BlackoutDateResponse])
def list_blackouts(
    start: Optional[date] = Query(None, description="first date, YYYY-MM-DD"),
    end: Optional[date] = Query(None, description="last date, YYYY-MM-DD"),
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return schedule.list_blackout_dates(db, current_captain, start, end)


@router.post("/blackouts", response_model=BlackoutDateResponse, status_code=201)
def add_blackout(
    payload: BlackoutDateCreate,
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return schedule.create_blackout_date(db, current_captain, payload.blackout_date, payload.reason)


@router.post("/blackouts/range", response_model=List[BlackoutDateResponse], status_code=201)
def add_blackout_range(
    payload: BlackoutRangeCreate,
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return schedule.create_blackout_range(db, current_captain, payload.start_date, payload.end_date, payload.reason)


@router.delete("/blackouts/{blackout_id}")
def remove_blackout(
    blackout_id: str,
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    schedule.delete_blackout_date(db, current_captain, blackout_id)
    return {"success": True}
