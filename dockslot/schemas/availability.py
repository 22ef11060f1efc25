# dockslot/schemas/availability.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import time, date, datetime
from uuid import UUID


class AvailabilityWindowInput(BaseModel):
    day_of_week: int = Field(..., description="0=Sun, 1=Mon, …, 6=Sat")
    start_time: str = Field(..., description="HH:MM or HH:MM:SS")
    end_time: str = Field(..., description="HH:MM or HH:MM:SS")
    is_active: bool = True


class AvailabilityWindowResponse(BaseModel):
    id: UUID
    owner_id: UUID
    day_of_week: int
    start_time: time
    end_time: time
    is_active: bool

    class Config:
        from_attributes = True


class EnsureAvailabilityResponse(BaseModel):
    created: bool


class BlackoutDateCreate(BaseModel):
    blackout_date: date
    reason: Optional[str] = None


class BlackoutRangeCreate(BaseModel):
    start_date: date
    end_date: date
    reason: Optional[str] = None


class BlackoutDateResponse(BaseModel):
    id: UUID
    owner_id: UUID
    blackout_date: date
    reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# --- Public calendar ---
class TimeSlot(BaseModel):
    start_time: str  # HH:MM, captain local time
    end_time: str
    available: bool


class AvailabilityResult(BaseModel):
    date: str
    day_of_week: int
    is_blackout: bool
    blackout_reason: Optional[str] = None
    time_slots: List[TimeSlot] = []


class AvailableDate(BaseModel):
    date: str
    has_availability: bool
