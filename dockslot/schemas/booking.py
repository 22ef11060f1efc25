from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from dockslot.core.timeutils import as_utc


class PassengerInput(BaseModel):
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None


# --- CREATE (public booking form) ---
class PublicBookingCreate(BaseModel):
    captain_id: str
    trip_type_id: str
    scheduled_date: str = Field(..., description="YYYY-MM-DD in the captain's timezone")
    scheduled_time: str = Field(..., description="HH:MM in the captain's timezone")
    guest_name: str
    guest_email: str
    guest_phone: Optional[str] = None
    party_size: int
    passengers: List[PassengerInput] = []
    special_requests: Optional[str] = None


class PublicBookingResult(BaseModel):
    booking_id: UUID
    confirmation_code: str
    guest_token: str
    scheduled_start: datetime
    scheduled_end: datetime
    total_price_cents: int
    deposit_amount_cents: int


# --- UPDATE (captain) ---
class BookingStatusUpdate(BaseModel):
    status: str = Field(
        ...,
        description="pending_deposit, confirmed, weather_hold, rescheduled, completed, cancelled, no_show, expired",
    )
    note: Optional[str] = None


class PassengerResponse(BaseModel):
    id: UUID
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    is_primary_contact: bool

    class Config:
        from_attributes = True


# --- RESPONSE ---
class BookingResponse(BaseModel):
    id: UUID
    captain_id: UUID
    trip_type_id: UUID
    guest_name: str
    guest_email: str
    guest_phone: Optional[str] = None
    party_size: int
    special_requests: Optional[str] = None
    scheduled_start: datetime
    scheduled_end: datetime
    status: str
    payment_status: str
    confirmation_code: str
    total_price_cents: int
    deposit_paid_cents: int
    balance_due_cents: int
    created_at: Optional[datetime] = None
    passengers: List[PassengerResponse] = []

    class Config:
        from_attributes = True

    @field_validator("scheduled_start", "scheduled_end", mode="after")
    @classmethod
    def in_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


# What a guest sees through their access link
class GuestBookingView(BaseModel):
    booking_id: UUID
    confirmation_code: str
    status: str
    trip_title: str
    scheduled_start: datetime
    scheduled_end: datetime
    party_size: int
    total_price_cents: int
    balance_due_cents: int
    captain_name: Optional[str] = None
    meeting_spot_name: Optional[str] = None
    meeting_spot_address: Optional[str] = None
    passengers: List[PassengerResponse] = []
