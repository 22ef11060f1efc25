# dockslot/schemas/trip_type.py

from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID


# Shared fields
class TripTypeBase(BaseModel):
    title: str
    description: Optional[str] = None
    duration_hours: float
    price_total: float
    deposit_amount: float = 0


# Captain creates trip type
class TripTypeCreate(TripTypeBase):
    pass


# Captain updates trip type
class TripTypeUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    duration_hours: Optional[float] = None
    price_total: Optional[float] = None
    deposit_amount: Optional[float] = None


# What the captain API returns
class TripTypeResponse(TripTypeBase):
    id: UUID
    owner_id: UUID
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# What guests see
class PublicTripType(TripTypeBase):
    id: UUID

    class Config:
        from_attributes = True


class TripTypeDeleteResult(BaseModel):
    deleted: bool
    archived: bool = False
