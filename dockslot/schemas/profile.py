from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import date
from uuid import UUID


class CaptainRegister(BaseModel):
    email: EmailStr
    full_name: str
    business_name: Optional[str] = None
    phone: Optional[str] = None
    timezone: Optional[str] = None


class CaptainSettingsUpdate(BaseModel):
    full_name: Optional[str] = None
    business_name: Optional[str] = None
    phone: Optional[str] = None
    timezone: Optional[str] = None
    booking_buffer_minutes: Optional[int] = None
    advance_booking_days: Optional[int] = None
    meeting_spot_name: Optional[str] = None
    meeting_spot_address: Optional[str] = None
    meeting_spot_instructions: Optional[str] = None
    cancellation_policy: Optional[str] = None
    is_hibernating: Optional[bool] = None
    hibernation_message: Optional[str] = None
    hibernation_end_date: Optional[date] = None
    hibernation_show_return_date: Optional[bool] = None
    hibernation_show_contact_info: Optional[bool] = None


class CaptainResponse(BaseModel):
    id: UUID
    email: EmailStr
    full_name: Optional[str] = None
    business_name: Optional[str] = None
    phone: Optional[str] = None
    timezone: str
    booking_buffer_minutes: int
    advance_booking_days: int
    is_hibernating: bool
    hibernation_message: Optional[str] = None
    hibernation_end_date: Optional[date] = None

    class Config:
        from_attributes = True


class CaptainRegisterResponse(BaseModel):
    captain: CaptainResponse
    api_token: str


class PublicCaptainProfile(BaseModel):
    id: UUID
    business_name: Optional[str] = None
    full_name: Optional[str] = None
    timezone: str
    meeting_spot_name: Optional[str] = None
    meeting_spot_address: Optional[str] = None
    meeting_spot_instructions: Optional[str] = None
    cancellation_policy: Optional[str] = None
    advance_booking_days: int

    class Config:
        from_attributes = True


class HibernationInfo(BaseModel):
    id: UUID
    business_name: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    timezone: str
    hibernation_message: Optional[str] = None
    hibernation_end_date: Optional[date] = None
