# dockslot/db/models/profile.py
import uuid

from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, Uuid, func
from sqlalchemy.orm import relationship

from dockslot.db.base import Base


class Profile(Base):
    """
    A captain's account and booking settings.
    timezone is an IANA name; slot boundaries are computed in it.
    """
    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    business_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    # hashed bearer token for the captain API
    api_token_hash = Column(String, unique=True, index=True, nullable=False)

    timezone = Column(String, nullable=False, default="America/New_York")
    booking_buffer_minutes = Column(Integer, nullable=False, default=60)
    advance_booking_days = Column(Integer, nullable=False, default=60)

    meeting_spot_name = Column(String, nullable=True)
    meeting_spot_address = Column(String, nullable=True)
    meeting_spot_instructions = Column(String, nullable=True)
    cancellation_policy = Column(String, nullable=True)

    # Hibernation closes all public availability
    is_hibernating = Column(Boolean, nullable=False, default=False)
    hibernation_message = Column(String, nullable=True)
    hibernation_end_date = Column(Date, nullable=True)
    hibernation_show_return_date = Column(Boolean, nullable=False, default=False)
    hibernation_show_contact_info = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    availability_windows = relationship(
        "AvailabilityWindow",
        back_populates="owner",
        order_by="AvailabilityWindow.day_of_week",
        cascade="all, delete-orphan",
    )
    blackout_dates = relationship("BlackoutDate", back_populates="owner", cascade="all, delete-orphan")
    trip_types = relationship("TripType", back_populates="owner")
