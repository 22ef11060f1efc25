# dockslot/db/models/availability.py
import uuid

from sqlalchemy import (
    Column, Integer, Time, Date, ForeignKey, Boolean, DateTime, String, Uuid,
    CheckConstraint, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship

from dockslot.db.base import Base


class AvailabilityWindow(Base):
    """
    Recurring weekly availability for a captain.
    day_of_week: 0 (Sunday) .. 6 (Saturday)
    start_time, end_time: local wall-clock times in the captain's timezone
    One row per day; the week is always saved as a whole.
    """
    __tablename__ = "availability_windows"
    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6"),
        UniqueConstraint("owner_id", "day_of_week", name="uq_availability_windows_owner_day"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    owner = relationship("Profile", back_populates="availability_windows")


class BlackoutDate(Base):
    """
    A whole day the captain is closed, regardless of the weekly windows.
    """
    __tablename__ = "blackout_dates"
    __table_args__ = (
        UniqueConstraint("owner_id", "blackout_date", name="uq_blackout_dates_owner_date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    blackout_date = Column(Date, nullable=False)
    reason = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("Profile", back_populates="blackout_dates")
