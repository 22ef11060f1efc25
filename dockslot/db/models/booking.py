# dockslot/db/models/booking.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Boolean, Uuid, Index, text,
)
from sqlalchemy.orm import relationship

from dockslot.db.base import Base


BOOKING_STATUSES = (
    "pending_deposit",
    "confirmed",
    "weather_hold",
    "rescheduled",
    "completed",
    "cancelled",
    "no_show",
    "expired",
)

# statuses that hold a slot on the captain's calendar
ACTIVE_BOOKING_STATUSES = ("pending_deposit", "confirmed", "weather_hold", "rescheduled")

VALID_TRANSITIONS = {
    "pending_deposit": ("confirmed", "cancelled", "expired"),
    "confirmed": ("weather_hold", "completed", "cancelled", "no_show"),
    "weather_hold": ("confirmed", "rescheduled", "cancelled"),
    "rescheduled": ("confirmed", "weather_hold", "completed", "cancelled", "no_show"),
    "completed": (),
    "cancelled": (),
    "no_show": (),
    "expired": (),
}

_active_sql = "status IN ({})".format(", ".join(f"'{s}'" for s in ACTIVE_BOOKING_STATUSES))


def _utcnow():
    return datetime.now(timezone.utc)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # at most one active booking per captain start instant
        Index(
            "uq_bookings_active_slot",
            "captain_id",
            "scheduled_start",
            unique=True,
            postgresql_where=text(_active_sql),
            sqlite_where=text(_active_sql),
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    captain_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    trip_type_id = Column(Uuid, ForeignKey("trip_types.id"), nullable=False, index=True)

    guest_name = Column(String, nullable=False)
    guest_email = Column(String, nullable=False)
    guest_phone = Column(String, nullable=True)
    party_size = Column(Integer, nullable=False)
    special_requests = Column(String, nullable=True)

    # absolute instants, stored in UTC
    scheduled_start = Column(DateTime(timezone=True), nullable=False)
    scheduled_end = Column(DateTime(timezone=True), nullable=False)

    status = Column(String, nullable=False, default="pending_deposit")
    payment_status = Column(String, nullable=False, default="unpaid")
    confirmation_code = Column(String(6), nullable=False, index=True)

    total_price_cents = Column(Integer, nullable=False)
    deposit_paid_cents = Column(Integer, nullable=False, default=0)
    balance_due_cents = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    # relationships
    captain = relationship("Profile", foreign_keys=[captain_id])
    trip_type = relationship("TripType", foreign_keys=[trip_type_id])
    passengers = relationship("Passenger", back_populates="booking", cascade="all, delete-orphan")
    guest_tokens = relationship("GuestToken", back_populates="booking", cascade="all, delete-orphan")
    logs = relationship("BookingLog", back_populates="booking", cascade="all, delete-orphan")


class GuestToken(Base):
    """Lets a guest open their booking without an account."""
    __tablename__ = "guest_tokens"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(32), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    booking = relationship("Booking", back_populates="guest_tokens")


class Passenger(Base):
    __tablename__ = "passengers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    is_primary_contact = Column(Boolean, nullable=False, default=False)

    booking = relationship("Booking", back_populates="passengers")


class BookingLog(Base):
    __tablename__ = "booking_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    entry_type = Column(String, nullable=False)
    description = Column(String, nullable=False)
    actor_type = Column(String, nullable=False)  # guest | captain | system
    actor_id = Column(Uuid, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    booking = relationship("Booking", back_populates="logs")
