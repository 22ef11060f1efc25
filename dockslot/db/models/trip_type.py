# dockslot/db/models/trip_type.py
import uuid

from sqlalchemy import Column, DateTime, String, ForeignKey, Boolean, Float, Uuid, func
from sqlalchemy.orm import relationship

from dockslot.db.base import Base


class TripType(Base):
    __tablename__ = "trip_types"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    owner_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    # Basic details
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)

    # Duration drives slot length
    duration_hours = Column(Float, nullable=False, default=4)

    # Pricing (dollars; bookings store cents)
    price_total = Column(Float, nullable=False)
    deposit_amount = Column(Float, nullable=False, default=0)

    # Archived trip types keep historical bookings valid
    is_active = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("Profile", back_populates="trip_types")
