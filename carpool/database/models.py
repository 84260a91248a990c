from datetime import datetime, timezone

from sqlalchemy import (
    Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
)
from sqlalchemy.orm import relationship

from .base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class RideStatus:
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    dob = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_utcnow)

    rides = relationship("Ride", back_populates="driver")


class Ride(Base):
    __tablename__ = "rides"

    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    origin = Column(String, nullable=False)
    destination = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String, nullable=False)
    seats_available = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, default="")
    status = Column(String, default=RideStatus.ACTIVE, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    driver = relationship("User", back_populates="rides")
    # One row per booked seat, in booking order
    seats = relationship(
        "RidePassenger", back_populates="ride",
        order_by="RidePassenger.id", cascade="all, delete-orphan")

    @property
    def passengers(self):
        return [seat.user for seat in self.seats]

    @property
    def passenger_ids(self):
        return [seat.user_id for seat in self.seats]


class RidePassenger(Base):
    __tablename__ = "ride_passengers"

    id = Column(Integer, primary_key=True, index=True)
    ride_id = Column(Integer, ForeignKey("rides.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    booked_at = Column(DateTime, default=_utcnow)

    ride = relationship("Ride", back_populates="seats")
    user = relationship("User")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reviewed_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    ride_id = Column(Integer, ForeignKey("rides.id"), nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    role = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    reviewer = relationship("User", foreign_keys=[reviewer_id])
    reviewed = relationship("User", foreign_keys=[reviewed_id])
    ride = relationship("Ride")
