"""
Ride lifecycle and seat booking.

A ride starts ``active`` and may move once to ``completed`` or
``cancelled``. Seats are claimed through :func:`book_ride`, which checks
the booking rules against the stored ride and then applies a single
guarded decrement (:func:`carpool.database.crud.reserve_seats`); the guard
is re-evaluated by the database at write time, so two callers racing for
the last seats cannot both succeed.
"""
import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from carpool import errors
from carpool.database import crud
from carpool.database.models import Ride, RideStatus
from carpool.database.schemas import RideCreate

logger = logging.getLogger(__name__)

MIN_SEATS_PER_BOOKING = 1
MAX_SEATS_PER_BOOKING = 10


def create_ride(db: Session, driver_id: int, ride: RideCreate) -> Ride:
    if crud.get_user(db, driver_id) is None:
        raise errors.NotFound("User not found")
    if ride.seats_available <= 0 or ride.price <= 0:
        raise errors.ValidationError("Seats and price must be positive")

    db_ride = crud.create_ride(db, driver_id, ride.model_dump())
    logger.info(f"User {driver_id} created ride {db_ride.id} with {db_ride.seats_available} seats")
    return db_ride


def get_ride(db: Session, ride_id: int) -> Ride:
    ride = crud.get_ride(db, ride_id)
    if ride is None:
        raise errors.NotFound("Ride not found")
    return ride


def _check_booking(ride: Ride, user_id: int, seats_to_book: int):
    if user_id == ride.driver_id:
        raise errors.SelfBookingDenied()
    if ride.status != RideStatus.ACTIVE:
        raise errors.RideNotActive(f"Ride is {ride.status}")
    if user_id in ride.passenger_ids:
        raise errors.AlreadyBooked()
    if ride.seats_available < seats_to_book:
        raise errors.InsufficientSeats(ride.seats_available)


def book_ride(db: Session, ride_id: int, user_id: int, seats_to_book: int = 1) -> Ride:
    ride = get_ride(db, ride_id)

    if (isinstance(seats_to_book, bool) or not isinstance(seats_to_book, int)
            or not MIN_SEATS_PER_BOOKING <= seats_to_book <= MAX_SEATS_PER_BOOKING):
        raise errors.InvalidRequest(
            f"Seats to book must be between {MIN_SEATS_PER_BOOKING} "
            f"and {MAX_SEATS_PER_BOOKING}")

    _check_booking(ride, user_id, seats_to_book)

    if not crud.reserve_seats(db, ride_id, user_id, seats_to_book):
        # Someone else changed the ride between the read and the write.
        logger.warning(f"Booking of ride {ride_id} by user {user_id} lost a concurrent update")
        ride = get_ride(db, ride_id)
        _check_booking(ride, user_id, seats_to_book)
        raise errors.InsufficientSeats(ride.seats_available)

    ride = get_ride(db, ride_id)
    logger.info(f"User {user_id} booked {seats_to_book} seat(s) on ride {ride_id}")
    return ride


def join_ride(db: Session, ride_id: int, user_id: int) -> Ride:
    """Single-seat booking kept for older clients."""
    return book_ride(db, ride_id, user_id, 1)


def _transition(db: Session, ride_id: int, user_id: int, status: str, verb: str) -> Ride:
    ride = get_ride(db, ride_id)
    if ride.driver_id != user_id:
        raise errors.Forbidden(f"Only the driver can {verb} the ride")
    if ride.status != RideStatus.ACTIVE:
        raise errors.RideNotActive(f"Ride is already {ride.status}")

    ride = crud.set_ride_status(db, ride, status)
    logger.info(f"Ride {ride_id} marked {status} by driver {user_id}")
    return ride


def cancel_ride(db: Session, ride_id: int, user_id: int) -> Ride:
    # Seats and passengers stay as they were: the booking record outlives the ride.
    return _transition(db, ride_id, user_id, RideStatus.CANCELLED, "cancel")


def complete_ride(db: Session, ride_id: int, user_id: int) -> Ride:
    return _transition(db, ride_id, user_id, RideStatus.COMPLETED, "complete")


def list_rides(db: Session) -> List[Ride]:
    return crud.get_rides(db)


def search_rides(db: Session, origin: str | None = None, destination: str | None = None) -> List[Ride]:
    return crud.search_rides(db, origin=origin, destination=destination)


def get_reviewable_rides(db: Session, user_id: int) -> List[Tuple[Ride, str]]:
    driven = crud.get_driver_rides(db, user_id, status=RideStatus.COMPLETED)
    ridden = crud.get_passenger_rides(db, user_id, status=RideStatus.COMPLETED)
    return [(ride, "driver") for ride in driven] + [(ride, "passenger") for ride in ridden]
