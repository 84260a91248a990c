from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from carpool.config import Settings
from carpool.security import get_password_hash
from .models import Review, Ride, RidePassenger, RideStatus, User


# ---------------------------------------------------------------- users

def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == normalize_email(email)).first()


def email_taken_by_other(db: Session, email: str, user_id: int) -> bool:
    return db.query(User).filter(
        User.email == normalize_email(email),
        User.id != user_id
    ).first() is not None


def create_user(db: Session, name: str, email: str, password: str, settings: Settings):
    db_user = User(
        name=name,
        email=normalize_email(email),
        hashed_password=get_password_hash(password, settings)
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, user: User, fields: dict):
    for key, value in fields.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


# ---------------------------------------------------------------- rides

def create_ride(db: Session, driver_id: int, ride_data: dict):
    db_ride = Ride(driver_id=driver_id, status=RideStatus.ACTIVE, **ride_data)
    db.add(db_ride)
    db.commit()
    db.refresh(db_ride)
    return db_ride


def get_ride(db: Session, ride_id: int):
    return db.query(Ride).filter(Ride.id == ride_id).first()


def get_rides(db: Session):
    return db.query(Ride).order_by(Ride.id).all()


def search_rides(db: Session, origin: Optional[str] = None, destination: Optional[str] = None):
    query = db.query(Ride)
    if origin:
        query = query.filter(
            Ride.origin.icontains(origin, autoescape=True))
    if destination:
        query = query.filter(
            Ride.destination.icontains(destination, autoescape=True))
    return query.order_by(Ride.id).all()


def get_driver_rides(db: Session, user_id: int, status: Optional[str] = None):
    query = db.query(Ride).filter(Ride.driver_id == user_id)
    if status is not None:
        query = query.filter(Ride.status == status)
    return query.order_by(Ride.id).all()


def get_passenger_rides(db: Session, user_id: int, status: Optional[str] = None):
    query = db.query(Ride).filter(Ride.seats.any(RidePassenger.user_id == user_id))
    if status is not None:
        query = query.filter(Ride.status == status)
    return query.order_by(Ride.id).all()


def reserve_seats(db: Session, ride_id: int, user_id: int, seats: int) -> bool:
    """
    Compare-and-decrement of a ride's seat inventory.

    The decrement only applies while the ride is active, still has ``seats``
    free and holds no seat for ``user_id``; the seat rows are inserted in the
    same transaction. Returns False, with the transaction rolled back, when
    the guard no longer matches the stored row.
    """
    matched = db.query(Ride).filter(
        Ride.id == ride_id,
        Ride.status == RideStatus.ACTIVE,
        Ride.seats_available >= seats,
        ~Ride.seats.any(RidePassenger.user_id == user_id)
    ).update(
        {Ride.seats_available: Ride.seats_available - seats},
        synchronize_session=False
    )
    if matched != 1:
        db.rollback()
        return False

    db.add_all([RidePassenger(ride_id=ride_id, user_id=user_id) for _ in range(seats)])
    db.commit()
    return True


def set_ride_status(db: Session, ride: Ride, status: str):
    ride.status = status
    db.commit()
    db.refresh(ride)
    return ride


# ---------------------------------------------------------------- reviews

def create_review(db: Session, review_data: dict):
    db_review = Review(**review_data)
    db.add(db_review)
    db.commit()
    db.refresh(db_review)
    return db_review


def get_reviews(db: Session):
    return db.query(Review).order_by(Review.created_at.desc(), Review.id.desc()).all()


def get_reviews_by_ride(db: Session, ride_id: int):
    return db.query(Review).filter(Review.ride_id == ride_id).order_by(Review.id).all()


def get_reviews_by_reviewer(db: Session, user_id: int):
    return db.query(Review).filter(
        Review.reviewer_id == user_id
    ).order_by(Review.created_at.desc(), Review.id.desc()).all()


def get_reviews_for_rides(db: Session, ride_ids: Iterable[int], reviewed_id: int):
    return db.query(Review).filter(
        Review.ride_id.in_(list(ride_ids)),
        Review.reviewed_id == reviewed_id
    ).order_by(Review.id).all()


def get_average_rating(db: Session, user_id: int) -> Optional[float]:
    average = db.query(func.avg(Review.rating)).filter(
        Review.reviewed_id == user_id).scalar()
    if average is None:
        return None
    return round(float(average), 1)
