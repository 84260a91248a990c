import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carpool import errors
from carpool.auth.utils import create_user_token
from carpool.config import Settings
from carpool.database import crud
from carpool.database.models import RideStatus, User
from carpool.database.schemas import ProfileUpdate, RegisterRequest, UserStats
from carpool.security import verify_password

logger = logging.getLogger(__name__)

# Fields that may be cleared by sending null
CLEARABLE_FIELDS = {"phone", "address", "dob"}


def register_user(db: Session, payload: RegisterRequest, settings: Settings) -> Tuple[str, User]:
    if crud.get_user_by_email(db, payload.email):
        raise errors.Conflict("User with this email already exists")

    try:
        user = crud.create_user(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            settings=settings
        )
    except IntegrityError:
        db.rollback()
        raise errors.Conflict("User with this email already exists")

    logger.info(f"Registered user {user.id}")
    return create_user_token(user.id, settings), user


def login_user(db: Session, email: str, password: str, settings: Settings) -> Tuple[str, User]:
    user = crud.get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password, settings):
        logger.warning("Rejected login attempt")
        raise errors.InvalidCredentials()

    logger.info(f"User {user.id} logged in")
    return create_user_token(user.id, settings), user


def update_profile(db: Session, acting_user_id: int, target_user_id: int, payload: ProfileUpdate) -> User:
    if acting_user_id != target_user_id:
        raise errors.Forbidden("You can only update your own profile")

    user = crud.get_user(db, target_user_id)
    if user is None:
        raise errors.NotFound("User not found")

    fields = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key in CLEARABLE_FIELDS
    }

    if fields.get("email"):
        if crud.email_taken_by_other(db, fields["email"], user.id):
            raise errors.Conflict("Email is already taken")
        fields["email"] = crud.normalize_email(fields["email"])

    try:
        return crud.update_user(db, user, fields)
    except IntegrityError:
        db.rollback()
        raise errors.Conflict("Email is already taken")


def get_user_stats(db: Session, user_id: int) -> UserStats:
    user = crud.get_user(db, user_id)
    if user is None:
        raise errors.NotFound("User not found")

    driven = crud.get_driver_rides(db, user_id)
    ridden = crud.get_passenger_rides(db, user_id)

    earnings = sum(
        ride.price * len(ride.seats)
        for ride in driven
        if ride.status != RideStatus.CANCELLED
    )

    return UserStats(
        total_rides=len(driven) + len(ridden),
        total_earnings=earnings,
        average_rating=crud.get_average_rating(db, user_id),
        member_since=user.created_at
    )
