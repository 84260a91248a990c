"""
Reviews and the rules for choosing who a review is about.

A review always records both its author (``reviewer``) and its subject
(``reviewed``). Which user becomes the subject is decided by a target
strategy picked from ``Settings.REVIEW_TARGET_STRATEGY``:

* ``self``: the author rates themselves in the given role. This is how the
  web client currently submits reviews.
* ``peer``: the subject is the ``reviewedId`` sent with the review, or the
  author when none is sent.
"""
import logging
from typing import Callable, Dict, List

from sqlalchemy.orm import Session

from carpool import errors
from carpool.config import Settings
from carpool.database import crud
from carpool.database.models import Review
from carpool.database.schemas import ReviewCreate

logger = logging.getLogger(__name__)

TargetStrategy = Callable[[Session, int, ReviewCreate], int]


def self_target(db: Session, reviewer_id: int, review: ReviewCreate) -> int:
    return reviewer_id


def peer_target(db: Session, reviewer_id: int, review: ReviewCreate) -> int:
    if review.reviewed_id is None:
        return reviewer_id
    if crud.get_user(db, review.reviewed_id) is None:
        raise errors.NotFound("Reviewed user not found")
    return review.reviewed_id


TARGET_STRATEGIES: Dict[str, TargetStrategy] = {
    "self": self_target,
    "peer": peer_target,
}


def get_target_strategy(settings: Settings) -> TargetStrategy:
    try:
        return TARGET_STRATEGIES[settings.REVIEW_TARGET_STRATEGY]
    except KeyError:
        raise ValueError(
            f"Unknown review target strategy: {settings.REVIEW_TARGET_STRATEGY}")


def create_review(db: Session, reviewer_id: int, review: ReviewCreate, settings: Settings) -> Review:
    if crud.get_user(db, reviewer_id) is None:
        raise errors.NotFound("User not found")
    if review.ride_id is not None and crud.get_ride(db, review.ride_id) is None:
        raise errors.NotFound("Ride not found")

    reviewed_id = get_target_strategy(settings)(db, reviewer_id, review)

    db_review = crud.create_review(db, {
        "reviewer_id": reviewer_id,
        "reviewed_id": reviewed_id,
        "ride_id": review.ride_id,
        "rating": review.rating,
        "comment": review.comment,
        "role": review.role,
    })
    logger.info(f"User {reviewer_id} reviewed user {reviewed_id} as {review.role}")
    return db_review


def get_all_reviews(db: Session) -> List[Review]:
    return crud.get_reviews(db)


def get_reviews_by_ride(db: Session, ride_id: int) -> List[Review]:
    return crud.get_reviews_by_ride(db, ride_id)


def get_reviews_by_user(db: Session, user_id: int) -> List[Review]:
    return crud.get_reviews_by_reviewer(db, user_id)


def get_reviews_by_driver(db: Session, user_id: int) -> List[Review]:
    ride_ids = [ride.id for ride in crud.get_driver_rides(db, user_id)]
    if not ride_ids:
        return []
    return crud.get_reviews_for_rides(db, ride_ids, user_id)


def get_reviews_by_passenger(db: Session, user_id: int) -> List[Review]:
    ride_ids = [ride.id for ride in crud.get_passenger_rides(db, user_id)]
    if not ride_ids:
        return []
    return crud.get_reviews_for_rides(db, ride_ids, user_id)
