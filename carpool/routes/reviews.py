from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from carpool.config import Settings
from carpool.database.base import get_db
from carpool.database.schemas import ReviewCreate, ReviewOut
from carpool.dependencies import get_current_user_id, get_settings
from carpool.service import reviews

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def _out(items) -> List[ReviewOut]:
    return [ReviewOut.model_validate(review) for review in items]


@router.post("", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    review = reviews.create_review(db, current_user_id, payload, settings)
    return ReviewOut.model_validate(review)


@router.get("/all", response_model=List[ReviewOut])
def get_all_reviews(db: Annotated[Session, Depends(get_db)]):
    return _out(reviews.get_all_reviews(db))


@router.get("/ride/{ride_id}", response_model=List[ReviewOut])
def get_reviews_by_ride(ride_id: int, db: Annotated[Session, Depends(get_db)]):
    return _out(reviews.get_reviews_by_ride(db, ride_id))


@router.get("/user", response_model=List[ReviewOut])
def get_my_reviews(
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    return _out(reviews.get_reviews_by_user(db, current_user_id))


@router.get("/user/{user_id}", response_model=List[ReviewOut])
def get_reviews_by_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    return _out(reviews.get_reviews_by_user(db, user_id))


@router.get("/driver/{user_id}", response_model=List[ReviewOut])
def get_reviews_by_driver(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    return _out(reviews.get_reviews_by_driver(db, user_id))


@router.get("/passenger/{user_id}", response_model=List[ReviewOut])
def get_reviews_by_passenger(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    return _out(reviews.get_reviews_by_passenger(db, user_id))
