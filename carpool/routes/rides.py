from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from carpool.database.base import get_db
from carpool.database.schemas import (
    BookingResponse, BookRequest, CancelResponse, JoinRequest, ReviewableRide,
    RideCreate, RideOut
)
from carpool.dependencies import get_current_user_id
from carpool.service import booking

router = APIRouter(prefix="/rides", tags=["Rides"])


@router.post("", response_model=RideOut, status_code=status.HTTP_201_CREATED)
def create_ride(
    payload: RideCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    ride = booking.create_ride(db, current_user_id, payload)
    return RideOut.model_validate(ride)


@router.get("", response_model=List[RideOut])
def list_rides(db: Annotated[Session, Depends(get_db)]):
    return [RideOut.model_validate(ride) for ride in booking.list_rides(db)]


@router.get("/search", response_model=List[RideOut])
def search_rides(
    db: Annotated[Session, Depends(get_db)],
    origin: Optional[str] = None,
    destination: Optional[str] = None
):
    rides = booking.search_rides(db, origin=origin, destination=destination)
    return [RideOut.model_validate(ride) for ride in rides]


@router.get("/user/{user_id}/reviewable", response_model=List[ReviewableRide])
def get_reviewable_rides(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    return [
        ReviewableRide(**RideOut.model_validate(ride).model_dump(), user_role=role)
        for ride, role in booking.get_reviewable_rides(db, user_id)
    ]


@router.post("/join", response_model=BookingResponse)
def join_ride(
    payload: JoinRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    ride = booking.join_ride(db, payload.ride_id, current_user_id)
    return BookingResponse(
        message="Successfully joined ride",
        seats_booked=1,
        ride=RideOut.model_validate(ride)
    )


@router.post("/{ride_id}/book", response_model=BookingResponse)
def book_ride(
    ride_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    payload: Annotated[Optional[BookRequest], Body()] = None
):
    seats_to_book = payload.seats_to_book if payload else 1
    ride = booking.book_ride(db, ride_id, current_user_id, seats_to_book)
    return BookingResponse(
        message="Ride booked successfully",
        seats_booked=seats_to_book,
        ride=RideOut.model_validate(ride)
    )


@router.put("/{ride_id}/cancel", response_model=CancelResponse)
def cancel_ride(
    ride_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    ride = booking.cancel_ride(db, ride_id, current_user_id)
    return CancelResponse(
        message="Ride cancelled successfully",
        ride=RideOut.model_validate(ride)
    )


@router.get("/{ride_id}", response_model=RideOut)
def get_ride(ride_id: int, db: Annotated[Session, Depends(get_db)]):
    return RideOut.model_validate(booking.get_ride(db, ride_id))
