import datetime as dt
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, EmailStr, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"


class CamelModel(BaseModel):
    """Base for every request/response body: camelCase on the wire."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


def _strip(value):
    if isinstance(value, str):
        return value.strip()
    return value


TrimmedStr = Annotated[str, BeforeValidator(_strip)]


# ---------------------------------------------------------------- users

class UserPublic(CamelModel):
    id: int
    name: str
    email: str


class UserProfile(UserPublic):
    phone: str | None = None
    address: str | None = None
    dob: dt.date | None = None
    created_at: dt.datetime | None = None


class RegisterRequest(CamelModel):
    name: TrimmedStr = Field(..., min_length=2)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserPublic


class ProfileUpdate(CamelModel):
    name: Optional[TrimmedStr] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    phone: Optional[TrimmedStr] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[TrimmedStr] = None
    dob: Optional[dt.date] = None

    @field_validator("phone", "address", "dob", mode="before")
    @classmethod
    def blank_clears(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ProfileResponse(CamelModel):
    message: str
    user: UserProfile


class UserStats(CamelModel):
    total_rides: int
    total_earnings: float
    average_rating: float | None
    member_since: dt.datetime | None


# ---------------------------------------------------------------- rides

class RideCreate(CamelModel):
    origin: TrimmedStr = Field(..., min_length=1)
    destination: TrimmedStr = Field(..., min_length=1)
    date: dt.date
    time: TrimmedStr = Field(..., min_length=1)
    seats_available: int = Field(..., gt=0)
    price: float = Field(..., gt=0)
    description: Optional[TrimmedStr] = ""


class RideOut(CamelModel):
    id: int
    driver: UserPublic
    origin: str
    destination: str
    date: dt.date
    time: str
    seats_available: int
    price: float
    description: str | None = ""
    status: str
    passengers: List[UserPublic] = []
    created_at: dt.datetime | None = None


class ReviewableRide(RideOut):
    user_role: Literal["driver", "passenger"]


class BookRequest(CamelModel):
    seats_to_book: StrictInt = 1


class JoinRequest(CamelModel):
    ride_id: int


class BookingResponse(CamelModel):
    message: str
    seats_booked: int
    ride: RideOut


class CancelResponse(CamelModel):
    message: str
    ride: RideOut


# ---------------------------------------------------------------- reviews

class RideSummary(CamelModel):
    id: int
    origin: str
    destination: str
    date: dt.date


class ReviewCreate(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1)
    role: Literal["driver", "passenger"]
    ride_id: Optional[int] = None
    reviewed_id: Optional[int] = None


class ReviewOut(CamelModel):
    id: int
    reviewer: UserPublic
    reviewed: UserPublic
    ride: RideSummary | None = None
    rating: int
    comment: str
    role: str
    created_at: dt.datetime | None = None
