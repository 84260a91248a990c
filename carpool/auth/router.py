from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from carpool.config import Settings
from carpool.database.base import get_db
from carpool.database.schemas import (
    AuthResponse, LoginRequest, ProfileResponse, ProfileUpdate,
    RegisterRequest, UserProfile, UserPublic, UserStats
)
from carpool.dependencies import get_current_user_id, get_settings
from carpool.service import accounts

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)]
):
    token, user = accounts.register_user(db, payload, settings)
    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserPublic.model_validate(user)
    )


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)]
):
    token, user = accounts.login_user(db, payload.email, payload.password, settings)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserPublic.model_validate(user)
    )


@router.put("/users/{user_id}", response_model=ProfileResponse)
def update_user_profile(
    user_id: int,
    payload: ProfileUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    user = accounts.update_profile(db, current_user_id, user_id, payload)
    return ProfileResponse(
        message="Profile updated successfully",
        user=UserProfile.model_validate(user)
    )


@router.get("/users/{user_id}/stats", response_model=UserStats)
def get_user_stats(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user_id: Annotated[int, Depends(get_current_user_id)]
):
    return accounts.get_user_stats(db, user_id)
