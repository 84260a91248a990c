from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from carpool import errors
from carpool.config import Settings


def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: Optional[timedelta] = None
) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user_id: int, settings: Settings) -> str:
    return create_access_token({"sub": str(user_id)}, settings)


def verify_access_token(token: Optional[str], settings: Settings) -> int:
    """
    Returns the user id embedded in a bearer token.

    Raises ``Unauthorized`` for a missing, malformed or badly signed token
    and ``Expired`` once the token is past its validity window.
    """
    if not token:
        raise errors.Unauthorized("Access denied. No token provided.")

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except ExpiredSignatureError:
        raise errors.Expired()
    except JWTError:
        raise errors.Unauthorized()

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise errors.Unauthorized()
