from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from carpool.auth.utils import verify_access_token
from carpool.config import Settings

security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user_id(
    settings: Annotated[Settings, Depends(get_settings)],
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)]
) -> int:
    """
    Resolves the bearer token of the request to a user id, or raises
    ``Unauthorized``/``Expired`` which render as 401.
    """
    token = credentials.credentials if credentials else None
    return verify_access_token(token, settings)
