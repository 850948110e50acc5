from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError

from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.auth.security import decode_access_token
from academic_reporting.core.logging_config import set_user_id


# auto_error=False so a missing header maps to our own 401 message
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login-oauth", auto_error=False)

NO_TOKEN_MESSAGE = "Access denied: No token provided"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
) -> CurrentUser:
    """Resolve the caller's identity from the bearer token. No database access."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NO_TOKEN_MESSAGE,
            headers={"WWW-Authenticate": "Bearer"},
        )

    invalid_token = HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=INVALID_TOKEN_MESSAGE)
    try:
        payload = decode_access_token(token)
    except JWTError:
        raise invalid_token

    try:
        current_user = CurrentUser(
            id=payload.get("id"),
            role=payload.get("role"),
            full_name=payload.get("fullName"),
        )
    except ValidationError:
        raise invalid_token

    set_user_id(str(current_user.id))
    return current_user
