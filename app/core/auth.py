"""
Authentication Utility - JWT session tokens and password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification (credential verifier)
- FastAPI dependency for protected routes (request gate)

The session token travels in an httpOnly cookie, not an Authorization header.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from passlib.context import CryptContext
from fastapi import Request, Response
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.exceptions import ExpiredToken, InvalidToken, TokenError, Unauthenticated

settings = get_settings()
logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class CurrentUser(BaseModel):
    """Identity attached to a request by the gate."""
    user_id: str
    role: Optional[str] = None


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """
    Decode and verify a session token.

    Raises:
        ExpiredToken: signature is fine but exp is in the past
        InvalidToken: anything else (malformed, bad signature, no subject)
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise ExpiredToken() from exc
    except JWTError as exc:
        raise InvalidToken() from exc

    if not payload.get("sub"):
        raise InvalidToken()
    return payload


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.cookie_max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


async def get_current_user(request: Request) -> CurrentUser:
    """
    FastAPI dependency - Get current authenticated user from the session cookie.

    The identity is taken from the token as-is; it is not re-read from the
    database.

    Usage:
        @router.get("/protected")
        async def route(user: CurrentUser = Depends(get_current_user)):
            return user
    """
    token = request.cookies.get(settings.cookie_name)
    if not token:
        raise Unauthenticated()

    try:
        payload = decode_token(token)
    except TokenError as exc:
        logger.info("Rejected session token on %s: %s", request.url.path, exc.message)
        raise Unauthenticated(detail=exc.message) from exc

    return CurrentUser(user_id=payload["sub"], role=payload.get("role"))
