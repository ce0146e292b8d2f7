"""Password hashing, session tokens and the authentication dependency."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from schedule_platform.config import Settings
from schedule_platform.errors import AuthError
from schedule_platform.logging import logger, set_request_context
from schedule_platform.models import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    email: Optional[str] = None


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def authenticate_user(email: str, password: str, db: Session) -> Optional[User]:
    """Return the user if the credentials match, otherwise None.

    Unknown emails and wrong passwords are indistinguishable to the caller.
    """
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_access_token(
    data: Dict[str, Any],
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign ``data`` into a token that expires after ``expires_delta``."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.token_expire_hours))
    to_encode = dict(data)
    to_encode.update({"iat": now, "exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def issue_token_for(user: User, settings: Settings) -> str:
    return create_access_token(
        data={"sub": str(user.id), "userId": user.id, "email": user.email},
        settings=settings,
    )


def decode_access_token(token: str, settings: Settings) -> CurrentUser:
    """Verify signature and expiry and extract the caller.

    Raises:
        AuthError: With status 403 when the token is malformed, forged or expired
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired", status_code=403)
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token", status_code=403)

    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        raise AuthError("Invalid token", status_code=403)
    return CurrentUser(user_id=user_id, email=payload.get("email"))


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """FastAPI dependency guarding every authenticated route."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Authentication token is required")

    current_user = decode_access_token(credentials.credentials, request.app.state.settings)
    set_request_context(user_id=current_user.user_id)
    logger.debug("Authenticated user {}", current_user.user_id)
    return current_user
