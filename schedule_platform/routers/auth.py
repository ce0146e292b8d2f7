from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schedule_platform.auth import (
    CurrentUser,
    authenticate_user,
    get_current_user,
    get_password_hash,
    issue_token_for,
)
from schedule_platform.config import Settings
from schedule_platform.dependencies import get_db, get_settings
from schedule_platform.errors import AuthError, ConflictError, ValidationError
from schedule_platform.logging import logger
from schedule_platform.models import User
from schedule_platform.schema import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    SignupRequest,
    SignupResponse,
    UserProfile,
    UserPublic,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _email_taken(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == email).first() is not None


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, db: Session = Depends(get_db)):
    """Register a new user. Does not log them in."""
    if not body.name or not body.email or not body.password:
        raise ValidationError("Name, email and password are required")

    if _email_taken(db, body.email):
        raise ConflictError("Email is already in use")

    user = User(name=body.name, email=body.email, password_hash=get_password_hash(body.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent signup with the same email
        db.rollback()
        raise ConflictError("Email is already in use")
    db.refresh(user)

    logger.info("Registered user {}", user.id)
    return SignupResponse(message="Sign up complete", user_id=user.id)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")

    user = authenticate_user(body.email, body.password, db)
    if not user:
        logger.warning("Failed login attempt")
        raise AuthError("Invalid email or password")

    token = issue_token_for(user, settings)
    logger.info("User {} logged in", user.id)
    return LoginResponse(
        message="Login successful",
        token=token,
        user=UserPublic.model_validate(user),
    )


@router.get("/me", response_model=MeResponse)
async def read_users_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Profile of the authenticated user."""
    user = db.get(User, current_user.user_id)
    if not user:
        # Token outlived its account
        raise AuthError("Invalid token", status_code=403)
    return MeResponse(user=UserProfile.model_validate(user))
