"""Auth router — registration, login, and user info."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.errors import Conflict, MissingRequiredField, Unauthorized
from app.models.user import User
from app.schemas.auth import RegisterRequest, LoginRequest, TokenResponse, UserResponse
from app.middleware.auth import (
    ADMIN_ROLE,
    hash_password,
    verify_password,
    create_access_token,
    get_current_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        display_name=user.display_name,
        created_at=user.created_at.isoformat(),
    )


def ensure_admin_account(db: Session) -> Optional[User]:
    """Get or create the bootstrap admin configured through settings."""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return None
    user = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
    if not user:
        user = User(
            email=settings.ADMIN_EMAIL,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            role=ADMIN_ROLE,
            display_name="Administrator",
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Seeded admin account %s", user.email)
    return user


@router.post("/register", response_model=UserResponse, status_code=201)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    """Register a member account. Admins are only ever seeded from settings."""
    if not req.email.strip() or not req.password:
        raise MissingRequiredField("Email and password are required")

    existing = db.query(User).filter(User.email == req.email).first()
    if existing:
        raise Conflict("Email already registered")

    user = User(
        email=req.email,
        password_hash=hash_password(req.password),
        role="member",
        display_name=req.display_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return _user_to_response(user)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    user = db.query(User).filter(User.email == req.email).first()
    if not user or not verify_password(req.password, user.password_hash):
        raise Unauthorized("Invalid email or password")

    token = create_access_token({"sub": user.id, "email": user.email})
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return _user_to_response(current_user)
