"""JWT authentication, the admin action gateway, and FastAPI dependencies.

Every mutating moderation route depends on ``require_admin_context``.  The
gateway fails closed: a missing token, an unresolvable session, a lookup
error or a non-admin role all end in Unauthorized/Forbidden.  Only a
successful authorization produces an ``AdminContext``, the one object the
moderation services accept for writes.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.errors import Forbidden, Unauthorized
from app.models.user import User

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

# auto_error=False so a missing header is a 401 from the gateway, not a 403
security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt directly (passlib is broken with bcrypt>=4.1)."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(pwd_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid or expired token")


# ── Session collaborator ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class SessionInfo:
    user_id: str
    email: str


class SessionResolver(Protocol):
    def resolve_session(self, token: str) -> Optional[SessionInfo]: ...

    def get_role(self, user_id: str) -> Optional[str]: ...


class TokenSessionResolver:
    """Resolves bearer tokens against the users table."""

    def __init__(self, db: Session):
        self.db = db

    def resolve_session(self, token: str) -> Optional[SessionInfo]:
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            return None
        return SessionInfo(user_id=user.id, email=user.email)

    def get_role(self, user_id: str) -> Optional[str]:
        user = self.db.query(User).filter(User.id == user_id).first()
        return user.role if user else None


# ── Admin action gateway ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class AdminIdentity:
    id: str
    email: str
    role: str = ADMIN_ROLE


@dataclass(frozen=True)
class AdminContext:
    """Trusted service context handed to moderation writes."""

    identity: AdminIdentity
    db: Session

    @property
    def actor_id(self) -> str:
        return self.identity.id


class AdminGateway:
    def __init__(self, resolver: SessionResolver):
        self.resolver = resolver

    def authorize(self, token: Optional[str]) -> AdminIdentity:
        if not token:
            raise Unauthorized()

        try:
            session = self.resolver.resolve_session(token)
        except Exception:
            logger.exception("Session lookup failed")
            raise Unauthorized()
        if session is None:
            raise Unauthorized("Invalid or expired session")

        try:
            role = self.resolver.get_role(session.user_id)
        except Exception:
            logger.exception("Role lookup failed for user %s", session.user_id)
            raise Forbidden("Could not verify admin privileges")
        if role != ADMIN_ROLE:
            raise Forbidden()

        return AdminIdentity(id=session.user_id, email=session.email, role=role)


# ── FastAPI dependencies ─────────────────────────────────────────────────────

def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_current_user(
    token: Optional[str] = Depends(bearer_token),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise Unauthorized()
    payload = decode_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Invalid token payload")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise Unauthorized("User not found")
    return user


def require_admin_context(
    token: Optional[str] = Depends(bearer_token),
    db: Session = Depends(get_db),
) -> AdminContext:
    identity = AdminGateway(TokenSessionResolver(db)).authorize(token)
    return AdminContext(identity=identity, db=db)
