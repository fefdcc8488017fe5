"""
Security utilities for authentication and authorization.
Handles password hashing, session tokens, and resolving the acting user.
"""
from datetime import datetime, timedelta
from typing import Iterable, Optional
import secrets

from passlib.context import CryptContext
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from spare_parts.core.config import settings
from spare_parts.error_handlers import NotAuthenticatedError, UnauthorizedError
from spare_parts.models.session import UserSession
from spare_parts.models.user import User, UserRole
from spare_parts.utils import utcnow


# Password hashing context. hex_sha256 is the unsalted digest older
# databases hold; it still verifies but is replaced on the next login.
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256", "hex_sha256"],
    deprecated=["hex_sha256"],
)


class SessionContext:
    """
    The caller's authentication state, passed explicitly into every call.

    A desktop process keeps one of these for its single signed-in user;
    login and registration set the token, logout and expiry clear it.
    """

    def __init__(self, token: Optional[str] = None):
        self.token = token

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def clear(self) -> None:
        self.token = None

    def __repr__(self) -> str:
        return f"<SessionContext(authenticated={self.is_authenticated})>"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password with a salted, iterated KDF."""
    return pwd_context.hash(password)


def password_needs_rehash(hashed_password: str) -> bool:
    return pwd_context.needs_update(hashed_password)


def generate_token() -> str:
    """256-bit random session token, hex encoded."""
    return secrets.token_hex(32)


def session_expiry(issued_at: Optional[datetime] = None) -> datetime:
    """Absolute expiry for a session issued now."""
    return (issued_at or utcnow()) + timedelta(days=settings.session_ttl_days)


def create_session(db: Session, user_id: int):
    """Add a new session for the user to the current transaction."""
    user_session = UserSession(
        user_id=user_id,
        token=generate_token(),
        expires_at=session_expiry(),
    )
    db.add(user_session)
    db.flush()
    return user_session


def purge_expired_sessions(db: Session) -> int:
    """Delete every session whose expiry has passed."""
    result = db.execute(delete(UserSession).where(UserSession.expires_at <= utcnow()))
    return result.rowcount or 0


def get_active_session(db: Session, ctx: SessionContext):
    """The unexpired session matching the caller's token, or None."""
    if not ctx.token:
        return None

    return db.execute(
        select(UserSession).where(
            UserSession.token == ctx.token,
            UserSession.expires_at > utcnow()
        )
    ).scalar_one_or_none()


def get_current_user_id(db: Session, ctx: SessionContext) -> Optional[int]:
    """Resolve the acting user's id from the caller's session."""
    user_session = get_active_session(db, ctx)
    return user_session.user_id if user_session else None


def get_current_user(db: Session, ctx: SessionContext):
    """Resolve the acting user from the caller's session."""
    user_id = get_current_user_id(db, ctx)
    if user_id is None:
        return None
    return db.get(User, user_id)


def require_user(db: Session, ctx: SessionContext, roles: Optional[Iterable[str]] = None):
    """
    Get the acting user or raise.

    Raises:
        NotAuthenticatedError: If there is no valid session
        UnauthorizedError: If the user's role is not among ``roles``
    """
    user = get_current_user(db, ctx)
    if user is None:
        raise NotAuthenticatedError()

    if roles is not None and user.role not in {getattr(r, "value", r) for r in roles}:
        raise UnauthorizedError()

    return user


def is_admin(db: Session, ctx: SessionContext) -> bool:
    """True when the caller's session belongs to an admin."""
    user = get_current_user(db, ctx)
    return user is not None and user.role == UserRole.ADMIN.value
