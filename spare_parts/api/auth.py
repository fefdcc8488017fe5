"""
Authentication handlers: login, registration, logout and session lookup.
"""
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from spare_parts.api.router import ChannelRouter
from spare_parts.core.security import (
    SessionContext,
    create_session,
    get_active_session,
    get_password_hash,
    password_needs_rehash,
    purge_expired_sessions,
    verify_password,
)
from spare_parts.error_handlers import DuplicateResourceError, service_boundary
from spare_parts.logging_config import get_logger
from spare_parts.models.session import UserSession
from spare_parts.models.user import User
from spare_parts.schemas.common import OperationResult
from spare_parts.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserResponse

logger = get_logger("auth")

router = ChannelRouter(prefix="auth", tags=["Authentication"])

INVALID_CREDENTIALS = "Invalid service number or password"


def _start_session(db: Session, ctx: SessionContext, user: User) -> AuthResponse:
    purged = purge_expired_sessions(db)
    if purged:
        logger.info(f"Purged {purged} expired sessions")

    user_session = create_session(db, user.id)
    db.commit()

    ctx.token = user_session.token
    return AuthResponse(success=True, user=UserResponse.model_validate(user))


@router.handle("login", request=LoginRequest, fallback=AuthResponse.failure)
@service_boundary("An error occurred during login", on_error=AuthResponse.failure)
def login(db: Session, ctx: SessionContext, credentials: LoginRequest) -> AuthResponse:
    """
    Sign in with a service number and password.

    The failure message never says which of the two was wrong.
    """
    user = db.execute(
        select(User).where(User.service_number == credentials.service_number)
    ).scalar_one_or_none()

    if user is None or not verify_password(credentials.password, user.password_hash):
        logger.info(f"Failed login for service number: {credentials.service_number}")
        return AuthResponse.failure(INVALID_CREDENTIALS)

    if password_needs_rehash(user.password_hash):
        user.password_hash = get_password_hash(credentials.password)
        logger.info(f"Upgraded password hash for {user.service_number}")

    response = _start_session(db, ctx, user)
    logger.info(f"User logged in: {user.service_number}")
    return response


@router.handle("register", request=RegisterRequest, fallback=AuthResponse.failure)
@service_boundary("An error occurred during registration", on_error=AuthResponse.failure)
def register(db: Session, ctx: SessionContext, request: RegisterRequest) -> AuthResponse:
    """Create an account and sign it in."""
    logger.info(f"Registration attempt for service number: {request.service_number}")

    existing = db.execute(
        select(User.id).where(User.service_number == request.service_number)
    ).first()
    if existing:
        raise DuplicateResourceError(
            "Service number already registered", "service_number", request.service_number
        )

    user = User(
        service_number=request.service_number,
        name=request.name.strip(),
        password_hash=get_password_hash(request.password),
        role=request.role.value,
    )
    db.add(user)
    db.flush()

    response = _start_session(db, ctx, user)
    logger.info(f"User registered successfully: {user.service_number}")
    return response


@router.handle("logout")
@service_boundary("An error occurred during logout")
def logout(db: Session, ctx: SessionContext) -> OperationResult:
    """End the caller's session. Succeeds even when nobody is signed in."""
    if ctx.token:
        db.execute(delete(UserSession).where(UserSession.token == ctx.token))
        db.commit()
        ctx.clear()
        logger.info("User logged out")
    return OperationResult(success=True)


@router.handle("get-session")
@service_boundary("An error occurred while reading the session", on_error=lambda _: AuthResponse(success=False))
def get_session(db: Session, ctx: SessionContext) -> AuthResponse:
    """
    Resolve the caller's session to a user.

    Not being signed in is a normal state, so it carries no error message.
    An expired or unknown token is dropped from the context.
    """
    if not ctx.token:
        return AuthResponse(success=False)

    user_session = get_active_session(db, ctx)
    if user_session is None:
        ctx.clear()
        return AuthResponse(success=False)

    user = db.get(User, user_session.user_id)
    if user is None:
        ctx.clear()
        return AuthResponse(success=False)

    return AuthResponse(success=True, user=UserResponse.model_validate(user))
