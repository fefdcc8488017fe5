"""
User administration handlers (admin only).
"""
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from spare_parts.api.router import ChannelRouter
from spare_parts.core.security import SessionContext, is_admin, require_user
from spare_parts.error_handlers import ResourceNotFoundError, UnauthorizedError, service_boundary
from spare_parts.logging_config import get_logger
from spare_parts.models.session import UserSession
from spare_parts.models.user import User, UserRole
from spare_parts.schemas.common import OperationResult
from spare_parts.schemas.user import UserResponse, UserRoleUpdate
from spare_parts.utils import utcnow

logger = get_logger("users")

router = ChannelRouter(prefix="users", tags=["Users"])


@router.handle("get-all", fallback=lambda _: [])
@service_boundary("Failed to load users", on_error=lambda _: [])
def list_users(db: Session, ctx: SessionContext) -> list[UserResponse]:
    """All users ordered by name; empty for anyone but an admin."""
    if not is_admin(db, ctx):
        return []

    users = db.execute(select(User).order_by(User.name)).scalars().all()
    return [UserResponse.model_validate(u) for u in users]


@router.handle("update-role", request=UserRoleUpdate)
@service_boundary("Failed to update user role")
def update_user_role(db: Session, ctx: SessionContext, request: UserRoleUpdate) -> OperationResult:
    """Change another user's role. Admins cannot change their own."""
    admin = require_user(db, ctx, roles=[UserRole.ADMIN])
    if request.user_id == admin.id:
        raise UnauthorizedError("Cannot change your own role")

    user = db.get(User, request.user_id)
    if user is None:
        raise ResourceNotFoundError("User", request.user_id)

    user.role = request.role.value
    user.updated_at = utcnow()
    db.commit()

    logger.info(f"Role of {user.service_number} set to {user.role} by {admin.service_number}")
    return OperationResult(success=True)


@router.handle("delete", request=int)
@service_boundary(
    "Failed to delete user",
    integrity_message="Failed to delete user. Make sure no parts are created by this user."
)
def delete_user(db: Session, ctx: SessionContext, user_id: int) -> OperationResult:
    """
    Delete a user and their sessions in one transaction.

    Parts and activity the user created are kept, so the foreign keys
    reject the delete while any exist.
    """
    admin = require_user(db, ctx, roles=[UserRole.ADMIN])
    if user_id == admin.id:
        raise UnauthorizedError("Cannot delete your own account")

    user = db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)

    service_number = user.service_number
    db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    db.delete(user)
    db.commit()

    logger.info(f"User {service_number} deleted by {admin.service_number}")
    return OperationResult(success=True)
