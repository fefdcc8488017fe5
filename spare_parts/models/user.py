"""
User model for authentication and authorization.
"""
import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from spare_parts.core.database import Base


class UserRole(str, enum.Enum):
    """User roles for the inventory system."""
    ADMIN = "admin"
    EDITOR = "editor"
    USER = "user"


class User(Base):
    """User account model."""

    __tablename__ = "users"

    # Credentials; service numbers are stored uppercase
    service_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Role and permissions
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value, server_default=UserRole.USER.value, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'editor', 'user')", name="role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, service_number={self.service_number}, role={self.role})>"
