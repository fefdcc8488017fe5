"""
Activity log model: append-only audit trail of inventory actions.
"""
from typing import Optional

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spare_parts.core.database import Base


class ActivityAction:
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    IMPORTED = "imported"
    EXPORTED = "exported"


class ActivityLog(Base):
    """One row per mutating action. Never updated."""

    __tablename__ = "activity_logs"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    # Empty for bulk actions and for deletions
    part_id: Mapped[Optional[int]] = mapped_column(ForeignKey("parts.id"), nullable=True)
    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    user = relationship("User", lazy="joined")
    part = relationship("Part", lazy="joined")

    __table_args__ = (
        Index("idx_activity_logs_user", "user_id"),
        Index("idx_activity_logs_part", "part_id"),
    )

    def __repr__(self) -> str:
        return f"<ActivityLog(id={self.id}, action={self.action}, part_id={self.part_id})>"
