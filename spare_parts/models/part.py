"""
Part model for spare parts inventory.
"""
import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spare_parts.core.database import Base


class PartStatus(str, enum.Enum):
    """Stock status, always derived from quantity and min_quantity."""
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class Part(Base):
    """Spare part inventory record."""

    __tablename__ = "parts"

    # Identification; part and box numbers are stored uppercase
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    part_number: Mapped[str] = mapped_column(String(100), nullable=False)
    box_number: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Stock information
    quantity: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    min_quantity: Mapped[int] = mapped_column(Integer, default=5, server_default="5", nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=PartStatus.OUT_OF_STOCK.value,
        server_default=PartStatus.OUT_OF_STOCK.value,
        nullable=False
    )

    # Foreign keys
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False)
    created_by: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False
    )

    # Relationships (many-to-one only; deletes never cascade from the parent side)
    category = relationship("Category", lazy="joined")
    creator = relationship("User", lazy="joined")

    # Indexes
    __table_args__ = (
        CheckConstraint("status IN ('in_stock', 'low_stock', 'out_of_stock')", name="status"),
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
        Index("idx_parts_category", "category_id"),
        Index("idx_parts_status", "status"),
        Index("idx_parts_part_number", "part_number"),
        Index("idx_parts_box_number", "box_number"),
    )

    def __repr__(self) -> str:
        return f"<Part(id={self.id}, part_number={self.part_number}, name={self.name}, qty={self.quantity})>"
