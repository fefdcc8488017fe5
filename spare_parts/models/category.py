"""
Category model: the fixed four-domain taxonomy parts are filed under.
"""
import enum
from typing import Optional

from sqlalchemy import CheckConstraint, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from spare_parts.core.database import Base


class CategoryType(str, enum.Enum):
    MECHANICAL = "mechanical"
    PIPING = "piping"
    ELECTRICAL = "electrical"
    SPECIALTY = "specialty"


class Category(Base):
    """Part category. Names are not unique at the schema level."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("type IN ('mechanical', 'piping', 'electrical', 'specialty')", name="type"),
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name}, type={self.type})>"
