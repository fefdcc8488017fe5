"""
Pydantic schemas for categories.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from spare_parts.models.category import CategoryType
from spare_parts.schemas.common import OperationResult


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: CategoryType
    description: Optional[str] = None


class CategoryCreate(CategoryBase):
    """Schema for creating a category."""


class CategoryUpdate(BaseModel):
    """Partial patch of a category."""
    id: int
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[CategoryType] = None
    description: Optional[str] = None


class CategoryResponse(CategoryBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class CategoryResult(OperationResult):
    category: Optional[CategoryResponse] = None
