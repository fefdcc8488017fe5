"""
Pydantic schemas for parts.
"""
from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from spare_parts.core.config import settings
from spare_parts.models.part import PartStatus
from spare_parts.schemas.category import CategoryResponse
from spare_parts.schemas.common import OperationResult


class PartSortField(str, Enum):
    """Columns a part listing may be sorted by."""
    NAME = "name"
    PART_NUMBER = "part_number"
    QUANTITY = "quantity"
    STATUS = "status"
    UPDATED_AT = "updated_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PartBase(BaseModel):
    """Base part schema."""
    name: str = Field(..., min_length=1, max_length=500)
    part_number: str = Field(..., min_length=1, max_length=100)
    box_number: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(..., ge=0)
    category_id: int
    description: Optional[str] = None


class PartCreate(PartBase):
    """Schema for creating a part. Status is always computed."""
    min_quantity: int = Field(default_factory=lambda: settings.default_min_quantity, ge=0)


class PartUpdate(BaseModel):
    """Schema for updating a part; only the supplied fields change."""
    id: int
    name: Optional[str] = Field(None, min_length=1, max_length=500)
    part_number: Optional[str] = Field(None, min_length=1, max_length=100)
    box_number: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = None
    description: Optional[str] = None
    min_quantity: Optional[int] = Field(None, ge=0)


class PartsFilter(BaseModel):
    """Filtering, sorting and pagination for part listings."""
    search: Optional[str] = None
    status: Optional[PartStatus] = None
    category_id: Optional[int] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default_factory=lambda: settings.default_page_size, ge=1, le=500)
    sort_by: PartSortField = PartSortField.UPDATED_AT
    sort_order: SortOrder = SortOrder.DESC


class PartCreator(BaseModel):
    """Who created a part."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    service_number: str
    name: str


class PartResponse(PartBase):
    """Schema for part response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    min_quantity: int
    status: PartStatus
    created_by: int
    created_at: datetime
    updated_at: datetime
    category: Optional[CategoryResponse] = None
    creator: Optional[PartCreator] = None


class PaginatedParts(BaseModel):
    """Paginated part list response."""
    data: list[PartResponse]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def empty(cls, error: str = None) -> "PaginatedParts":
        return cls(data=[], total=0, page=1, limit=settings.default_page_size, total_pages=0)


class PartResult(OperationResult):
    part: Optional[PartResponse] = None
