"""
Pydantic schemas for the dashboard and activity log.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from spare_parts.core.config import settings


class ActivityUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    service_number: str
    name: str


class ActivityPart(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ActivityLogResponse(BaseModel):
    """Activity entry enriched with the acting user and, when present, the part."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    action: str
    part_id: Optional[int] = None
    details: Optional[str] = None
    created_at: datetime
    user: Optional[ActivityUser] = None
    part: Optional[ActivityPart] = None


class CategoryCount(BaseModel):
    category: str
    count: int


class DashboardStats(BaseModel):
    """Dashboard summary with key metrics."""
    total_parts: int = 0
    total_quantity: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0
    category_counts: list[CategoryCount] = []
    recent_activity: list[ActivityLogResponse] = []


class ActivityLogQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default_factory=lambda: settings.activity_page_size, ge=1, le=500)


class ActivityLogPage(BaseModel):
    data: list[ActivityLogResponse]
    total: int
