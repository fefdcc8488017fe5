"""
SQLAlchemy models for the spare parts inventory.
Import all models here to ensure they're registered with SQLAlchemy.
"""
from spare_parts.models.user import User, UserRole
from spare_parts.models.category import Category, CategoryType
from spare_parts.models.part import Part, PartStatus
from spare_parts.models.activity_log import ActivityLog, ActivityAction
from spare_parts.models.session import UserSession

__all__ = [
    "User",
    "UserRole",
    "Category",
    "CategoryType",
    "Part",
    "PartStatus",
    "ActivityLog",
    "ActivityAction",
    "UserSession",
]
