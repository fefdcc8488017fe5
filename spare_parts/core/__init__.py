"""Core application modules."""
from spare_parts.core.config import settings, get_settings
from spare_parts.core.database import Base, get_db_context, init_db, close_db

__all__ = [
    "settings",
    "get_settings",
    "Base",
    "get_db_context",
    "init_db",
    "close_db",
]
