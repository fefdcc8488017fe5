"""Channel router aggregating every handler module."""
from spare_parts.api import auth, categories, dashboard, import_export, parts, system, users
from spare_parts.api.router import ChannelRouter

api_router = ChannelRouter()

# Include all handler modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(parts.router)
api_router.include_router(categories.router)
api_router.include_router(dashboard.router)
api_router.include_router(dashboard.activity_router)
api_router.include_router(import_export.import_router)
api_router.include_router(import_export.export_router)
api_router.include_router(system.router)

__all__ = ["api_router", "ChannelRouter"]
