"""
Dashboard statistics and activity log handlers.
"""
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from spare_parts.api.router import ChannelRouter
from spare_parts.core.config import settings
from spare_parts.core.security import SessionContext
from spare_parts.error_handlers import service_boundary
from spare_parts.logic import category_counts, inventory_totals
from spare_parts.models import ActivityLog
from spare_parts.schemas.dashboard import (
    ActivityLogPage,
    ActivityLogQuery,
    ActivityLogResponse,
    CategoryCount,
    DashboardStats,
)

router = ChannelRouter(prefix="dashboard", tags=["Dashboard"])
activity_router = ChannelRouter(prefix="activity", tags=["Activity"])


def _newest_activity(offset: int, limit: int):
    return (
        select(ActivityLog)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .offset(offset)
        .limit(limit)
    )


@router.handle("stats", fallback=lambda _: DashboardStats())
@service_boundary("Failed to load dashboard statistics", on_error=lambda _: DashboardStats())
def get_stats(db: Session, ctx: SessionContext) -> DashboardStats:
    """
    Get the dashboard summary.

    Returns part counts, summed quantity, low/out-of-stock counts, parts
    per category and the most recent activity.
    """
    totals = inventory_totals(db)
    recent = db.execute(_newest_activity(0, settings.recent_activity_limit)).scalars().all()

    return DashboardStats(
        **totals,
        category_counts=[CategoryCount(**row) for row in category_counts(db)],
        recent_activity=[ActivityLogResponse.model_validate(entry) for entry in recent],
    )


@activity_router.handle("log", request=ActivityLogQuery, fallback=lambda _: ActivityLogPage(data=[], total=0))
@service_boundary("Failed to load activity log", on_error=lambda _: ActivityLogPage(data=[], total=0))
def get_activity_log(db: Session, ctx: SessionContext, query: ActivityLogQuery) -> ActivityLogPage:
    """Activity entries, newest first."""
    total = db.scalar(select(func.count(ActivityLog.id))) or 0
    entries = db.execute(
        _newest_activity((query.page - 1) * query.limit, query.limit)
    ).scalars().all()

    return ActivityLogPage(
        data=[ActivityLogResponse.model_validate(entry) for entry in entries],
        total=total,
    )
