# spare_parts/logic.py
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from .logging_config import get_logger
from .models import ActivityLog, Category, Part, PartStatus

logger = get_logger("logic")


def calculate_status(quantity: int, min_quantity: int) -> PartStatus:
    """
    Derive the stock status of a part.

    Zero is always out of stock; anything strictly below the threshold is
    low; reaching the threshold exactly counts as in stock.
    """
    if quantity == 0:
        return PartStatus.OUT_OF_STOCK
    if quantity < min_quantity:
        return PartStatus.LOW_STOCK
    return PartStatus.IN_STOCK


def normalize_code(value: Optional[str]) -> Optional[str]:
    """Part numbers, box numbers and service numbers are stored uppercase."""
    if value is None:
        return None
    return value.strip().upper()


def apply_part_changes(part: Part, changes: dict) -> Part:
    """
    Merge a partial update into a part and recompute its status.

    Status is computed from whichever quantity/min_quantity are current
    after the merge, so changing only one of them never leaves it stale.
    """
    for field in ("part_number", "box_number"):
        if changes.get(field) is not None:
            changes[field] = normalize_code(changes[field])

    for field, value in changes.items():
        setattr(part, field, value)

    part.status = calculate_status(part.quantity, part.min_quantity).value
    return part


def log_activity(
    db: Session,
    user_id: int,
    action: str,
    part_id: Optional[int] = None,
    details: Optional[str] = None,
) -> ActivityLog:
    """Append an audit row to the current transaction."""
    entry = ActivityLog(user_id=user_id, action=action, part_id=part_id, details=details)
    db.add(entry)
    logger.info(f"[ACTIVITY] user_id={user_id} action={action} part_id={part_id} details={details!r}")
    return entry


def purge_part_activity(db: Session, part_id: int) -> int:
    """Remove every activity row attached to a part ahead of deleting it."""
    result = db.execute(delete(ActivityLog).where(ActivityLog.part_id == part_id))
    return result.rowcount or 0


def inventory_totals(db: Session) -> dict:
    """Headline counts for the dashboard."""
    total_parts = db.scalar(select(func.count(Part.id))) or 0
    total_quantity = db.scalar(select(func.coalesce(func.sum(Part.quantity), 0))) or 0
    low_stock = db.scalar(
        select(func.count(Part.id)).where(Part.status == PartStatus.LOW_STOCK.value)
    ) or 0
    out_of_stock = db.scalar(
        select(func.count(Part.id)).where(Part.status == PartStatus.OUT_OF_STOCK.value)
    ) or 0

    return {
        "total_parts": total_parts,
        "total_quantity": total_quantity,
        "low_stock_count": low_stock,
        "out_of_stock_count": out_of_stock,
    }


def category_counts(db: Session) -> list[dict]:
    """Parts per category, empty categories included, busiest first."""
    part_count = func.count(Part.id)
    rows = db.execute(
        select(Category.name, part_count.label("count"))
        .select_from(Category)
        .outerjoin(Part, Part.category_id == Category.id)
        .group_by(Category.id, Category.name)
        .order_by(part_count.desc(), Category.name)
    ).all()
    return [{"category": name, "count": count or 0} for name, count in rows]
