"""
Parts handlers: listing, lookup and CRUD with status recomputation.
"""
from typing import Optional

from sqlalchemy import and_, asc, desc, func, or_, select
from sqlalchemy.orm import Session

from spare_parts.api.router import ChannelRouter
from spare_parts.core.security import SessionContext, require_user
from spare_parts.error_handlers import ResourceNotFoundError, service_boundary
from spare_parts.logging_config import get_logger
from spare_parts.logic import (
    apply_part_changes,
    calculate_status,
    log_activity,
    normalize_code,
    purge_part_activity,
)
from spare_parts.models import ActivityAction, Category, Part, UserRole
from spare_parts.schemas.common import OperationResult
from spare_parts.schemas.part import (
    PaginatedParts,
    PartCreate,
    PartResponse,
    PartResult,
    PartSortField,
    PartsFilter,
    PartUpdate,
    SortOrder,
)
from spare_parts.utils import total_pages, utcnow

logger = get_logger("parts")

router = ChannelRouter(prefix="parts", tags=["Parts"])

WRITE_ROLES = (UserRole.ADMIN, UserRole.EDITOR)

SORT_COLUMNS = {
    PartSortField.NAME: Part.name,
    PartSortField.PART_NUMBER: Part.part_number,
    PartSortField.QUANTITY: Part.quantity,
    PartSortField.STATUS: Part.status,
    PartSortField.UPDATED_AT: Part.updated_at,
}


def _filter_conditions(filters: PartsFilter) -> list:
    conditions = []

    if filters.search:
        term = filters.search.strip()
        if term:
            conditions.append(
                or_(
                    Part.name.icontains(term, autoescape=True),
                    Part.part_number.icontains(term, autoescape=True),
                    Part.box_number.icontains(term, autoescape=True),
                )
            )

    if filters.status is not None:
        conditions.append(Part.status == filters.status.value)

    if filters.category_id is not None:
        conditions.append(Part.category_id == filters.category_id)

    return conditions


def _require_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise ResourceNotFoundError("Category", category_id)
    return category


def _require_part(db: Session, part_id: int) -> Part:
    part = db.get(Part, part_id)
    if part is None:
        raise ResourceNotFoundError("Part", part_id)
    return part


@router.handle("get-all", request=PartsFilter, fallback=PaginatedParts.empty)
@service_boundary("Failed to load parts", on_error=PaginatedParts.empty)
def list_parts(db: Session, ctx: SessionContext, filters: PartsFilter) -> PaginatedParts:
    """
    List parts with filtering, sorting and pagination.

    - **search**: Case-insensitive match on name, part number or box number
    - **status**: Exact stock status
    - **category_id**: Exact category
    - **sort_by** / **sort_order**: Defaults to most recently updated first
    """
    conditions = _filter_conditions(filters)
    where_clause = and_(*conditions) if conditions else None

    # Get total count
    count_query = select(func.count(Part.id))
    if where_clause is not None:
        count_query = count_query.where(where_clause)
    total = db.scalar(count_query) or 0

    # Get paginated results; id keeps equal sort keys in a stable order
    order = asc if filters.sort_order == SortOrder.ASC else desc
    query = select(Part)
    if where_clause is not None:
        query = query.where(where_clause)
    query = (
        query.order_by(order(SORT_COLUMNS[filters.sort_by]), order(Part.id))
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
    )
    parts = db.execute(query).scalars().all()

    return PaginatedParts(
        data=[PartResponse.model_validate(p) for p in parts],
        total=total,
        page=filters.page,
        limit=filters.limit,
        total_pages=total_pages(total, filters.limit),
    )


@router.handle("get-by-id", request=int, fallback=lambda _: None)
@service_boundary("Failed to load part", on_error=lambda _: None)
def get_part(db: Session, ctx: SessionContext, part_id: int) -> Optional[PartResponse]:
    """Get a part with its category and creator, or None if it does not exist."""
    part = db.get(Part, part_id)
    if part is None:
        return None
    return PartResponse.model_validate(part)


@router.handle("create", request=PartCreate, fallback=PartResult.failure)
@service_boundary("Failed to create part", on_error=PartResult.failure)
def create_part(db: Session, ctx: SessionContext, request: PartCreate) -> PartResult:
    """
    Create a new part (editor or admin).

    Part and box numbers are uppercased and the status is computed from
    quantity and min_quantity.
    """
    user = require_user(db, ctx, roles=WRITE_ROLES)
    _require_category(db, request.category_id)

    part = Part(
        name=request.name.strip(),
        part_number=normalize_code(request.part_number),
        box_number=normalize_code(request.box_number),
        quantity=request.quantity,
        min_quantity=request.min_quantity,
        status=calculate_status(request.quantity, request.min_quantity).value,
        category_id=request.category_id,
        description=request.description,
        created_by=user.id,
    )
    db.add(part)
    db.flush()

    log_activity(db, user.id, ActivityAction.CREATED, part.id, f"Created part: {part.name}")
    db.commit()
    db.refresh(part)

    logger.info(f"Part created: {part.part_number} (status={part.status})")
    return PartResult(success=True, part=PartResponse.model_validate(part))


@router.handle("update", request=PartUpdate, fallback=PartResult.failure)
@service_boundary("Failed to update part", on_error=PartResult.failure)
def update_part(db: Session, ctx: SessionContext, request: PartUpdate) -> PartResult:
    """Update the supplied fields of a part (editor or admin) and recompute its status."""
    user = require_user(db, ctx, roles=WRITE_ROLES)
    part = _require_part(db, request.id)

    changes = request.model_dump(exclude_unset=True, exclude={"id"})
    # Only the description may be cleared; a None elsewhere means "unchanged"
    changes = {k: v for k, v in changes.items() if v is not None or k == "description"}

    if "category_id" in changes:
        _require_category(db, changes["category_id"])
    if "name" in changes:
        changes["name"] = changes["name"].strip()

    apply_part_changes(part, changes)
    part.updated_at = utcnow()

    log_activity(db, user.id, ActivityAction.UPDATED, part.id, f"Updated part: {part.name}")
    db.commit()
    db.refresh(part)

    logger.info(f"Part updated: {part.part_number} (status={part.status})")
    return PartResult(success=True, part=PartResponse.model_validate(part))


@router.handle("delete", request=int)
@service_boundary("Failed to delete part")
def delete_part(db: Session, ctx: SessionContext, part_id: int) -> OperationResult:
    """
    Delete a part (admin only).

    The part's activity rows go first, then the part; the deletion itself
    is logged without a part reference. All of it commits together.
    """
    user = require_user(db, ctx, roles=[UserRole.ADMIN])
    part = _require_part(db, part_id)
    name, part_number = part.name, part.part_number

    purged = purge_part_activity(db, part_id)
    db.delete(part)
    log_activity(db, user.id, ActivityAction.DELETED, None, f"Deleted part: {name} ({part_number})")
    db.commit()

    logger.info(f"Part deleted: {part_number} ({purged} activity rows removed)")
    return OperationResult(success=True)
