"""
Category handlers.
"""
from sqlalchemy import select
from sqlalchemy.orm import Session

from spare_parts.api.router import ChannelRouter
from spare_parts.core.security import SessionContext
from spare_parts.error_handlers import ResourceNotFoundError, service_boundary
from spare_parts.logging_config import get_logger
from spare_parts.models.category import Category
from spare_parts.schemas.category import CategoryCreate, CategoryResponse, CategoryResult, CategoryUpdate
from spare_parts.schemas.common import OperationResult

logger = get_logger("categories")

router = ChannelRouter(prefix="categories", tags=["Categories"])

CATEGORY_IN_USE = "Failed to delete category. Make sure no parts are using this category."


@router.handle("get-all", fallback=lambda _: [])
@service_boundary("Failed to load categories", on_error=lambda _: [])
def list_categories(db: Session, ctx: SessionContext) -> list[CategoryResponse]:
    """All categories ordered by type, then name."""
    categories = db.execute(
        select(Category).order_by(Category.type, Category.name)
    ).scalars().all()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.handle("create", request=CategoryCreate, fallback=CategoryResult.failure)
@service_boundary("Failed to create category", on_error=CategoryResult.failure)
def create_category(db: Session, ctx: SessionContext, request: CategoryCreate) -> CategoryResult:
    category = Category(
        name=request.name.strip(),
        type=request.type.value,
        description=request.description,
    )
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info(f"Category created: {category.name} ({category.type})")
    return CategoryResult(success=True, category=CategoryResponse.model_validate(category))


@router.handle("update", request=CategoryUpdate, fallback=CategoryResult.failure)
@service_boundary("Failed to update category", on_error=CategoryResult.failure)
def update_category(db: Session, ctx: SessionContext, request: CategoryUpdate) -> CategoryResult:
    """Patch the supplied fields of a category."""
    category = db.get(Category, request.id)
    if category is None:
        raise ResourceNotFoundError("Category", request.id)

    changes = request.model_dump(exclude_unset=True, exclude={"id"})
    if changes.get("name") is not None:
        category.name = changes["name"].strip()
    if changes.get("type") is not None:
        category.type = changes["type"].value
    if "description" in changes:
        category.description = changes["description"]

    db.commit()
    db.refresh(category)
    return CategoryResult(success=True, category=CategoryResponse.model_validate(category))


@router.handle("delete", request=int)
@service_boundary("Failed to delete category", integrity_message=CATEGORY_IN_USE)
def delete_category(db: Session, ctx: SessionContext, category_id: int) -> OperationResult:
    """Delete a category. Rejected by the store while any part still uses it."""
    category = db.get(Category, category_id)
    if category is None:
        raise ResourceNotFoundError("Category", category_id)

    name = category.name
    db.delete(category)
    db.commit()

    logger.info(f"Category deleted: {name}")
    return OperationResult(success=True)
