"""
Spreadsheet import and export handlers.
"""
from datetime import date
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from spare_parts.api.router import ChannelRouter
from spare_parts.core.security import SessionContext, require_user
from spare_parts.error_handlers import service_boundary
from spare_parts.logging_config import get_logger
from spare_parts.logic import calculate_status, log_activity, normalize_code
from spare_parts.models import ActivityAction, Category, Part, UserRole
from spare_parts.schemas.import_export import (
    ColumnMapping,
    ExportResult,
    ImportPreview,
    ImportRequest,
    ImportResult,
)
from spare_parts.spreadsheets import format_status, read_spreadsheet, write_workbook
from spare_parts.utils import cell_text, parse_int

logger = get_logger("import_export")

import_router = ChannelRouter(prefix="import", tags=["Import"])
export_router = ChannelRouter(prefix="export", tags=["Export"])

WRITE_ROLES = (UserRole.ADMIN, UserRole.EDITOR)

# Spreadsheet row of the first data row: 1-based plus the header row
FIRST_DATA_ROW = 2


def default_export_filename(today: Optional[date] = None) -> str:
    return f"spare-parts-export-{(today or date.today()).isoformat()}.xlsx"


def _cell(row: dict[str, Any], column: Optional[str]) -> Any:
    return row.get(column) if column else None


@import_router.handle("preview", request=Optional[str], fallback=ImportPreview.failure)
@service_boundary("Failed to read Excel file", on_error=ImportPreview.failure)
def preview_import(db: Session, ctx: SessionContext, file_path: Optional[str]) -> ImportPreview:
    """Parse the chosen workbook so the caller can map its columns. None means nothing was chosen."""
    if not file_path:
        return ImportPreview.failure("No file selected")

    rows, columns = read_spreadsheet(file_path)
    if not rows:
        return ImportPreview.failure("Excel file is empty")

    return ImportPreview(success=True, data=rows, columns=columns)


def _import_row(
    db: Session,
    row: dict[str, Any],
    row_num: int,
    mapping: ColumnMapping,
    categories: dict[str, int],
    default_category_id: Optional[int],
    request: ImportRequest,
    user_id: int,
    warnings: list[str],
) -> Optional[str]:
    """Validate and insert one row. Returns an error message, or None when imported."""
    name = cell_text(_cell(row, mapping.name))
    part_number = cell_text(_cell(row, mapping.part_number))
    box_number = cell_text(_cell(row, mapping.box_number))
    category_name = cell_text(_cell(row, mapping.category))
    description = cell_text(_cell(row, mapping.description))
    quantity = parse_int(_cell(row, mapping.quantity), 0)
    # A blank, unreadable or zero threshold falls back to the default
    min_quantity = parse_int(_cell(row, mapping.min_quantity), 0) or request.default_min_quantity

    if not name:
        return f"Row {row_num}: Missing name"
    if not part_number:
        return f"Row {row_num}: Missing part number"
    if not box_number:
        return f"Row {row_num}: Missing box number"
    if quantity < 0:
        return f"Row {row_num}: Quantity cannot be negative"
    if min_quantity < 0:
        return f"Row {row_num}: Min quantity cannot be negative"

    category_id = default_category_id
    if category_name:
        found = categories.get(category_name.lower())
        if found:
            category_id = found
        elif default_category_id:
            warnings.append(f'Row {row_num}: Category "{category_name}" not found, using default')

    if not category_id:
        return f"Row {row_num}: No category specified and no default set"

    # Savepoint so a rejected row leaves earlier rows intact
    with db.begin_nested():
        db.add(Part(
            name=name,
            part_number=normalize_code(part_number),
            box_number=normalize_code(box_number),
            quantity=quantity,
            min_quantity=min_quantity,
            status=calculate_status(quantity, min_quantity).value,
            category_id=category_id,
            description=description,
            created_by=user_id,
        ))
    return None


@import_router.handle("excel", request=ImportRequest, fallback=ImportResult.failure)
@service_boundary("Import failed", on_error=ImportResult.failure)
def import_rows(db: Session, ctx: SessionContext, request: ImportRequest) -> ImportResult:
    """
    Import mapped spreadsheet rows as parts (editor or admin).

    Bad rows are reported and skipped; the rest import. One summary
    activity entry is written for the whole batch.
    """
    user = require_user(db, ctx, roles=WRITE_ROLES)

    default_category_id = request.default_category_id
    if default_category_id is not None and db.get(Category, default_category_id) is None:
        logger.warning(f"Default category {default_category_id} not found, importing without a default")
        default_category_id = None

    # First category wins when names collide case-insensitively
    categories: dict[str, int] = {}
    for category_id, name in db.execute(select(Category.id, Category.name).order_by(Category.id)).all():
        categories.setdefault(name.lower(), category_id)

    errors: list[str] = []
    warnings: list[str] = []
    imported = 0

    for index, row in enumerate(request.data):
        row_num = index + FIRST_DATA_ROW
        try:
            error = _import_row(
                db, row, row_num, request.column_mapping, categories, default_category_id, request, user.id, warnings
            )
        except SQLAlchemyError as e:
            logger.warning(f"Row {row_num} rejected by the database: {e}")
            error = f"Row {row_num}: {getattr(e, 'orig', None) or e}"
        except Exception as e:
            logger.error(f"Row {row_num} failed: {e}", exc_info=True)
            error = f"Row {row_num}: {e}"

        if error:
            errors.append(error)
        else:
            imported += 1

    log_activity(db, user.id, ActivityAction.IMPORTED, None, f"Imported {imported} parts from Excel")
    db.commit()

    logger.info(f"Import finished: {imported} imported, {len(errors)} errors, {len(warnings)} warnings")
    return ImportResult(success=True, imported=imported, errors=errors, warnings=warnings)


def _export_rows(db: Session) -> list[dict[str, Any]]:
    parts = db.execute(select(Part).order_by(Part.name, Part.id)).scalars().all()
    return [
        {
            "Part Name": p.name,
            "Part Number": p.part_number,
            "Box Number": p.box_number,
            "Quantity": p.quantity,
            "Status": format_status(p.status),
            "Min Quantity": p.min_quantity,
            "Category": p.category.name if p.category else "",
            "Category Type": p.category.type if p.category else "",
            "Description": p.description or "",
            "Created At": p.created_at.isoformat(sep=" ") if p.created_at else "",
            "Updated At": p.updated_at.isoformat(sep=" ") if p.updated_at else "",
        }
        for p in parts
    ]


@export_router.handle("excel", request=Optional[str], fallback=ExportResult.failure)
@service_boundary("Export failed", on_error=ExportResult.failure)
def export_all(db: Session, ctx: SessionContext, destination: Optional[str]) -> ExportResult:
    """
    Export every part to an .xlsx file at the chosen destination.

    A missing destination means the user cancelled the save dialog.
    """
    user = require_user(db, ctx)

    if not destination:
        return ExportResult.failure("Export cancelled")

    rows = _export_rows(db)

    path = write_workbook(rows, Path(destination))

    log_activity(db, user.id, ActivityAction.EXPORTED, None, f"Exported {len(rows)} parts to Excel")
    db.commit()

    logger.info(f"Exported {len(rows)} parts to {path}")
    return ExportResult(success=True, file_path=str(path))
