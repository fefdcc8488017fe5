"""
Pydantic schemas for spreadsheet import and export.
"""
from typing import Any, Optional
from pydantic import BaseModel, Field

from spare_parts.core.config import settings
from spare_parts.schemas.common import OperationResult


class ColumnMapping(BaseModel):
    """Which spreadsheet column feeds each part field. Unmapped fields stay empty."""
    name: Optional[str] = None
    part_number: Optional[str] = None
    box_number: Optional[str] = None
    quantity: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    min_quantity: Optional[str] = None


class ImportPreview(OperationResult):
    data: Optional[list[dict[str, Any]]] = None
    columns: Optional[list[str]] = None


class ImportRequest(BaseModel):
    data: list[dict[str, Any]]
    column_mapping: ColumnMapping
    default_category_id: Optional[int] = None
    default_min_quantity: int = Field(default_factory=lambda: settings.default_min_quantity, ge=0)


class ImportResult(BaseModel):
    """Partial success is the normal outcome: some rows import, others are reported."""
    success: bool
    imported: int = 0
    errors: list[str] = []
    warnings: list[str] = []

    @classmethod
    def failure(cls, error: str) -> "ImportResult":
        return cls(success=False, imported=0, errors=[error], warnings=[])


class ExportResult(OperationResult):
    file_path: Optional[str] = None
