"""
Spreadsheet reading and writing for part import/export.

Uses pandas for parsing (openpyxl for .xlsx, xlrd for .xls) and
openpyxl to size the exported columns.
"""
from datetime import date, datetime
from pathlib import Path
from typing import Any, Union
import math

import pandas as pd
from openpyxl.utils import get_column_letter

from .error_handlers import SpreadsheetError
from .logging_config import get_logger

logger = get_logger("spreadsheets")

SUPPORTED_EXTENSIONS = {".xlsx", ".xls"}
SHEET_NAME = "Spare Parts"
MIN_COLUMN_WIDTH = 15

EXPORT_HEADERS = [
    "Part Name",
    "Part Number",
    "Box Number",
    "Quantity",
    "Status",
    "Min Quantity",
    "Category",
    "Category Type",
    "Description",
    "Created At",
    "Updated At",
]


def _plain(value: Any) -> Any:
    """Convert a pandas/numpy cell into a plain Python value."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    if hasattr(value, "item"):
        # numpy scalar
        return _plain(value.item())
    return value


def read_spreadsheet(path: Union[str, Path]) -> tuple[list[dict[str, Any]], list[str]]:
    """
    Read the first sheet of a workbook into row dicts keyed by header.

    Returns:
        (rows, columns) with blank rows dropped

    Raises:
        SpreadsheetError: If the file type is unsupported or unreadable
    """
    path = Path(path)
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise SpreadsheetError(f"Unsupported file type: {path.suffix or path.name}")

    try:
        frame = pd.read_excel(path, sheet_name=0)
    except Exception as e:
        logger.error(f"Failed to read spreadsheet {path}: {e}")
        raise SpreadsheetError("Failed to read Excel file", original_error=str(e))

    frame = frame.dropna(how="all")
    columns = [str(c) for c in frame.columns]
    frame.columns = columns

    rows = [
        {column: _plain(value) for column, value in record.items()}
        for record in frame.to_dict(orient="records")
    ]
    logger.info(f"Read {len(rows)} rows with {len(columns)} columns from {path.name}")
    return rows, columns


def format_status(status: str) -> str:
    """in_stock -> IN STOCK"""
    return status.replace("_", " ").upper()


def write_workbook(rows: list[dict[str, Any]], destination: Union[str, Path]) -> Path:
    """
    Write export rows to a single-sheet .xlsx with fixed headers.

    Every column is at least MIN_COLUMN_WIDTH characters wide.
    """
    destination = Path(destination)
    frame = pd.DataFrame(rows, columns=EXPORT_HEADERS)

    try:
        with pd.ExcelWriter(destination, engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            worksheet = writer.sheets[SHEET_NAME]
            for index, header in enumerate(EXPORT_HEADERS, start=1):
                worksheet.column_dimensions[get_column_letter(index)].width = max(len(header), MIN_COLUMN_WIDTH)
    except OSError as e:
        logger.error(f"Failed to write spreadsheet {destination}: {e}")
        raise SpreadsheetError(f"Failed to write Excel file: {e}", original_error=str(e))

    return destination
