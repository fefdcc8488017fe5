"""Tests for spreadsheet import and export."""
from datetime import date

import pandas as pd
import pytest
from openpyxl import load_workbook

from spare_parts.api import import_export
from spare_parts.error_handlers import SpreadsheetError
from spare_parts.models import ActivityLog, Part
from spare_parts.schemas.import_export import ColumnMapping, ImportRequest
from spare_parts.spreadsheets import EXPORT_HEADERS, format_status, read_spreadsheet

MAPPING = ColumnMapping(
    name="Name",
    part_number="Part No",
    box_number="Box",
    quantity="Qty",
    category="Category",
    min_quantity="Min",
)


@pytest.fixture
def workbook(tmp_path):
    path = tmp_path / "parts.xlsx"
    pd.DataFrame([
        {"Name": "Hex Bolt", "Part No": "blt-1", "Box": "a1", "Qty": 10, "Category": "Bolts", "Min": 5},
        {"Name": None, "Part No": "blt-2", "Box": "a2", "Qty": 4, "Category": "Bolts", "Min": 5},
        {"Name": "Fuse 10A", "Part No": "fus-1", "Box": "d4", "Qty": 2, "Category": "fuses", "Min": None},
    ]).to_excel(path, index=False)
    return path


class TestReadSpreadsheet:

    def test_rows_and_columns(self, workbook):
        rows, columns = read_spreadsheet(workbook)

        assert columns == ["Name", "Part No", "Box", "Qty", "Category", "Min"]
        assert len(rows) == 3
        assert rows[0]["Name"] == "Hex Bolt"
        assert rows[0]["Qty"] == 10
        assert rows[1]["Name"] is None
        assert rows[2]["Min"] is None

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "parts.csv"
        path.write_text("a,b\n1,2\n")

        with pytest.raises(SpreadsheetError):
            read_spreadsheet(path)

    def test_format_status(self):
        assert format_status("low_stock") == "LOW STOCK"
        assert format_status("in_stock") == "IN STOCK"


class TestPreviewImport:

    def test_preview(self, test_db, editor_ctx, workbook):
        result = import_export.preview_import(test_db, editor_ctx, str(workbook))

        assert result.success is True
        assert result.columns == ["Name", "Part No", "Box", "Qty", "Category", "Min"]
        assert len(result.data) == 3

    def test_no_file_selected(self, test_db, editor_ctx):
        result = import_export.preview_import(test_db, editor_ctx, None)

        assert result.success is False
        assert result.error == "No file selected"

    def test_empty_workbook(self, test_db, editor_ctx, tmp_path):
        path = tmp_path / "empty.xlsx"
        pd.DataFrame(columns=["Name", "Qty"]).to_excel(path, index=False)

        result = import_export.preview_import(test_db, editor_ctx, str(path))

        assert result.success is False
        assert result.error == "Excel file is empty"

    def test_unreadable_file(self, test_db, editor_ctx, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"not a workbook")

        result = import_export.preview_import(test_db, editor_ctx, str(path))

        assert result.success is False
        assert result.error == "Failed to read Excel file"


class TestImportRows:
    """Tests for importing mapped rows."""

    def test_partial_import(self, test_db, editor_ctx, editor_user, sample_categories, workbook):
        """Test that a row missing its name is reported while the others import."""
        rows, _ = read_spreadsheet(workbook)

        result = import_export.import_rows(test_db, editor_ctx, ImportRequest(
            data=rows, column_mapping=MAPPING, default_min_quantity=3
        ))

        assert result.success is True
        assert result.imported == 2
        assert result.errors == ["Row 3: Missing name"]
        assert result.warnings == []

        imported = {p.part_number: p for p in test_db.query(Part).all()}
        assert set(imported) == {"BLT-1", "FUS-1"}
        assert imported["BLT-1"].box_number == "A1"
        assert imported["BLT-1"].status == "in_stock"
        assert imported["BLT-1"].created_by == editor_user.id
        # Case-insensitive category match, default minimum applied
        assert imported["FUS-1"].category_id == sample_categories[2].id
        assert imported["FUS-1"].min_quantity == 3
        assert imported["FUS-1"].status == "low_stock"

    def test_single_summary_activity(self, test_db, editor_ctx, sample_categories, workbook):
        rows, _ = read_spreadsheet(workbook)
        import_export.import_rows(test_db, editor_ctx, ImportRequest(data=rows, column_mapping=MAPPING))

        entry = test_db.query(ActivityLog).one()
        assert entry.action == "imported"
        assert entry.part_id is None
        assert entry.details == "Imported 2 parts from Excel"

    def test_unknown_category_uses_default(self, test_db, editor_ctx, sample_categories):
        filters = sample_categories[3]
        rows = [{"Name": "Gasket", "Part No": "g-1", "Box": "b1", "Qty": "7", "Category": "Seals"}]

        result = import_export.import_rows(test_db, editor_ctx, ImportRequest(
            data=rows, column_mapping=MAPPING, default_category_id=filters.id
        ))

        assert result.imported == 1
        assert result.warnings == ['Row 2: Category "Seals" not found, using default']
        part = test_db.query(Part).one()
        assert part.category_id == filters.id
        assert part.quantity == 7

    def test_no_category_and_no_default(self, test_db, editor_ctx, sample_categories):
        rows = [{"Name": "Gasket", "Part No": "g-1", "Box": "b1", "Qty": 1}]

        result = import_export.import_rows(test_db, editor_ctx, ImportRequest(data=rows, column_mapping=MAPPING))

        assert result.imported == 0
        assert result.errors == ["Row 2: No category specified and no default set"]

    def test_missing_codes(self, test_db, editor_ctx, sample_categories):
        rows = [
            {"Name": "A", "Box": "b1", "Category": "Bolts"},
            {"Name": "B", "Part No": "p-2", "Category": "Bolts"},
        ]

        result = import_export.import_rows(test_db, editor_ctx, ImportRequest(data=rows, column_mapping=MAPPING))

        assert result.errors == ["Row 2: Missing part number", "Row 3: Missing box number"]

    def test_unparseable_quantity_defaults_to_zero(self, test_db, editor_ctx, sample_categories):
        rows = [{"Name": "A", "Part No": "p-1", "Box": "b1", "Qty": "lots", "Category": "Bolts"}]

        import_export.import_rows(test_db, editor_ctx, ImportRequest(data=rows, column_mapping=MAPPING))

        part = test_db.query(Part).one()
        assert part.quantity == 0
        assert part.status == "out_of_stock"

    def test_failing_row_does_not_abort_batch(self, test_db, editor_ctx, sample_categories):
        """Test that an unexpected error on one row is reported while the others import."""

        class UnreadableCell:
            def __str__(self):
                raise ValueError("unreadable cell")

        rows = [
            {"Name": "Hex Bolt", "Part No": "blt-1", "Box": "a1", "Qty": 3, "Category": "Bolts"},
            {"Name": UnreadableCell(), "Part No": "blt-2", "Box": "a2", "Qty": 1, "Category": "Bolts"},
        ]

        result = import_export.import_rows(test_db, editor_ctx, ImportRequest(data=rows, column_mapping=MAPPING))

        assert result.success is True
        assert result.imported == 1
        assert result.errors == ["Row 3: unreadable cell"]
        assert [p.part_number for p in test_db.query(Part).all()] == ["BLT-1"]

    def test_infinite_quantity_defaults_to_zero(self, test_db, editor_ctx, sample_categories):
        rows = [
            {"Name": "Hex Bolt", "Part No": "blt-1", "Box": "a1", "Qty": 3, "Category": "Bolts"},
            {"Name": "Hex Nut", "Part No": "nut-1", "Box": "a2", "Qty": float("inf"), "Category": "Bolts"},
        ]

        result = import_export.import_rows(test_db, editor_ctx, ImportRequest(data=rows, column_mapping=MAPPING))

        assert result.imported == 2
        assert result.errors == []
        assert test_db.query(Part).filter_by(part_number="NUT-1").one().quantity == 0

    def test_quantity_with_unit_suffix(self, test_db, editor_ctx, sample_categories):
        rows = [{"Name": "Hex Bolt", "Part No": "blt-1", "Box": "a1", "Qty": "12 pcs", "Category": "Bolts"}]

        import_export.import_rows(test_db, editor_ctx, ImportRequest(data=rows, column_mapping=MAPPING))

        assert test_db.query(Part).one().quantity == 12

    def test_unknown_default_category_ignored(self, test_db, editor_ctx, sample_categories):
        """Test that a missing default category only affects rows that need it."""
        rows = [
            {"Name": "Hex Bolt", "Part No": "blt-1", "Box": "a1", "Qty": 3, "Category": "Bolts"},
            {"Name": "Gasket", "Part No": "g-1", "Box": "b1", "Qty": 1, "Category": "Seals"},
            {"Name": "Spacer", "Part No": "s-1", "Box": "b2", "Qty": 1},
        ]

        result = import_export.import_rows(test_db, editor_ctx, ImportRequest(
            data=rows, column_mapping=MAPPING, default_category_id=9999
        ))

        assert result.success is True
        assert result.imported == 1
        assert result.warnings == []
        assert result.errors == [
            "Row 3: No category specified and no default set",
            "Row 4: No category specified and no default set",
        ]
        assert test_db.query(Part).one().category_id == sample_categories[0].id

    def test_viewer_unauthorized(self, test_db, viewer_ctx, sample_categories):
        rows = [{"Name": "A", "Part No": "p-1", "Box": "b1", "Category": "Bolts"}]

        result = import_export.import_rows(test_db, viewer_ctx, ImportRequest(data=rows, column_mapping=MAPPING))

        assert result.success is False
        assert result.imported == 0
        assert result.errors == ["Unauthorized"]
        assert test_db.query(Part).count() == 0


class TestExport:
    """Tests for exporting parts to a workbook."""

    def test_export(self, test_db, viewer_ctx, viewer_user, sample_parts, tmp_path):
        destination = tmp_path / "export.xlsx"

        result = import_export.export_all(test_db, viewer_ctx, str(destination))

        assert result.success is True
        assert result.file_path == str(destination)

        sheet = load_workbook(destination)["Spare Parts"]
        rows = list(sheet.iter_rows(values_only=True))
        assert list(rows[0]) == EXPORT_HEADERS
        assert [r[0] for r in rows[1:]] == sorted(p.name for p in sample_parts)
        statuses = {r[1]: r[4] for r in rows[1:]}
        assert statuses["FUS-10A"] == "OUT OF STOCK"
        assert statuses["BLT-M10-50"] == "LOW STOCK"
        assert sheet.column_dimensions["A"].width == 15

        entry = test_db.query(ActivityLog).one()
        assert entry.action == "exported"
        assert entry.user_id == viewer_user.id
        assert entry.details == "Exported 4 parts to Excel"

    def test_cancelled(self, test_db, viewer_ctx):
        result = import_export.export_all(test_db, viewer_ctx, None)

        assert result.success is False
        assert result.error == "Export cancelled"

    def test_signed_out(self, test_db, anonymous_ctx, tmp_path):
        destination = tmp_path / "export.xlsx"
        result = import_export.export_all(test_db, anonymous_ctx, str(destination))

        assert result.error == "Not authenticated"
        assert not destination.exists()

    def test_default_filename(self):
        assert import_export.default_export_filename(date(2026, 3, 9)) == "spare-parts-export-2026-03-09.xlsx"
