"""Tests for parts listing and CRUD."""
import pytest

from spare_parts.api import parts
from spare_parts.models import ActivityLog, Category, Part
from spare_parts.schemas.part import PartCreate, PartsFilter, PartUpdate

from tests.conftest import make_part


@pytest.fixture
def bolts(test_db):
    category = Category(name="Bolts", type="mechanical")
    test_db.add(category)
    test_db.commit()
    return category


class TestCreatePart:
    """Tests for part creation."""

    def test_create_normalizes_and_computes_status(self, test_db, editor_ctx, editor_user, bolts):
        result = parts.create_part(test_db, editor_ctx, PartCreate(
            name="M8 Bolt",
            part_number="blt-1",
            box_number="a1",
            quantity=3,
            min_quantity=5,
            category_id=bolts.id,
        ))

        assert result.success is True
        assert result.part.part_number == "BLT-1"
        assert result.part.box_number == "A1"
        assert result.part.status == "low_stock"
        assert result.part.created_by == editor_user.id
        assert result.part.category.name == "Bolts"
        assert result.part.creator.service_number == "EMP001"

    def test_create_logs_activity(self, test_db, admin_ctx, admin_user, bolts):
        result = parts.create_part(test_db, admin_ctx, PartCreate(
            name="M8 Bolt", part_number="BLT-1", box_number="A1", quantity=10, category_id=bolts.id
        ))

        entry = test_db.query(ActivityLog).one()
        assert entry.action == "created"
        assert entry.part_id == result.part.id
        assert entry.user_id == admin_user.id
        assert entry.details == "Created part: M8 Bolt"

    def test_zero_quantity_out_of_stock(self, test_db, editor_ctx, bolts):
        result = parts.create_part(test_db, editor_ctx, PartCreate(
            name="Bolt", part_number="B-0", box_number="A1", quantity=0, min_quantity=0, category_id=bolts.id
        ))

        assert result.part.status == "out_of_stock"

    def test_default_min_quantity(self, test_db, editor_ctx, bolts):
        result = parts.create_part(test_db, editor_ctx, PartCreate(
            name="Bolt", part_number="B-5", box_number="A1", quantity=5, category_id=bolts.id
        ))

        assert result.part.min_quantity == 5
        assert result.part.status == "in_stock"

    def test_viewer_unauthorized(self, test_db, viewer_ctx, bolts):
        result = parts.create_part(test_db, viewer_ctx, PartCreate(
            name="Bolt", part_number="B-1", box_number="A1", quantity=1, category_id=bolts.id
        ))

        assert result.success is False
        assert result.error == "Unauthorized"
        assert test_db.query(Part).count() == 0

    def test_signed_out(self, test_db, anonymous_ctx, bolts):
        result = parts.create_part(test_db, anonymous_ctx, PartCreate(
            name="Bolt", part_number="B-1", box_number="A1", quantity=1, category_id=bolts.id
        ))

        assert result.error == "Not authenticated"

    def test_unknown_category(self, test_db, editor_ctx):
        result = parts.create_part(test_db, editor_ctx, PartCreate(
            name="Bolt", part_number="B-1", box_number="A1", quantity=1, category_id=999
        ))

        assert result.success is False
        assert result.error == "Category not found"


class TestUpdatePart:
    """Tests for partial updates."""

    def test_quantity_only_recomputes_with_existing_minimum(self, test_db, editor_ctx, sample_parts):
        part = sample_parts[0]  # 150 / 50
        result = parts.update_part(test_db, editor_ctx, PartUpdate(id=part.id, quantity=49))

        assert result.success is True
        assert result.part.quantity == 49
        assert result.part.min_quantity == 50
        assert result.part.status == "low_stock"

    def test_minimum_only_recomputes_with_existing_quantity(self, test_db, editor_ctx, sample_parts):
        part = sample_parts[2]  # 8 / 5
        result = parts.update_part(test_db, editor_ctx, PartUpdate(id=part.id, min_quantity=10))

        assert result.part.quantity == 8
        assert result.part.status == "low_stock"

    def test_codes_uppercased(self, test_db, editor_ctx, sample_parts):
        result = parts.update_part(test_db, editor_ctx, PartUpdate(
            id=sample_parts[0].id, part_number="blt-x", box_number="b2"
        ))

        assert result.part.part_number == "BLT-X"
        assert result.part.box_number == "B2"

    def test_update_logs_activity(self, test_db, editor_ctx, editor_user, sample_parts):
        part = sample_parts[0]
        parts.update_part(test_db, editor_ctx, PartUpdate(id=part.id, name="Renamed Bolt"))

        entry = test_db.query(ActivityLog).one()
        assert entry.action == "updated"
        assert entry.user_id == editor_user.id
        assert entry.details == "Updated part: Renamed Bolt"

    def test_missing_part(self, test_db, editor_ctx):
        result = parts.update_part(test_db, editor_ctx, PartUpdate(id=999, quantity=1))

        assert result.success is False
        assert result.error == "Part not found"

    def test_viewer_unauthorized(self, test_db, viewer_ctx, sample_parts):
        result = parts.update_part(test_db, viewer_ctx, PartUpdate(id=sample_parts[0].id, quantity=1))

        assert result.error == "Unauthorized"
        assert test_db.get(Part, sample_parts[0].id).quantity == 150


class TestDeletePart:
    """Tests for part deletion."""

    def test_delete_purges_activity_and_logs(self, test_db, admin_ctx, admin_user, sample_parts):
        part = sample_parts[0]
        test_db.add(ActivityLog(user_id=admin_user.id, action="created", part_id=part.id))
        test_db.add(ActivityLog(user_id=admin_user.id, action="updated", part_id=part.id))
        test_db.commit()

        result = parts.delete_part(test_db, admin_ctx, part.id)

        assert result.success is True
        assert test_db.get(Part, part.id) is None
        entries = test_db.query(ActivityLog).all()
        assert len(entries) == 1
        assert entries[0].action == "deleted"
        assert entries[0].part_id is None
        assert entries[0].details == "Deleted part: M8x30 Hex Bolt (BLT-M8-30)"

    def test_editor_cannot_delete(self, test_db, editor_ctx, sample_parts):
        result = parts.delete_part(test_db, editor_ctx, sample_parts[0].id)

        assert result.success is False
        assert result.error == "Unauthorized"
        assert test_db.get(Part, sample_parts[0].id) is not None

    def test_missing_part(self, test_db, admin_ctx):
        result = parts.delete_part(test_db, admin_ctx, 999)

        assert result.error == "Part not found"


class TestGetPart:

    def test_found(self, test_db, sample_parts, anonymous_ctx):
        part = parts.get_part(test_db, anonymous_ctx, sample_parts[2].id)

        assert part.name == '1" Ball Valve'
        assert part.category.name == "Valves"
        assert part.creator.name == "System Administrator"

    def test_missing_returns_none(self, test_db, anonymous_ctx):
        assert parts.get_part(test_db, anonymous_ctx, 999) is None


class TestListParts:
    """Tests for filtering, sorting and pagination."""

    def test_status_filter_pagination(self, test_db, admin_user, bolts, anonymous_ctx):
        for i in range(25):
            make_part(test_db, admin_user, bolts, f"Empty {i}", f"E-{i}", quantity=0)
        for i in range(5):
            make_part(test_db, admin_user, bolts, f"Full {i}", f"F-{i}", quantity=50)

        result = parts.list_parts(test_db, anonymous_ctx, PartsFilter(status="out_of_stock", page=1, limit=10))

        assert result.total == 25
        assert result.total_pages == 3
        assert len(result.data) == 10
        assert all(p.status == "out_of_stock" for p in result.data)

    def test_last_page(self, test_db, admin_user, bolts, anonymous_ctx):
        for i in range(25):
            make_part(test_db, admin_user, bolts, f"Part {i}", f"P-{i}")

        result = parts.list_parts(test_db, anonymous_ctx, PartsFilter(page=3, limit=10))

        assert len(result.data) == 5
        assert result.page == 3

    def test_search_matches_any_code(self, test_db, sample_parts, anonymous_ctx):
        by_name = parts.list_parts(test_db, anonymous_ctx, PartsFilter(search="hex bolt"))
        by_number = parts.list_parts(test_db, anonymous_ctx, PartsFilter(search="vlv"))
        by_box = parts.list_parts(test_db, anonymous_ctx, PartsFilter(search="d4-"))

        assert by_name.total == 2
        assert [p.part_number for p in by_number.data] == ["VLV-BL-1"]
        assert [p.part_number for p in by_box.data] == ["FUS-10A"]

    def test_search_wildcards_literal(self, test_db, sample_parts, anonymous_ctx):
        result = parts.list_parts(test_db, anonymous_ctx, PartsFilter(search="%"))

        assert result.total == 0

    def test_category_filter(self, test_db, sample_parts, sample_categories, anonymous_ctx):
        result = parts.list_parts(test_db, anonymous_ctx, PartsFilter(category_id=sample_categories[0].id))

        assert result.total == 2

    def test_sort_by_name_ascending(self, test_db, sample_parts, anonymous_ctx):
        result = parts.list_parts(test_db, anonymous_ctx, PartsFilter(sort_by="name", sort_order="asc"))

        names = [p.name for p in result.data]
        assert names == sorted(names)

    def test_sort_by_quantity_descending(self, test_db, sample_parts, anonymous_ctx):
        result = parts.list_parts(test_db, anonymous_ctx, PartsFilter(sort_by="quantity", sort_order="desc"))

        assert [p.quantity for p in result.data] == [150, 20, 8, 0]

    def test_defaults(self, test_db, sample_parts, anonymous_ctx):
        result = parts.list_parts(test_db, anonymous_ctx, PartsFilter())

        assert result.page == 1
        assert result.limit == 20
        assert result.total == 4
        assert result.total_pages == 1

    def test_empty_store(self, test_db, anonymous_ctx):
        result = parts.list_parts(test_db, anonymous_ctx, PartsFilter())

        assert result.data == []
        assert result.total == 0
        assert result.total_pages == 0
