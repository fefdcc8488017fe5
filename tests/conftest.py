"""Shared test fixtures for all tests."""
import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spare_parts.core.database import create_db_engine, init_db
from spare_parts.core.security import SessionContext, create_session, get_password_hash
from spare_parts.logic import calculate_status
from spare_parts.models import Category, CategoryType, Part, User, UserRole


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory SQLite database, foreign keys on, for each test."""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def test_db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def make_user(db, service_number, role, password="secret123", name=None):
    user = User(
        service_number=service_number,
        name=name or f"{role.value.title()} {service_number}",
        password_hash=get_password_hash(password),
        role=role.value,
    )
    db.add(user)
    db.commit()
    return user


def login_as(db, user) -> SessionContext:
    """Signed-in context for a user without going through the login handler."""
    user_session = create_session(db, user.id)
    db.commit()
    return SessionContext(user_session.token)


@pytest.fixture
def admin_user(test_db):
    return make_user(test_db, "ADMIN001", UserRole.ADMIN, password="admin123", name="System Administrator")


@pytest.fixture
def editor_user(test_db):
    return make_user(test_db, "EMP001", UserRole.EDITOR, password="editor123", name="John Editor")


@pytest.fixture
def viewer_user(test_db):
    return make_user(test_db, "EMP002", UserRole.USER, password="user123", name="Jane Viewer")


@pytest.fixture
def admin_ctx(test_db, admin_user):
    return login_as(test_db, admin_user)


@pytest.fixture
def editor_ctx(test_db, editor_user):
    return login_as(test_db, editor_user)


@pytest.fixture
def viewer_ctx(test_db, viewer_user):
    return login_as(test_db, viewer_user)


@pytest.fixture
def anonymous_ctx():
    return SessionContext()


@pytest.fixture
def sample_categories(test_db):
    """One category of each type."""
    categories = [
        Category(name="Bolts", type=CategoryType.MECHANICAL.value, description="Various bolt sizes and types"),
        Category(name="Valves", type=CategoryType.PIPING.value, description="Ball valves, gate valves"),
        Category(name="Fuses", type=CategoryType.ELECTRICAL.value, description="Cartridge, blade fuses"),
        Category(name="Filters", type=CategoryType.SPECIALTY.value, description="Oil, air, water filters"),
    ]
    for category in categories:
        test_db.add(category)
    test_db.commit()
    return categories


def make_part(db, creator, category, name, part_number, box_number="A1-01", quantity=10, min_quantity=5):
    part = Part(
        name=name,
        part_number=part_number,
        box_number=box_number,
        quantity=quantity,
        min_quantity=min_quantity,
        status=calculate_status(quantity, min_quantity).value,
        category_id=category.id,
        created_by=creator.id,
    )
    db.add(part)
    db.commit()
    return part


@pytest.fixture
def sample_parts(test_db, admin_user, sample_categories):
    """Parts covering all three stock statuses."""
    bolts, valves, fuses, filters = sample_categories
    return [
        make_part(test_db, admin_user, bolts, "M8x30 Hex Bolt", "BLT-M8-30", "A1-01", 150, 50),
        make_part(test_db, admin_user, bolts, "M10x50 Hex Bolt", "BLT-M10-50", "A1-02", 20, 30),
        make_part(test_db, admin_user, valves, "1\" Ball Valve", "VLV-BL-1", "C1-01", 8, 5),
        make_part(test_db, admin_user, fuses, "10A Fuse", "FUS-10A", "D4-01", 0, 20),
    ]
