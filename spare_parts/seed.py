"""
Default data for a fresh database: demo accounts, the category
taxonomy and a handful of sample parts.
"""
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from spare_parts.core.security import get_password_hash
from spare_parts.logging_config import get_logger
from spare_parts.logic import calculate_status
from spare_parts.models import Category, CategoryType, Part, User, UserRole

logger = get_logger("seed")


DEFAULT_USERS = [
    ("ADMIN001", "System Administrator", "admin123", UserRole.ADMIN),
    ("EMP001", "John Editor", "editor123", UserRole.EDITOR),
    ("EMP002", "Jane Viewer", "user123", UserRole.USER),
]

DEFAULT_CATEGORIES = [
    # Mechanical
    ("Bolts", CategoryType.MECHANICAL, "Various bolt sizes and types"),
    ("Nuts", CategoryType.MECHANICAL, "Hex nuts, lock nuts, wing nuts"),
    ("Washers", CategoryType.MECHANICAL, "Flat, spring, and lock washers"),
    ("Screws", CategoryType.MECHANICAL, "Machine screws, wood screws, self-tapping"),
    ("Bearings", CategoryType.MECHANICAL, "Ball bearings, roller bearings"),
    ("Gears", CategoryType.MECHANICAL, "Spur gears, helical gears"),
    ("Springs", CategoryType.MECHANICAL, "Compression, tension, torsion springs"),
    ("Seals", CategoryType.MECHANICAL, "O-rings, gaskets, oil seals"),
    ("Pins", CategoryType.MECHANICAL, "Dowel pins, roll pins, cotter pins"),
    ("Clips", CategoryType.MECHANICAL, "Retaining clips, circlips, snap rings"),
    ("Chains", CategoryType.MECHANICAL, "Roller chains, drive chains, chain links"),
    # Piping
    ("Pipes", CategoryType.PIPING, "Steel, PVC, copper pipes"),
    ("Valves", CategoryType.PIPING, "Ball valves, gate valves, check valves"),
    ("Fittings", CategoryType.PIPING, "Elbows, tees, couplings"),
    ("Clamps", CategoryType.PIPING, "Pipe clamps, hose clamps"),
    ("Hoses", CategoryType.PIPING, "Hydraulic, pneumatic, water hoses"),
    ("Flanges", CategoryType.PIPING, "Weld neck, slip-on, blind flanges"),
    # Electrical
    ("Electrical", CategoryType.ELECTRICAL, "General electrical components and parts"),
    ("Wires", CategoryType.ELECTRICAL, "Copper wires, cables"),
    ("Circuit Breakers", CategoryType.ELECTRICAL, "MCBs, MCCBs, RCCBs"),
    ("Switches", CategoryType.ELECTRICAL, "Toggle, push button, limit switches"),
    ("Relays", CategoryType.ELECTRICAL, "Control relays, contactors"),
    ("Connectors", CategoryType.ELECTRICAL, "Terminal blocks, wire connectors"),
    ("Fuses", CategoryType.ELECTRICAL, "Cartridge, blade, resettable fuses"),
    ("Motors", CategoryType.ELECTRICAL, "AC motors, DC motors, servo motors"),
    # Specialty
    ("General", CategoryType.SPECIALTY, "General purpose and miscellaneous parts"),
    ("Pumps", CategoryType.SPECIALTY, "Centrifugal, positive displacement pumps"),
    ("Hydraulics", CategoryType.SPECIALTY, "Hydraulic cylinders, power units"),
    ("Pneumatics", CategoryType.SPECIALTY, "Air cylinders, valves, FRLs"),
    ("Filters", CategoryType.SPECIALTY, "Oil, air, water filters"),
    ("Sensors", CategoryType.SPECIALTY, "Proximity, temperature, pressure sensors"),
    ("PLCs", CategoryType.SPECIALTY, "Programmable logic controllers"),
    ("Drives", CategoryType.SPECIALTY, "VFDs, servo drives"),
]

# name, part number, box, quantity, category, min quantity
SAMPLE_PARTS = [
    ("M8x30 Hex Bolt", "BLT-M8-30", "A1-01", 150, "Bolts", 50),
    ("M10x50 Hex Bolt", "BLT-M10-50", "A1-02", 80, "Bolts", 30),
    ("M8 Hex Nut", "NUT-M8", "A2-01", 200, "Nuts", 100),
    ("M8 Lock Washer", "WSH-M8-LK", "A3-01", 3, "Washers", 50),
    ("6205 Ball Bearing", "BRG-6205", "B1-01", 12, "Bearings", 5),
    ("6308 Ball Bearing", "BRG-6308", "B1-02", 0, "Bearings", 5),
    ('1" Ball Valve', "VLV-BL-1", "C1-01", 8, "Valves", 5),
    ('2" Gate Valve', "VLV-GT-2", "C1-02", 4, "Valves", 3),
    ('1" 90° Elbow', "FIT-ELB-1", "C2-01", 25, "Fittings", 10),
    ('1/2" Hydraulic Hose 2m', "HSE-HYD-05-2", "C3-01", 6, "Hoses", 5),
    ("20A Circuit Breaker", "CB-20A", "D1-01", 15, "Circuit Breakers", 5),
    ("Limit Switch", "SW-LMT-01", "D2-01", 10, "Switches", 5),
    ("24V Control Relay", "RLY-24V", "D3-01", 20, "Relays", 10),
    ("10A Fuse", "FUS-10A", "D4-01", 2, "Fuses", 20),
    ("Oil Filter Element", "FLT-OIL-01", "E1-01", 8, "Filters", 5),
    ("Proximity Sensor NPN", "SNS-PRX-NPN", "E2-01", 6, "Sensors", 5),
    ('Air Filter 1/4"', "FLT-AIR-025", "E1-02", 0, "Filters", 5),
    ("Pneumatic Cylinder 50x100", "CYL-PN-50-100", "E3-01", 3, "Pneumatics", 2),
]


def seed_database(db: Session) -> bool:
    """
    Populate an empty database.

    Does nothing when any user already exists.

    Returns:
        True if data was inserted
    """
    if db.scalar(select(func.count(User.id))):
        logger.info("Database already seeded, skipping")
        return False

    logger.info("Seeding database...")

    users = {}
    for service_number, name, password, role in DEFAULT_USERS:
        user = User(
            service_number=service_number,
            name=name,
            password_hash=get_password_hash(password),
            role=role.value,
        )
        db.add(user)
        users[role] = user

    categories = {}
    for name, category_type, description in DEFAULT_CATEGORIES:
        category = Category(name=name, type=category_type.value, description=description)
        db.add(category)
        categories[name] = category

    db.flush()

    admin = users[UserRole.ADMIN]
    for name, part_number, box_number, quantity, category_name, min_quantity in SAMPLE_PARTS:
        db.add(Part(
            name=name,
            part_number=part_number,
            box_number=box_number,
            quantity=quantity,
            min_quantity=min_quantity,
            status=calculate_status(quantity, min_quantity).value,
            category_id=categories[category_name].id,
            created_by=admin.id,
            description=f"Sample part: {name}",
        ))

    db.commit()

    logger.info(
        f"Database seeded: {len(users)} users, {len(categories)} categories, "
        f"{len(SAMPLE_PARTS)} sample parts"
    )
    logger.info("Default admin: ADMIN001 / admin123")
    return True


def ensure_categories(db: Session) -> list[str]:
    """
    Add any default category missing from the database.

    Names are compared case-insensitively.

    Returns:
        Names of the categories added
    """
    existing = {name.lower() for name in db.execute(select(Category.name)).scalars()}
    missing = [entry for entry in DEFAULT_CATEGORIES if entry[0].lower() not in existing]

    if not missing:
        return []

    for name, category_type, description in missing:
        db.add(Category(name=name, type=category_type.value, description=description))
    db.commit()

    added = [entry[0] for entry in missing]
    logger.info(f"Added {len(added)} missing categories: {', '.join(added)}")
    return added
