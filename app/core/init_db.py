"""
Database initialization script.
Creates all tables and seeds the default operator and demo university data.
"""

from sqlalchemy import inspect
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import engine, Base, SessionLocal
from app.core.auth import AuthUtils
from app.models import User, College, Department, Level, Card, PersonType
import logging

logger = logging.getLogger(__name__)

SEED_COLLEGES = [
    {
        "name_en": "Faculty of Engineering",
        "name_ar": "كلية الهندسة",
        "code": "ENG",
        "departments": [
            {"name_en": "Mechanical Engineering", "name_ar": "الهندسة الميكانيكية", "code": "ME"},
            {"name_en": "Electrical Engineering", "name_ar": "الهندسة الكهربائية", "code": "EE"},
        ],
    },
    {
        "name_en": "Faculty of Computer Science",
        "name_ar": "كلية علوم الحاسب",
        "code": "CS",
        "departments": [
            {"name_en": "Software Engineering", "name_ar": "هندسة البرمجيات", "code": "SE"},
            {"name_en": "Information Systems", "name_ar": "نظم المعلومات", "code": "IS"},
        ],
    },
    {
        "name_en": "Faculty of Business",
        "name_ar": "كلية إدارة الأعمال",
        "code": "BUS",
        "departments": [],
    },
]

SEED_LEVELS = [
    {"name_en": "Level 1 - Freshman", "name_ar": "المستوى الأول", "order": 1},
    {"name_en": "Level 2 - Sophomore", "name_ar": "المستوى الثاني", "order": 2},
    {"name_en": "Level 3 - Junior", "name_ar": "المستوى الثالث", "order": 3},
    {"name_en": "Level 4 - Senior", "name_ar": "المستوى الرابع", "order": 4},
]

SEED_CARDS = [
    {
        "name": "Alex Johnson",
        "id_number": "STU2024001",
        "card_number": "CARD-STU2024001",
        "type": PersonType.STUDENT,
        "department": "Computer Science",
        "program": "B.Sc. Software Engineering",
        "year": "2024",
    },
    {
        "name": "Sarah Williams",
        "id_number": "STU2024002",
        "card_number": "CARD-STU2024002",
        "type": PersonType.STUDENT,
        "department": "Engineering",
        "program": "B.Eng. Mechanical",
        "year": "2024",
    },
    {
        "name": "Dr. Robert Smith",
        "id_number": "STAFF001",
        "card_number": "CARD-STAFF001",
        "type": PersonType.STAFF,
        "department": "Faculty of Science",
    },
    {
        "name": "Emily Brown",
        "id_number": "STAFF002",
        "card_number": "CARD-STAFF002",
        "type": PersonType.STAFF,
        "department": "Administration",
    },
]


def init_db():
    """
    Initialize the database by creating all tables.
    """
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully!")


def seed_default_user(db: Session):
    """Create the default superuser when no operators exist."""
    existing_users = db.query(User).count()
    if existing_users:
        logger.info(f"Database already has {existing_users} user(s). Skipping default user.")
        return

    logger.info("No users found. Creating default superuser...")
    db.add(User(
        username=settings.default_admin_username,
        email=settings.default_admin_email,
        name="System Administrator",
        hashed_password=AuthUtils.hash_password(settings.default_admin_password),
        superuser=True,
        is_active=True
    ))
    db.commit()

    logger.info(f"Default superuser '{settings.default_admin_username}' created")
    logger.info("IMPORTANT: Please change the default password after first login!")


def seed_university_structure(db: Session):
    """Create the demo colleges, departments and levels when no colleges exist."""
    if db.query(College).count():
        logger.info("Colleges already present. Skipping university structure.")
        return

    for college_data in SEED_COLLEGES:
        departments = college_data["departments"]
        college = College(**{k: v for k, v in college_data.items() if k != "departments"})
        college.departments = [Department(**department) for department in departments]
        db.add(college)

    db.add_all(Level(**level) for level in SEED_LEVELS)
    db.commit()
    logger.info("Database seeded with university structure")


def seed_demo_cards(db: Session):
    """Create a handful of demo cards when the cards table is empty."""
    if db.query(Card).count():
        logger.info("Cards already present. Skipping demo cards.")
        return

    db.add_all(Card(**card) for card in SEED_CARDS)
    db.commit()
    logger.info(f"Database seeded with {len(SEED_CARDS)} demo cards")


def seed_initial_data(db: Session = None):
    """
    Seed the database with the default operator and demo data.
    """
    owns_session = db is None
    db = db or SessionLocal()

    try:
        seed_default_user(db)
        seed_university_structure(db)
        seed_demo_cards(db)
    except Exception as e:
        logger.error(f"Error seeding initial data: {e}")
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()


def check_tables():
    """
    Check which tables exist in the database.
    """
    inspector = inspect(engine)
    tables = inspector.get_table_names()

    logger.info("Existing tables in database:")
    for table in tables:
        logger.info(f"  - {table}")

    return tables


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    logger.info("=" * 50)
    logger.info("Database Initialization Script")
    logger.info("=" * 50)

    check_tables()
    init_db()
    seed_initial_data()
    check_tables()

    logger.info("=" * 50)
    logger.info("Database initialization complete!")
    logger.info("=" * 50)
