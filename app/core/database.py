# File: database.py
# Path: app/core/database.py

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm import declarative_base

from app.core.config import settings

logger = logging.getLogger(__name__)

# Shared declarative base for all models
Base = declarative_base()


def build_engine(url: str):
    """
    Create an engine for the given URL.

    SQLite needs cross-thread connections and foreign key enforcement switched
    on explicitly; PostgreSQL gets the pooled configuration.
    """
    if url.startswith("sqlite"):
        sqlite_engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 30},
            echo=settings.database_echo,
        )

        @event.listens_for(sqlite_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=300,       # Recycle connections every 5 minutes
        pool_timeout=20,
        connect_args={
            "options": "-c timezone=utc",
            "connect_timeout": 5,
            "application_name": "IDCardBackend"
        } if "postgresql" in url else {},
        echo=settings.database_echo
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)

def get_db():
    """
    Dependency function for FastAPI endpoints.
    Creates a new database session for each request.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def is_unique_violation(error: IntegrityError) -> bool:
    """
    Tell unique-constraint failures apart from foreign key and NOT NULL failures.

    PostgreSQL reports SQLSTATE 23505; SQLite only says so in the message.
    """
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    return "unique" in str(error.orig).lower()

def check_database_connection():
    """
    Test database connection health.
    Returns True if connection is successful, False otherwise.
    """
    try:
        db = SessionLocal()
        db.execute(text("SELECT 1"))
        db.close()
        logger.info("Database connection test successful")
        return True
    except Exception as e:
        logger.error(f"Database connection test failed: {str(e)}")
        return False
