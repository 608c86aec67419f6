"""
Database connection and setup
SQLAlchemy engine and session factory, configured from settings
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from catalog.models import Base
from config.settings import settings

logger = logging.getLogger("catalog.db")

DATABASE_URL = settings.database_url

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False  # Needed for SQLite

# Create engine with echo=False (set to True for SQL debugging)
engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    echo=False
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """
    Initialize database - create all tables
    Safe to call multiple times (won't recreate existing tables)
    """
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized at: {DATABASE_URL}")


def get_db():
    """
    Get database session - use in FastAPI dependencies
    Yields a session and closes it when done
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session():
    """
    Get a database session for cache fetches and scripts
    Remember to close() when done
    """
    return SessionLocal()
