"""
Database configuration and session management
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from loguru import logger
import os
from pathlib import Path
from typing import Generator

from flashdeck.models.database_models import Base

# Default SQLite file lives at the project root, independent of CWD
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
DB_PATH = BASE_DIR / "flashdeck.db"

env_db_url = os.getenv("DATABASE_URL")
if env_db_url:
    DATABASE_URL = env_db_url
else:
    # SQLite URL format: sqlite:///C:/path/to/file.db
    clean_path = str(DB_PATH).replace('\\', '/')
    DATABASE_URL = f"sqlite:///{clean_path}"

logger.debug(f"Using Database URL: {DATABASE_URL}")


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine, with SQLite connections shared across threads"""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(url, **kwargs)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # Card rows rely on ON DELETE CASCADE, which SQLite only honours with this pragma
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables(bind: Engine = engine):
    """
    Create all database tables
    """
    Base.metadata.create_all(bind=bind)

def drop_tables(bind: Engine = engine):
    """
    Drop all database tables (for testing/reset)
    """
    Base.metadata.drop_all(bind=bind)
