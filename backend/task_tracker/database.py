# backend/task_tracker/database.py
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from .config import settings
from .utils.logging import db_logger


def describe_database_url(url: str) -> str:
    """Loggable form of a database URL, without password or query options"""
    return make_url(url).set(query={}).render_as_string(hide_password=True)


SQLALCHEMY_DATABASE_URL = str(settings.DATABASE_URL)
db_logger.info("Connecting to database", extra={
    "database_url": describe_database_url(SQLALCHEMY_DATABASE_URL)
})

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {},
    echo=False  # This will log all SQL statements
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
