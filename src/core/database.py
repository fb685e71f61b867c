# src/core/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from contextlib import contextmanager
from datetime import datetime, timezone
import logging
from .config import get_settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    # Пул соединений общий для всех запросов; pre_ping отбрасывает разорванные соединения
    return {"pool_pre_ping": True, "pool_recycle": 300}


try:
    _url = get_settings().SQLALCHEMY_DATABASE_URL
    engine = create_engine(_url, **_engine_kwargs(_url))
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base = declarative_base()
    logger.info("Database engine and session created successfully.")
except Exception as e:
    logger.error(f"Failed to create database engine: {e}", exc_info=True)
    raise


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the `timestamp without time zone` columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@contextmanager
def get_db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
