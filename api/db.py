"""
Database helper built on SQLAlchemy.

Uses DATABASE_URL when provided (postgresql+psycopg://... for Postgres).
Otherwise it uses a local SQLite database at database/chirp.db. Tables are
created from the ORM metadata on startup.
"""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from api.config import DATABASE_ECHO, DATABASE_URL
from api.logging_config import get_logger

logger = get_logger("db")


class Base(DeclarativeBase):
    pass


def _normalize_url(url: str) -> str:
    # Hosted Postgres providers hand out postgres:// URLs; route them to psycopg 3
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url[len("postgresql://"):]
    return url


def build_engine(url: str = DATABASE_URL, echo: bool = DATABASE_ECHO) -> Engine:
    url = _normalize_url(url)
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection so every session sees the same in-memory db
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(bind: Engine = None) -> None:
    """Create all tables known to the ORM metadata."""
    # Register models on Base.metadata
    import api.posts.models  # noqa: F401

    bind = bind or engine
    Base.metadata.create_all(bind)
    logger.info(f"Database schema ready ({bind.url.get_backend_name()})")


@contextmanager
def get_session() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db_session() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session."""
    with get_session() as session:
        yield session


def ping() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database ping failed: {e}")
        return False
