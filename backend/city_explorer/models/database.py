"""Database engine and session factory for SQLAlchemy."""

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..config import settings


class Base(DeclarativeBase):
    pass


def _engine_options(url: str) -> dict:
    """Driver-specific engine arguments."""
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options: dict = {
        # SQLite needs this for multi-thread
        "connect_args": {"check_same_thread": False},
    }
    if url in ("sqlite://", "sqlite:///:memory:"):
        # Share one in-memory database across all sessions
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.database_url, echo=False, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Session:
    """Dependency for FastAPI endpoints."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_database() -> None:
    """Create all tables.

    Models must be imported before create_all() so they register with Base.metadata.
    """
    from . import location  # noqa: F401
    from . import weather  # noqa: F401
    from . import event  # noqa: F401
    Base.metadata.create_all(bind=engine)


def close_database() -> None:
    """Release pooled connections at shutdown."""
    engine.dispose()
