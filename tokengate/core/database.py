"""Database engine and session management."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tokengate.core.config import Settings


def build_engine(settings: Settings) -> Engine:
    """Create the engine for DATABASE_URL.

    SQLite connections are shared across the request thread pool; an in-memory
    SQLite database uses a single static connection so every session sees the
    same tables.
    """
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.DEBUG, **kwargs)
    return create_engine(url, pool_pre_ping=True, echo=settings.DEBUG)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_table_reachable(db: Session, model: type) -> bool:
    """Select at most one row from model's table; False if the database or table is unavailable."""
    try:
        db.execute(select(model).limit(1)).first()
        return True
    except SQLAlchemyError:
        db.rollback()
        return False


def migration_options(url: str) -> dict:
    """Alembic context options for url. SQLite can't ALTER in place, so it migrates in batch mode."""
    return {"compare_type": True, "render_as_batch": url.startswith("sqlite")}
