"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a SQLite file `app.db` in the backend root by
default) and provides the small helpers used by the application, the
entry point and tests.
"""

from sqlmodel import SQLModel, create_engine, Session
from .config import settings


def build_engine(url: str):
    """Create an engine for `url`.

    SQLite connections are shared across FastAPI worker threads, so the
    same-thread check is disabled for that backend only.
    """
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables(bind=None):
    """Create database tables using SQLModel metadata.

    The models module is imported first so every table is registered
    on the metadata. Production deployments should manage the schema
    with a migration tool instead.
    """
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(bind if bind is not None else engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
