from pathlib import Path
import os
import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

# The API module creates its tables on import, so point it at a throwaway
# SQLite file before any test module imports the application.
TEST_DB = Path(__file__).resolve().parents[1] / "test_app.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB.as_posix()}"
os.environ["ENV"] = "dev"
if TEST_DB.exists():
    TEST_DB.unlink()


@pytest.fixture(scope="session", autouse=True)
def reset_db():
    """Remove the test database file once the session is over."""
    yield
    try:
        TEST_DB.unlink()
    except OSError:
        pass


@pytest.fixture
def session():
    """A session bound to a fresh in-memory database."""
    from training_center import models  # noqa: F401
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()
