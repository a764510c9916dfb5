"""Shared fixtures: an in-memory database, a pinned clock and a temp upload root."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

import advisory_crm.models  # noqa: F401
from advisory_crm.api import deps
from advisory_crm.main import app
from advisory_crm.services.files import FileStore
from advisory_crm.services.team_members import create_team_member

# A Wednesday
NOW = datetime(2024, 5, 15, 12, 30)


class FixedClock:
    """Clock that returns whatever ``now`` is set to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def file_store(tmp_path):
    return FileStore(tmp_path / "uploads", max_size=1024)


@pytest.fixture
def member(session, clock):
    return create_team_member(
        session,
        {"name": "Alex Morgan", "email": "alex.morgan@example.com", "role": "Investment Analyst"},
        clock(),
    )


@pytest.fixture
def client(session, clock, file_store):
    def get_db_override():
        yield session

    app.dependency_overrides[deps.get_db] = get_db_override
    app.dependency_overrides[deps.get_clock] = lambda: clock
    app.dependency_overrides[deps.get_file_store] = lambda: file_store

    # Not entered as a context manager: the lifespan would touch the real database
    yield TestClient(app)

    app.dependency_overrides.clear()
