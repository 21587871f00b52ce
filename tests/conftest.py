import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobguide.core.session import UserSession
from jobguide.database import get_db, init_db
from jobguide.dependencies import get_current_instructor, get_current_session
from jobguide.main import app
from jobguide.models.enums import UserRole


@pytest.fixture
def student() -> UserSession:
    return UserSession(user_id="student-1", role=UserRole.STUDENT, email="student@example.com")


@pytest.fixture
def instructor() -> UserSession:
    return UserSession(user_id="instructor-1", role=UserRole.INSTRUCTOR, email="mentor@example.com")


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database with every table created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    db = Session()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def client(student: UserSession):
    """Stub database; routes under test are expected to be monkeypatched."""

    def _db_override():
        yield object()

    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_session] = lambda: student
    yield TestClient(app)
    app.dependency_overrides.clear()


def _sqlite_client(db_session, session: UserSession) -> TestClient:
    def _db_override():
        yield db_session

    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_session] = lambda: session
    if session.is_instructor:
        app.dependency_overrides[get_current_instructor] = lambda: session
    return TestClient(app)


@pytest.fixture
def db_client(db_session, student: UserSession):
    yield _sqlite_client(db_session, student)
    app.dependency_overrides.clear()


@pytest.fixture
def instructor_client(db_session, instructor: UserSession):
    yield _sqlite_client(db_session, instructor)
    app.dependency_overrides.clear()
