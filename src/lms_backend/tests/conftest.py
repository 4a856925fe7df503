"""
Pytest configuration and fixtures for all tests.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lms_backend.database import create_db_engine, get_db
from lms_backend.model import Base, AppRole
from lms_backend.permissions.auth import get_current_principal
from lms_backend.permissions.principal import Principal, anonymous_principal
from lms_backend.tests.fixtures import grant_role, new_principal


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without HTTP")
    config.addinivalue_line("markers", "integration: tests going through the HTTP app")


@pytest.fixture
def engine():
    """In-memory SQLite engine with foreign keys enforced."""
    engine = create_db_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin(db) -> Principal:
    principal = new_principal("admin@example.com")
    grant_role(db, principal.user_id, AppRole.admin)
    return principal


@pytest.fixture
def student(db) -> Principal:
    principal = new_principal("student@example.com")
    grant_role(db, principal.user_id, AppRole.student)
    return principal


@pytest.fixture
def other_student(db) -> Principal:
    principal = new_principal("other@example.com")
    grant_role(db, principal.user_id, AppRole.student)
    return principal


@pytest.fixture
def visitor() -> Principal:
    return anonymous_principal()


@pytest.fixture
def client(db):
    """TestClient sharing the test session; principal chosen per request via act_as."""
    from lms_backend.server import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def act_as():
    from lms_backend.server import app

    def _act_as(principal: Principal):
        app.dependency_overrides[get_current_principal] = lambda: principal

    return _act_as
