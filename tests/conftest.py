# tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from taskboard import models, schemas, services
from taskboard.database import Base, get_db
from taskboard.main import app


# ============================================================
# TEST DATABASE (SQLite, one file per test session)
# ============================================================

@pytest.fixture(scope="session")
def engine(tmp_path_factory):
    db_file = tmp_path_factory.mktemp("db") / "test_tasks.db"
    test_engine = create_engine(
        f"sqlite:///{db_file}", connect_args={"check_same_thread": False}
    )
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="session")
def TestingSessionLocal(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def override_db(TestingSessionLocal):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.pop(get_db, None)


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture(autouse=True)
def clean_db(engine):
    """Recreate the schema before every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session(TestingSessionLocal):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_task(db_session):
    """Create a task through the service, optionally forcing its status."""

    def _make(
        title="Test Task",
        description="Test description",
        priority="medium",
        due_date=None,
        status=None,
    ) -> models.Task:
        task = services.create_task(
            db_session,
            schemas.TaskCreate(
                title=title,
                description=description,
                priority=priority,
                due_date=due_date,
            ),
        )
        if status is not None and status != task.status.value:
            task = services.update_task(
                db_session, schemas.TaskUpdate(id=task.id, status=status)
            )
        return task

    return _make
