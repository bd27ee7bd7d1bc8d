import os
from datetime import date

# Settings are cached at import time; point the app engine at SQLite before importing it.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, text  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import timetable_portal.models  # noqa: E402,F401
from timetable_portal.api.deps import get_db  # noqa: E402
from timetable_portal.db.base import Base  # noqa: E402
from timetable_portal.main import app  # noqa: E402
from timetable_portal.models.directory import SchoolClass, Subject, Teacher  # noqa: E402
from timetable_portal.models.holiday import Holiday  # noqa: E402


@pytest.fixture()
def session_factory():
    engine = create_engine(  # isolated in-memory database shared by every session of one test
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def school(db_session):
    """Class 7-A with two teachers, three subjects and a Christmas break."""
    db_session.add_all(
        [
            SchoolClass(id="7", name="Class 7", section="A", class_teacher_id="T2"),
            SchoolClass(id="8", name="Class 8", section="B"),
            Teacher(id="T1", name="Anita Verma", contact_number="555-0101"),
            Teacher(id="T2", name="Ravi Singh", contact_number="555-0102"),
            Subject(id="Math", name="Mathematics", class_id="7"),
            Subject(id="Science", name="Science", class_id="7"),
            Subject(id="English", name="English", class_id=None),
            Subject(id="History", name="History", class_id="8"),
        ]
    )
    db_session.add(
        Holiday(
            id="h-1",
            name="Break",
            start_date=date(2025, 12, 24),
            end_date=date(2025, 12, 26),
        )
    )
    db_session.commit()
    return {"class_id": "7", "other_class_id": "8", "teachers": ["T1", "T2"]}


@pytest.fixture()
def drop_table(db_session):
    """Drop a table out from under the app; every session in the test shares the connection."""

    def drop(table_name):
        db_session.execute(text(f"DROP TABLE {table_name}"))
        db_session.commit()

    return drop
