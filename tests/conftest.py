from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

from database.base import Base  # noqa: E402
from database.session import build_session_factory, get_db  # noqa: E402
from crud.common import course as course_crud  # noqa: E402
from crud.common import event as event_crud  # noqa: E402
from crud.partner import partner_core as partner_crud  # noqa: E402
from crud.partner import student as student_crud  # noqa: E402
from crud.user import account as user_crud  # noqa: E402


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_fk(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    from fastapi.testclient import TestClient
    from main import app

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_db, None)


# ==============================
# seed helpers
# ==============================
def auth_header(user_id: str) -> dict:
    return {"Authorization": f"Bearer dev-access-{user_id}"}


def make_user(db, user_id: str = "user-1", email: str | None = None):
    return user_crud.upsert_user(
        db,
        id=user_id,
        email=email or f"{user_id}@example.com",
        first_name="Test",
        last_name="User",
    )


def make_partner(db, user_id: str = "user-1", utm_tag: str = "AGRO-001", company: str = "Agro Drones"):
    if user_crud.get_user(db, user_id) is None:
        make_user(db, user_id)
    return partner_crud.create_partner(db, user_id=user_id, company=company, utm_tag=utm_tag)


def make_course(db, name: str = "Drone Pilot Fundamentals", is_active: bool = True):
    return course_crud.create_course(
        db,
        name=name,
        description="Flight basics",
        duration=40,
        instructors=["Carlos"],
        requirements=[],
        is_active=is_active,
    )


def make_student(db, partner_id: int, name: str = "Joao Silva", email: str = "joao@example.com"):
    return student_crud.create_student(db, partner_id=partner_id, name=name, email=email)


def make_event(db, *, days: int = 7, title: str = "Workshop", max_participants=None, is_active: bool = True):
    return event_crud.create_event(
        db,
        title=title,
        description="Hands-on session",
        event_date=datetime.now(timezone.utc) + timedelta(days=days),
        duration=120,
        type="workshop",
        max_participants=max_participants,
        is_active=is_active,
    )
