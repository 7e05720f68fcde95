# backend/tests/conftest.py
"""
Shared fixtures for the RepairDesk scheduling tests.

Every test gets its own in-memory SQLite database. Services commit for real;
the database disappears with the engine at the end of the test.

"Today" is pinned to Monday 2030-01-07 in the shop's time zone so calendar
assertions do not depend on the wall clock.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, time
from typing import Iterator, List

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from repairdesk import models  # noqa: F401
from repairdesk.api.dependencies.database import get_db
from repairdesk.core.config import settings
from repairdesk.database import Base
from repairdesk.main import app
from repairdesk.models.business_hours import BusinessHours

TODAY = date(2030, 1, 7)  # Monday
ADMIN_TOKEN = "test-admin-token"

# Sunday closed, Mon-Fri 09:00-17:00 with 12:00-13:00 lunch, Saturday 10:00-14:00
STANDARD_WEEK = {
    0: dict(open_time=time(10, 0), close_time=time(14, 0), is_active=False),
    1: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    2: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    3: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    4: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    5: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    6: dict(open_time=time(10, 0), close_time=time(14, 0)),
}


class StatementCounter:
    """Counts SQL statements sent to the database while enabled."""

    def __init__(self) -> None:
        self.statements: List[str] = []
        self.enabled = False

    def __call__(self, conn, cursor, statement, parameters, context, executemany) -> None:
        if self.enabled:
            self.statements.append(statement)

    @property
    def count(self) -> int:
        return len(self.statements)

    def reset(self) -> None:
        self.statements = []
        self.enabled = True


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(test_engine)
    yield test_engine
    Base.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def statement_counter(engine) -> Iterator[StatementCounter]:
    counter = StatementCounter()
    event.listen(engine, "before_cursor_execute", counter)
    yield counter
    event.remove(engine, "before_cursor_execute", counter)


@pytest.fixture
def fixed_today(monkeypatch) -> date:
    """Pin the business date used by the scheduling services."""

    def _today(name=None):
        return TODAY

    monkeypatch.setattr("repairdesk.services.availability_service.get_business_today", _today)
    monkeypatch.setattr("repairdesk.services.slot_generation_service.get_business_today", _today)
    monkeypatch.setattr("repairdesk.services.appointment_service.get_business_today", _today)
    return TODAY


@pytest.fixture
def standard_week(db) -> dict:
    """Seed the weekly business hours."""
    rows = {}
    for day, fields in STANDARD_WEEK.items():
        row = BusinessHours(day_of_week=day, **fields)
        db.add(row)
        rows[day] = row
    db.commit()
    return rows


@pytest.fixture
def client(db, fixed_today) -> Iterator[TestClient]:
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def admin_headers(monkeypatch) -> dict:
    monkeypatch.setattr(settings, "admin_api_token", SecretStr(ADMIN_TOKEN))
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
