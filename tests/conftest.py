"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_footprint.db")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from footprint.db.base import Base, get_db  # noqa: E402
from footprint.main import app  # noqa: E402
from footprint.models import ConversionFactor  # noqa: E402
from footprint.services.aggregation import add_months, month_start, utc_today  # noqa: E402
from footprint.services.store import RecordStore  # noqa: E402
from footprint.services.units import DEFAULT_CONVERSION_FACTORS  # noqa: E402

SQLITE_URL = "sqlite:///./test_footprint.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    # Seed conversion factors (normally done by Alembic migration 0002)
    db = TestingSessionLocal()
    try:
        if db.query(ConversionFactor).count() == 0:
            for category, start_unit, end_unit, factor in DEFAULT_CONVERSION_FACTORS:
                db.add(ConversionFactor(
                    category=category,
                    start_unit=start_unit,
                    end_unit=end_unit,
                    factor=factor,
                ))
            db.commit()
    finally:
        db.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def store(db):
    return RecordStore(db)


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def household_id(client):
    """A fresh household per test so trailing averages never bleed across tests."""
    r = client.post("/households", json={"name": "Test household", "num_members": 3})
    assert r.status_code == 201
    return r.json()["id"]


def months_ago(count: int, day: int = 10) -> date:
    """`day` of the UTC calendar month `count` months before the current one."""
    return add_months(month_start(utc_today()), -count).replace(day=day)
