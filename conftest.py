# conftest.py
import os

os.environ.setdefault("APP_SECRET", "test-secret")
os.environ.setdefault("DB_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401  registers tables
from app.db import Base, get_db
from app.main import app
from app.schemas.pricing import DiscountRule, FeeSchedule
from app.util.security import create_token

# Monday
TODAY = date(2026, 10, 19)


@pytest.fixture
def schedule():
    return FeeSchedule(
        delivery_fee_amount="3.00",
        free_delivery_limit="12.00",
        service_fee_amount="0.99",
        minimum_order_value="10.00",
    )


@pytest.fixture
def ten_percent():
    return DiscountRule(id=1, name="10% off", kind="percentage", value="10",
                        minimum_purchase_amount=0, days_of_week=None)


@pytest.fixture
def engine():
    """In-memory SQLite shared across the connections of one test."""
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)


@pytest.fixture
def db_session(engine):
    s = sessionmaker(bind=engine)()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(engine):
    TestSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def _get_db():
        s = TestSession()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_token('staff-1')}"}
