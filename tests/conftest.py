"""
Shared fixtures: record builders for the pricing core and an API client
backed by an in-memory SQLite database.
"""

import os
import sys
from datetime import date
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.schemas.contract import Contract
from app.schemas.pricing import Pax
from app.schemas.rate_band import RateBand


@pytest.fixture
def make_band():
    """Build a RateBand with sensible defaults; keyword overrides win"""
    def _make_band(**overrides) -> RateBand:
        data = {
            "id": "band-1",
            "product_id": "product-1",
            "contract_id": "contract-1",
            "band_start": date(2025, 5, 1),
            "band_end": date(2025, 5, 31),
            "weekday_mask": 127,
            "currency": "EUR",
            "active": True,
            "pricing_meta": {"prices": {"double": 120}},
            "markup": {"b2c_pct": 60, "b2b_pct": 20},
        }
        data.update(overrides)
        return RateBand.model_validate(data)
    return _make_band


@pytest.fixture
def make_contract():
    """Build a Contract with no commission, VAT or fees unless overridden"""
    def _make_contract(**overrides) -> Contract:
        data = {
            "id": "contract-1",
            "supplier_id": "supplier-1",
            "resource_id": "resource-1",
            "currency": "EUR",
            "valid_from": date(2025, 1, 1),
            "valid_to": date(2025, 12, 31),
            "economics": {"commission_pct": 0, "supplier_vat_pct": 0, "fees": []},
        }
        data.update(overrides)
        return Contract.model_validate(data)
    return _make_contract


@pytest.fixture
def two_adults():
    return Pax(adults=2)


@pytest.fixture
def db_session():
    """Fresh in-memory database per test"""
    from app.database import Base
    from app import models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """TestClient with the database dependency pointed at db_session"""
    from fastapi.testclient import TestClient
    from app.main import app
    from app.database import get_db
    from app.utils.rate_limiter import limiter

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True


@pytest.fixture
def money():
    """Compare API string amounts with Decimal literals"""
    def _money(value) -> Decimal:
        return Decimal(str(value))
    return _money
