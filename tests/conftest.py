"""
Pytest fixtures and configuration.
"""

import os

# Настройки должны быть выставлены до первого импорта src
os.environ["TESTING"] = "true"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEFAULT_REFERRAL_CODES"] = "false"

import pytest
from fastapi.testclient import TestClient

from src.database import engine, SessionLocal, get_session
from src.models import Base
from src import schemas
from src.services.referral_code_service import ReferralCodeService


@pytest.fixture(autouse=True)
def tables():
    """Fresh referral_code table for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session():
    """Database session bound to the in-memory SQLite engine."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def service():
    return ReferralCodeService()


@pytest.fixture
def make_request():
    """Factory for validated create/update payloads."""
    def _make(code: str, owner_name: str) -> schemas.ReferralCodeRequest:
        return schemas.ReferralCodeRequest(code=code, owner_name=owner_name)
    return _make


@pytest.fixture
def client(session):
    """FastAPI test client sharing the test session."""
    from src.main import app

    def _get_session_override():
        yield session

    app.dependency_overrides[get_session] = _get_session_override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
