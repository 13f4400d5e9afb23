"""Pytest fixtures: test client, test DB (in-memory SQLite), sabit değerlendirme anı."""
import os
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

# Test ortamında in-memory SQLite (app import edilmeden önce set edilmeli)
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ADMIN_SECRET", "test-admin-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "1000")
# Her testten önce limiter sıfırlanır; 429 testi bu limiti aşar
os.environ.setdefault("RATE_LIMIT_VALIDATE_PER_MINUTE", "10")

from sqlmodel import Session, SQLModel

from app.api.deps import get_evaluation_time
from app.core.database import engine
from app.core.rate_limit import limiter
from app.main import app
from app.models import Discount
from factories import NOW


@pytest.fixture
def admin_headers():
    return {"X-Admin-Secret": "test-admin-secret"}


@pytest.fixture(scope="function")
def client():
    """TestClient; lifespan ile in-memory DB ve tablolar hazır olur. Her test temiz DB ile başlar."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    limiter.reset()
    app.dependency_overrides[get_evaluation_time] = lambda: NOW
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db(client):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_discount(db):
    """Discount satırı ekler; varsayılan: aktif, %10, tüm sepet, NOW etrafında geçerli."""

    def _make(**overrides) -> Discount:
        fields = {
            "code": "SALE10",
            "name": "Sale 10",
            "discount_type": "percentage",
            "amount": 10,
            "target_type": "all",
            "status": "active",
            "start_date": NOW - timedelta(days=7),
            "end_date": NOW + timedelta(days=7),
        }
        fields.update(overrides)
        row = Discount(**fields)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _make
