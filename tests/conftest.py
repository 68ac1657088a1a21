"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from ag_shop.api.main import create_app
from ag_shop.api.dependencies import get_today
from ag_shop.infrastructure.database.models import Base, User, Purchase
from ag_shop.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed evaluation date for interest on open purchases
TODAY = date(2024, 1, 16)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a pinned 'today'"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


@pytest.fixture
def alice(db: Session) -> User:
    """Customer with full contact details"""
    user = User(name="Alice Moreau", email="alice@example.com", phone="555-0101", address="12 Rue Verte")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def bob(db: Session) -> User:
    user = User(name="Bob Stone", email="bob@example.com")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def credit_purchase(db: Session, alice: User) -> Purchase:
    """Open deposit purchase: $500, 20% down, 3%/month from 2024-01-01"""
    purchase = Purchase(
        user_id=alice.id,
        buy_date=date(2024, 1, 1),
        immediate=False,
        deposit_percentage=Decimal("20"),
        total_amount=Decimal("500"),
        due_date=date(2024, 3, 1),
        monthly_rate_percent=Decimal("3"),
    )
    db.add(purchase)
    db.commit()
    return purchase


@pytest.fixture
def cash_purchase(db: Session, bob: User) -> Purchase:
    """Immediate purchase paid at the till"""
    purchase = Purchase(
        user_id=bob.id,
        buy_date=date(2023, 12, 5),
        immediate=True,
        deposit_percentage=Decimal("0"),
        total_amount=Decimal("120.50"),
        monthly_rate_percent=Decimal("3"),
    )
    db.add(purchase)
    db.commit()
    return purchase
