# Shared pytest configuration and fixtures
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from database import get_db
from database.base import Base
from database.models import Company, Payment
from database.seed import seed_base_company


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    """TestClient with get_db pointed at the test session. Lifespan is not run."""

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def base_company(db_session):
    return seed_base_company(db_session)


@pytest.fixture
def make_company(db_session, base_company):
    """Companies get ids after the base company."""
    counter = {"n": 0}

    def _make(**overrides) -> Company:
        counter["n"] += 1
        n = counter["n"]
        data = dict(
            legal_name=f"Empresa {n} S.R.L.",
            tax_id=f"30-7000000{n}-1",
            email=f"empresa{n}@example.com",
            phone="+54 11 5555-0000",
            country_code="AR",
            billing_frequency="monthly",
            is_active=True,
        )
        data.update(overrides)
        company = Company(**data)
        db_session.add(company)
        db_session.commit()
        db_session.refresh(company)
        return company

    return _make


@pytest.fixture
def make_payment(db_session):
    def _make(company: Company, payment_date: date, amount: Decimal = Decimal("1000.00"), **extra) -> Payment:
        payment = Payment(
            company_id=company.id,
            payment_date=payment_date,
            amount=amount,
            **extra,
        )
        db_session.add(payment)
        db_session.commit()
        db_session.refresh(payment)
        return payment

    return _make
