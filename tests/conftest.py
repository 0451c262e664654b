"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Generator, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budget_execution.api.main import create_app
from budget_execution.infrastructure.database.models import Base, BudgetRecord, CategoryRecord, PeriodRecord
from budget_execution.infrastructure.database.session import get_db
from budget_execution.domain.models import Budget


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def make_budget() -> Callable[..., Budget]:
    """Build a domain budget for March 2025, overridable per field"""

    def _make(**overrides) -> Budget:
        fields = dict(
            budget_id="budget-1",
            category_id="category-1",
            category_name="Groceries",
            period_id="period-1",
            total_amount=Decimal("400.00"),
            payment_method="cash",
            recurrence_frequency=None,
            period_year=2025,
            period_month=3,
        )
        fields.update(overrides)
        return Budget(**fields)

    return _make


@pytest.fixture
def seed_budget(db: Session) -> Callable[..., BudgetRecord]:
    """Persist a category + budget for a given period record"""

    def _seed(
        period: PeriodRecord,
        amount: str,
        category_name: str = "Groceries",
        payment_method: str = "cash",
        default_day: Optional[int] = None,
        default_date: Optional[date] = None,
        recurrence_frequency: Optional[str] = None,
        recurrence_step_days: Optional[int] = None,
        recurrence_count: Optional[int] = None,
    ) -> BudgetRecord:
        category = CategoryRecord(
            name=category_name,
            default_day=default_day,
            recurrence_frequency=recurrence_frequency,
            recurrence_step_days=recurrence_step_days,
            recurrence_count=recurrence_count,
        )
        db.add(category)
        db.flush()

        budget = BudgetRecord(
            category_id=category.id,
            period_id=period.id,
            expected_amount=Decimal(amount),
            payment_method=payment_method,
            default_date=default_date,
        )
        db.add(budget)
        db.commit()
        return budget

    return _seed


@pytest.fixture
def march_period(db: Session) -> PeriodRecord:
    """March 2025 (stored month is 0-indexed)"""
    period = PeriodRecord(name="Marzo 2025", month=2, year=2025)
    db.add(period)
    db.commit()
    return period
