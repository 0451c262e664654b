"""Data access layer mapping store rows into domain budgets and periods"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_execution.domain.exceptions import DataStoreError
from budget_execution.domain.models import Budget, Period
from budget_execution.infrastructure.database.models import BudgetRecord, CategoryRecord, PeriodRecord


def _to_domain_period(record: PeriodRecord) -> Period:
    return Period(
        period_id=record.id,
        name=record.name,
        year=record.year,
        month=record.month + 1,
    )


def _to_domain_budget(budget: BudgetRecord, category: CategoryRecord, period: PeriodRecord) -> Budget:
    return Budget(
        budget_id=budget.id,
        category_id=category.id,
        category_name=category.name,
        period_id=period.id,
        total_amount=Decimal(budget.expected_amount),
        payment_method=budget.payment_method,
        recurrence_frequency=category.recurrence_frequency,
        period_year=period.year,
        period_month=period.month + 1,
        category_default_day=category.default_day,
        default_date=budget.default_date,
        recurrence_step_days=category.recurrence_step_days,
        recurrence_count=category.recurrence_count,
    )


class PeriodRepository:
    """Repository for accounting periods"""

    def __init__(self, db: Session):
        self.db = db

    def get_period_by_id(self, period_id: str) -> Optional[Period]:
        """Fetch a period, converting the stored 0-indexed month to a calendar month"""
        try:
            record = self.db.query(PeriodRecord).filter(PeriodRecord.id == period_id).first()
        except SQLAlchemyError as e:
            raise DataStoreError(f"Failed to load period {period_id}: {e}") from e

        return _to_domain_period(record) if record else None


class BudgetRepository:
    """Repository for budgets joined with their category recurrence settings"""

    def __init__(self, db: Session):
        self.db = db

    def _joined_query(self):
        return (
            self.db.query(BudgetRecord, CategoryRecord, PeriodRecord)
            .join(CategoryRecord, BudgetRecord.category_id == CategoryRecord.id)
            .join(PeriodRecord, BudgetRecord.period_id == PeriodRecord.id)
        )

    def get_budgets_for_period(self, period_id: str, period_start: date) -> List[Budget]:
        """
        Fetch all budgets of a period ordered by effective date ascending.

        Budgets without a stored default_date sort as if dated on the first
        day of the period.
        """
        try:
            rows = (
                self._joined_query()
                .filter(BudgetRecord.period_id == period_id)
                .order_by(func.coalesce(BudgetRecord.default_date, period_start).asc(), BudgetRecord.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise DataStoreError(f"Failed to load budgets for period {period_id}: {e}") from e

        return [_to_domain_budget(budget, category, period) for budget, category, period in rows]

    def get_budget_by_id(self, budget_id: str) -> Optional[Budget]:
        try:
            row = self._joined_query().filter(BudgetRecord.id == budget_id).first()
        except SQLAlchemyError as e:
            raise DataStoreError(f"Failed to load budget {budget_id}: {e}") from e

        return _to_domain_budget(*row) if row else None
