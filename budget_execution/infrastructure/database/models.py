"""SQLAlchemy ORM models for the budgeting store (periods, categories, budgets)"""

import uuid
from sqlalchemy import Column, String, DateTime, Date, Integer, ForeignKey, Numeric, Text, CheckConstraint
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class PeriodRecord(Base):
    """Month-long accounting period"""

    __tablename__ = "periods"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    month = Column(Integer, nullable=False)  # 0-indexed: 0 = January
    year = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    budgets = relationship("BudgetRecord", back_populates="period", cascade="all, delete-orphan")

    __table_args__ = (CheckConstraint("month >= 0 AND month <= 11", name="periods_month_check"),)


class CategoryRecord(Base):
    """Expense category carrying the recurrence policy of its budgets"""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    default_day = Column(Integer, nullable=True)
    recurrence_frequency = Column(String(20), nullable=True)
    recurrence_step_days = Column(Integer, nullable=True)
    recurrence_count = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    budgets = relationship("BudgetRecord", back_populates="category")


class BudgetRecord(Base):
    """Expected amount for a category within a period"""

    __tablename__ = "budgets"

    id = Column(String(36), primary_key=True, default=_new_id)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    period_id = Column(String(36), ForeignKey("periods.id", ondelete="CASCADE"), nullable=False, index=True)
    expected_amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(20), nullable=False, default="cash")
    default_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    period = relationship("PeriodRecord", back_populates="budgets")
    category = relationship("CategoryRecord", back_populates="budgets")
