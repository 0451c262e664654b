"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional


@dataclass
class Period:
    """Month-long accounting window"""

    period_id: str
    name: str
    year: int
    month: int  # 1-12 (calendar month, not the 0-indexed stored value)


@dataclass
class Budget:
    """Planned amount for one category within one period, with its category's recurrence joined in"""

    budget_id: str
    category_id: str
    category_name: str
    period_id: str
    total_amount: Decimal
    payment_method: str  # "cash" | "credit" | "debit"
    recurrence_frequency: Optional[str]
    period_year: int
    period_month: int  # 1-12
    category_default_day: Optional[int] = None
    default_date: Optional[date] = None
    recurrence_step_days: Optional[int] = None
    recurrence_count: Optional[int] = None


@dataclass
class ExpandedBudgetPayment:
    """Single dated installment of a budget"""

    budget_id: str
    category_id: str
    period_id: str
    date: date
    amount_cents: int
    payment_method: str
    is_recurring: bool = False
    occurrence_number: int = 1
    total_occurrences: int = 1

    @property
    def amount(self) -> Decimal:
        return Decimal(self.amount_cents) / 100


@dataclass
class BudgetPaymentDetail:
    """Drill-down entry for one installment inside a bucket"""

    budget_id: str
    category_id: str
    category_name: str
    amount_cents: int
    date: date
    payment_method: str


@dataclass
class ExecutionBucket:
    """Summed installments sharing a day or a week"""

    key: str
    amount_cents: int
    day_of_week: Optional[int] = None
    week_number: Optional[int] = None
    week_start: Optional[date] = None
    week_end: Optional[date] = None


@dataclass
class ExecutionSummary:
    total_cents: int = 0
    average_per_bucket: Decimal = Decimal("0")
    peak_key: str = ""
    peak_cents: int = 0
    min_cents: int = 0
    installment_count: int = 0


@dataclass
class SkippedBudget:
    budget_id: str
    error: str  # exception class name
    reason: str


@dataclass
class BudgetExecution:
    """Output of the execution aggregator for one period"""

    view_mode: str
    buckets: List[ExecutionBucket] = field(default_factory=list)
    summary: ExecutionSummary = field(default_factory=ExecutionSummary)
    details: Dict[str, List[BudgetPaymentDetail]] = field(default_factory=dict)
    skipped: List[SkippedBudget] = field(default_factory=list)
