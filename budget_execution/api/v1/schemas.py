"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import date
from typing import Dict, List, Optional


class CamelModel(BaseModel):
    """Serializes snake_case fields as camelCase JSON keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExecutionDataPoint(CamelModel):
    """One daily or weekly bucket"""

    date: str  # YYYY-MM-DD (daily) or week-<N> (weekly)
    amount: float
    day_of_week: Optional[int] = None
    week_number: Optional[int] = None
    week_start: Optional[date] = None
    week_end: Optional[date] = None


class ExecutionSummarySchema(CamelModel):
    total_budget: float = 0
    average_per_day: float = 0
    peak_date: str = ""
    peak_amount: float = 0
    min_amount: float = 0
    installment_count: int = 0


class BudgetDetailSchema(CamelModel):
    """Installment drill-down inside a bucket"""

    budget_id: str
    category_id: str
    category_name: str
    amount: float
    date: date
    payment_method: str


class SkippedBudgetSchema(CamelModel):
    budget_id: str
    error: str
    reason: str


class BudgetExecutionResponse(CamelModel):
    """Response for GET /v1/budget-execution/{period_id}"""

    period_id: str
    period_name: str
    view_mode: str
    data: List[ExecutionDataPoint]
    summary: ExecutionSummarySchema
    budget_details: Dict[str, List[BudgetDetailSchema]]
    skipped_budgets: List[SkippedBudgetSchema] = []


class PaymentSchema(CamelModel):
    """Single expanded installment"""

    date: date
    amount: float
    payment_method: str
    is_recurring: bool
    occurrence_number: int
    total_occurrences: int


class BudgetPaymentsResponse(CamelModel):
    """Response for GET /v1/budgets/{budget_id}/payments"""

    budget_id: str
    category_id: str
    period_id: str
    total_amount: float
    recurrence_frequency: Optional[str] = None
    start_day: int
    description: str
    payments: List[PaymentSchema]
