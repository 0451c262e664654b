"""GET /v1/budgets/{budget_id}/payments - Preview a budget's installment schedule"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from budget_execution.api.v1.schemas import BudgetPaymentsResponse, PaymentSchema
from budget_execution.api.dependencies import get_request_id
from budget_execution.infrastructure.database.session import get_db
from budget_execution.infrastructure.database.repositories import BudgetRepository
from budget_execution.domain.recurrence import (
    describe_recurrence,
    expand_budget_payments,
    parse_recurrence_policy,
    resolve_start_day,
)
from budget_execution.domain.exceptions import BudgetExpansionError, BudgetNotFoundError, DataStoreError
from budget_execution.infrastructure.observability.metrics import record_expansion_failure, store_failures_counter

router = APIRouter()


@router.get("/budgets/{budget_id}/payments", response_model=BudgetPaymentsResponse)
def get_budget_payments(budget_id: str, request: Request, db: Session = Depends(get_db)):
    """
    Expand a single budget using its category's recurrence policy.

    Returns:
        Installments ordered by date, summing exactly to the budget amount
    """
    request_id = get_request_id(request)

    try:
        budget = BudgetRepository(db).get_budget_by_id(budget_id)
        if budget is None:
            raise BudgetNotFoundError(f"Budget {budget_id} not found")
    except BudgetNotFoundError:
        raise HTTPException(status_code=404, detail="Budget not found")
    except DataStoreError as e:
        store_failures_counter.inc()
        logging.error(f"Budget store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=str(e))

    start_day = resolve_start_day(budget.category_default_day, budget.default_date)

    try:
        policy = parse_recurrence_policy(
            budget.recurrence_frequency, budget.recurrence_step_days, budget.recurrence_count
        )
        payments = expand_budget_payments(budget, start_day)
    except BudgetExpansionError as e:
        record_expansion_failure(type(e).__name__)
        logging.warning(f"Invalid budget configuration: {e}", extra={"request_id": request_id, "budget_id": budget_id})
        raise HTTPException(status_code=422, detail=str(e))

    return BudgetPaymentsResponse(
        budget_id=budget.budget_id,
        category_id=budget.category_id,
        period_id=budget.period_id,
        total_amount=float(budget.total_amount),
        recurrence_frequency=budget.recurrence_frequency,
        start_day=start_day,
        description=describe_recurrence(policy, start_day),
        payments=[
            PaymentSchema(
                date=p.date,
                amount=float(p.amount),
                payment_method=p.payment_method,
                is_recurring=p.is_recurring,
                occurrence_number=p.occurrence_number,
                total_occurrences=p.total_occurrences,
            )
            for p in payments
        ],
    )
