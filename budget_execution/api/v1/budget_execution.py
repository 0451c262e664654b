"""GET /v1/budget-execution/{period_id} - Daily/weekly budget execution endpoint"""

import time
import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_execution.api.v1.schemas import (
    BudgetDetailSchema,
    BudgetExecutionResponse,
    ExecutionDataPoint,
    ExecutionSummarySchema,
    SkippedBudgetSchema,
)
from budget_execution.api.dependencies import get_request_id, get_week_starts_on
from budget_execution.config import settings
from budget_execution.infrastructure.database.session import get_db
from budget_execution.infrastructure.database.repositories import BudgetRepository, PeriodRepository
from budget_execution.domain.execution import aggregate_budget_execution, validate_payment_methods, validate_view_mode
from budget_execution.domain.exceptions import (
    BudgetExpansionError,
    DataStoreError,
    InvalidPaymentMethodError,
    InvalidViewModeError,
    PeriodNotFoundError,
)
from budget_execution.domain.models import BudgetExecution
from budget_execution.infrastructure.observability.metrics import (
    record_budget_execution,
    record_expansion_failure,
    store_failures_counter,
)
from budget_execution.infrastructure.observability.logging import log_budget_execution, log_skipped_budget

router = APIRouter()


def cents_to_amount(cents: int | float) -> float:
    return round(cents / 100, 2)


def parse_payment_methods(raw: Optional[str]) -> Optional[List[str]]:
    """Comma-separated query value -> list; absent means all methods"""
    if raw is None:
        return None
    return [m.strip() for m in raw.split(",") if m.strip()]


def to_response(period_id: str, period_name: str, execution: BudgetExecution) -> BudgetExecutionResponse:
    summary = execution.summary

    return BudgetExecutionResponse(
        period_id=period_id,
        period_name=period_name,
        view_mode=execution.view_mode,
        data=[
            ExecutionDataPoint(
                date=bucket.key,
                amount=cents_to_amount(bucket.amount_cents),
                day_of_week=bucket.day_of_week,
                week_number=bucket.week_number,
                week_start=bucket.week_start,
                week_end=bucket.week_end,
            )
            for bucket in execution.buckets
        ],
        summary=ExecutionSummarySchema(
            total_budget=cents_to_amount(summary.total_cents),
            average_per_day=cents_to_amount(float(summary.average_per_bucket)),
            peak_date=summary.peak_key,
            peak_amount=cents_to_amount(summary.peak_cents),
            min_amount=cents_to_amount(summary.min_cents),
            installment_count=summary.installment_count,
        ),
        budget_details={
            key: [
                BudgetDetailSchema(
                    budget_id=d.budget_id,
                    category_id=d.category_id,
                    category_name=d.category_name,
                    amount=cents_to_amount(d.amount_cents),
                    date=d.date,
                    payment_method=d.payment_method,
                )
                for d in details
            ]
            for key, details in execution.details.items()
        },
        skipped_budgets=[
            SkippedBudgetSchema(budget_id=s.budget_id, error=s.error, reason=s.reason)
            for s in execution.skipped
        ],
    )


@router.get(
    "/budget-execution/{period_id}",
    response_model=BudgetExecutionResponse,
    response_model_exclude_none=True,
)
def get_budget_execution(
    period_id: str,
    request: Request,
    view_mode: Optional[str] = Query(None, alias="viewMode", description="daily | weekly"),
    payment_methods: Optional[str] = Query(
        None, alias="paymentMethods", description="Comma-separated subset of cash,credit,debit"
    ),
    db: Session = Depends(get_db),
    week_starts_on: int = Depends(get_week_starts_on),
):
    """
    Aggregate a period's budgets into daily or weekly execution buckets.

    Flow:
    1. Validate query parameters (before touching the store)
    2. Load the period and its budgets
    3. Expand recurring budgets into installments and bucket them
    4. Return buckets, summary and per-bucket drill-down
    """
    start_time = time.time()
    request_id = get_request_id(request)
    view_mode = view_mode or settings.default_view_mode

    try:
        validate_view_mode(view_mode)
        methods = validate_payment_methods(parse_payment_methods(payment_methods))
    except (InvalidViewModeError, InvalidPaymentMethodError) as e:
        logging.warning(f"Rejected budget execution query: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    try:
        period = PeriodRepository(db).get_period_by_id(period_id)
        if period is None:
            raise PeriodNotFoundError(f"Period {period_id} not found")

        budgets = BudgetRepository(db).get_budgets_for_period(period_id, date(period.year, period.month, 1))

        execution = aggregate_budget_execution(
            budgets,
            view_mode,
            payment_methods=methods,
            week_starts_on=week_starts_on,
            skip_invalid=settings.skip_invalid_budgets,
        )

    except PeriodNotFoundError as e:
        logging.info(f"{e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Period not found")

    except DataStoreError as e:
        store_failures_counter.inc()
        logging.error(f"Budget store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=str(e))

    except BudgetExpansionError as e:
        record_expansion_failure(type(e).__name__)
        logging.error(
            f"Budget expansion failed: {e}",
            extra={"request_id": request_id, "budget_id": e.budget_id},
        )
        raise HTTPException(status_code=422, detail=f"Budget {e.budget_id}: {e}")

    for skipped in execution.skipped:
        record_expansion_failure(skipped.error)
        log_skipped_budget(request_id, period_id, skipped.budget_id, skipped.reason)

    duration_ms = (time.time() - start_time) * 1000
    record_budget_execution(
        view_mode,
        bucket_count=len(execution.buckets),
        installment_count=execution.summary.installment_count,
        skipped_count=len(execution.skipped),
    )
    log_budget_execution(
        request_id, period_id, view_mode, len(execution.buckets), len(execution.skipped), duration_ms
    )

    return to_response(period_id, period.name, execution)
