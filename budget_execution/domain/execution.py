"""Budget execution aggregation - buckets expanded installments by day or ISO week"""

from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from budget_execution.domain.exceptions import (
    BudgetExpansionError,
    InvalidPaymentMethodError,
    InvalidViewModeError,
)
from budget_execution.domain.models import (
    Budget,
    BudgetExecution,
    BudgetPaymentDetail,
    ExecutionBucket,
    ExecutionSummary,
    ExpandedBudgetPayment,
    SkippedBudget,
)
from budget_execution.domain.recurrence import expand_budget_payments, resolve_start_day
from budget_execution.utils.date_utils import MONDAY, sunday_first_weekday, week_bounds, week_number

VIEW_MODES = ("daily", "weekly")
PAYMENT_METHODS = ("cash", "credit", "debit")


def validate_view_mode(view_mode: str) -> str:
    if view_mode not in VIEW_MODES:
        raise InvalidViewModeError("Invalid viewMode. Must be 'daily' or 'weekly'.")
    return view_mode


def validate_payment_methods(payment_methods: Optional[Sequence[str]]) -> Optional[List[str]]:
    """None means all methods; an explicit filter must be non-empty, known and unique"""
    if payment_methods is None:
        return None

    methods = list(payment_methods)
    if not methods:
        raise InvalidPaymentMethodError("Payment method filter cannot be empty. Omit it to include all methods.")

    invalid = [m for m in methods if m not in PAYMENT_METHODS]
    if invalid:
        raise InvalidPaymentMethodError(
            f"Invalid payment methods: {', '.join(invalid)}. Valid values: {', '.join(PAYMENT_METHODS)}"
        )

    if len(set(methods)) != len(methods):
        raise InvalidPaymentMethodError("Duplicate payment methods are not allowed.")

    return methods


def expand_all(
    budgets: List[Budget],
    skip_invalid: bool = True,
) -> tuple[List[ExpandedBudgetPayment], List[SkippedBudget]]:
    """
    Expand every budget into installments.

    A budget with malformed recurrence data is skipped and reported when
    skip_invalid is set; otherwise the first failure propagates.
    """
    payments: List[ExpandedBudgetPayment] = []
    skipped: List[SkippedBudget] = []

    for budget in budgets:
        start_day = resolve_start_day(budget.category_default_day, budget.default_date)
        try:
            payments.extend(expand_budget_payments(budget, start_day))
        except BudgetExpansionError as e:
            if not skip_invalid:
                raise
            skipped.append(SkippedBudget(budget_id=budget.budget_id, error=type(e).__name__, reason=str(e)))

    return payments, skipped


def bucket_payments(
    payments: List[ExpandedBudgetPayment],
    budgets: List[Budget],
    view_mode: str,
    week_starts_on: int = MONDAY,
) -> tuple[List[ExecutionBucket], Dict[str, List[BudgetPaymentDetail]]]:
    """Group installments by date (daily) or week (weekly), sorted ascending"""
    category_names = {b.budget_id: b.category_name for b in budgets}
    buckets: Dict[str, ExecutionBucket] = {}
    details: Dict[str, List[BudgetPaymentDetail]] = {}

    for payment in payments:
        if view_mode == "daily":
            key = payment.date.isoformat()
            bucket = buckets.get(key)
            if bucket is None:
                bucket = buckets[key] = ExecutionBucket(
                    key=key,
                    amount_cents=0,
                    day_of_week=sunday_first_weekday(payment.date),
                )
        else:
            week_num = week_number(payment.date, week_starts_on)
            key = f"week-{week_num}"
            bucket = buckets.get(key)
            if bucket is None:
                start, end = week_bounds(payment.date, week_starts_on)
                bucket = buckets[key] = ExecutionBucket(
                    key=key,
                    amount_cents=0,
                    week_number=week_num,
                    week_start=start,
                    week_end=end,
                )

        bucket.amount_cents += payment.amount_cents
        details.setdefault(key, []).append(
            BudgetPaymentDetail(
                budget_id=payment.budget_id,
                category_id=payment.category_id,
                category_name=category_names.get(payment.budget_id, ""),
                amount_cents=payment.amount_cents,
                date=payment.date,
                payment_method=payment.payment_method,
            )
        )

    if view_mode == "daily":
        ordered = sorted(buckets.values(), key=lambda b: b.key)
    else:
        ordered = sorted(buckets.values(), key=lambda b: b.week_number)

    return ordered, {b.key: details[b.key] for b in ordered}


def summarize(buckets: List[ExecutionBucket], installment_count: int = 0) -> ExecutionSummary:
    """Total, average per bucket, peak (first wins on ties) and minimum"""
    if not buckets:
        return ExecutionSummary()

    total = sum(b.amount_cents for b in buckets)

    peak = buckets[0]
    lowest = buckets[0]
    for bucket in buckets[1:]:
        if bucket.amount_cents > peak.amount_cents:
            peak = bucket
        if bucket.amount_cents < lowest.amount_cents:
            lowest = bucket

    return ExecutionSummary(
        total_cents=total,
        average_per_bucket=Decimal(total) / len(buckets),
        peak_key=peak.key,
        peak_cents=peak.amount_cents,
        min_cents=lowest.amount_cents,
        installment_count=installment_count,
    )


def aggregate_budget_execution(
    budgets: List[Budget],
    view_mode: str,
    payment_methods: Optional[Sequence[str]] = None,
    week_starts_on: int = MONDAY,
    skip_invalid: bool = True,
) -> BudgetExecution:
    """
    Main entry point: expand every budget of a period and bucket the installments.

    Flow:
    1. Validate view mode and payment method filter
    2. Resolve each budget's start day and expand it
    3. Bucket by day or week, sum amounts, collect drill-down details
    4. Compute summary statistics

    Raises:
        InvalidViewModeError, InvalidPaymentMethodError
        BudgetExpansionError: Only when skip_invalid is False
    """
    validate_view_mode(view_mode)
    methods = validate_payment_methods(payment_methods)

    if methods is not None:
        budgets = [b for b in budgets if b.payment_method in methods]

    if not budgets:
        return BudgetExecution(view_mode=view_mode)

    payments, skipped = expand_all(budgets, skip_invalid=skip_invalid)
    buckets, details = bucket_payments(payments, budgets, view_mode, week_starts_on)

    return BudgetExecution(
        view_mode=view_mode,
        buckets=buckets,
        summary=summarize(buckets, installment_count=len(payments)),
        details=details,
        skipped=skipped,
    )
