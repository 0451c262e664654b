"""Prometheus metrics for monitoring budget execution requests and expansion health"""

from prometheus_client import Counter, Histogram

# Aggregation metrics
budget_execution_counter = Counter(
    "budget_execution_requests_total",
    "Budget execution aggregations served",
    ["view_mode", "outcome"],  # outcome: ok | empty | partial
)

installments_generated_counter = Counter(
    "budget_installments_generated_total",
    "Installments produced by recurrence expansion",
)

expansion_failures_counter = Counter(
    "budget_expansion_failures_total",
    "Budgets that could not be expanded",
    ["reason"],  # InvalidRecurrenceConfigError | InvalidStartDayError | InvalidBudgetAmountError
)

# Store metrics
store_failures_counter = Counter(
    "budget_store_failures_total",
    "Failed queries against the budget store",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_budget_execution(view_mode: str, bucket_count: int, installment_count: int, skipped_count: int) -> None:
    """Record aggregation outcome and installment volume"""
    if bucket_count == 0 and skipped_count == 0:
        outcome = "empty"
    elif skipped_count > 0:
        outcome = "partial"
    else:
        outcome = "ok"

    budget_execution_counter.labels(view_mode=view_mode, outcome=outcome).inc()
    installments_generated_counter.inc(installment_count)


def record_expansion_failure(reason: str) -> None:
    expansion_failures_counter.labels(reason=reason).inc()
