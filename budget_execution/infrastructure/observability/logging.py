"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from budget_execution.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_budget_execution(
    request_id: str,
    period_id: str,
    view_mode: str,
    bucket_count: int,
    skipped_count: int,
    duration_ms: float,
) -> None:
    """Log structured aggregation outcome for analysis"""
    logging.info(
        "Budget execution computed",
        extra={
            "request_id": request_id,
            "period_id": period_id,
            "step": "budget_execution_complete",
            "view_mode": view_mode,
            "bucket_count": bucket_count,
            "skipped_count": skipped_count,
            "duration_ms": duration_ms,
        },
    )


def log_skipped_budget(request_id: str, period_id: str, budget_id: str, reason: str) -> None:
    logging.warning(
        "Budget skipped: invalid recurrence configuration",
        extra={
            "request_id": request_id,
            "period_id": period_id,
            "budget_id": budget_id,
            "step": "budget_expansion",
            "reason": reason,
        },
    )
