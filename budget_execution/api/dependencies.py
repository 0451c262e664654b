"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from budget_execution.config import settings
from budget_execution.utils.date_utils import MONDAY, SUNDAY


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_week_starts_on() -> int:
    """Week-start convention for weekly buckets, from settings"""
    return SUNDAY if settings.week_starts_on == "sunday" else MONDAY
