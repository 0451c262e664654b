"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from budget_execution.api.middleware import RequestIDMiddleware, MetricsMiddleware
from budget_execution.api.v1 import budget_execution, budgets
from budget_execution.infrastructure.observability.logging import setup_logging
from budget_execution.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Budget Execution Service",
        description="Recurring budget expansion and daily/weekly execution aggregation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(budget_execution.router, prefix="/v1", tags=["budget-execution"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])

    return app


app = create_app()
