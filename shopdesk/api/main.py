"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from shopdesk.api.middleware import RequestIDMiddleware, MetricsMiddleware
from shopdesk.api.v1 import catalog, contracts, debtors, payments, sales
from shopdesk.infrastructure.observability.logging import setup_logging
from shopdesk.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Shopdesk Back Office",
        description="Sales, commissions, debtor ledger and employee contracts",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(catalog.router, prefix="/v1", tags=["catalog"])
    app.include_router(sales.router, prefix="/v1", tags=["sales"])
    app.include_router(debtors.router, prefix="/v1", tags=["ledger"])
    app.include_router(contracts.router, prefix="/v1", tags=["contracts"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])

    return app


app = create_app()
