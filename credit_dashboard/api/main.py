"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from credit_dashboard.api.middleware import RequestIDMiddleware, MetricsMiddleware
from credit_dashboard.api.v1 import portfolio, recommendations, insights, reports
from credit_dashboard.infrastructure.database.models import Base
from credit_dashboard.infrastructure.database.session import engine
from credit_dashboard.infrastructure.observability.logging import setup_logging
from credit_dashboard.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables that do not exist yet
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Credit Dashboard",
        description="Loan increment recommendations, portfolio metrics and AI commentary",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
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
    app.include_router(portfolio.router, prefix="/v1", tags=["portfolio"])
    app.include_router(recommendations.router, prefix="/v1", tags=["recommendations"])
    app.include_router(insights.router, prefix="/v1", tags=["insights"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
