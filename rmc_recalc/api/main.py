"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from rmc_recalc.api.middleware import RequestIDMiddleware, MetricsMiddleware
from rmc_recalc.api.v1 import calculations, rates, statements
from rmc_recalc.infrastructure.database.session import init_db
from rmc_recalc.infrastructure.observability.logging import setup_logging
from rmc_recalc.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="RMC Recalculation Service",
        description="Statement extraction and RMC loan recalculation",
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
    app.include_router(statements.router, prefix="/v1", tags=["statements"])
    app.include_router(calculations.router, prefix="/v1", tags=["calculations"])
    app.include_router(rates.router, prefix="/v1", tags=["rates"])

    return app


app = create_app()
