"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.exc import OperationalError
from starlette.responses import Response

from domus.api.dependencies import get_request_id
from domus.api.middleware import RequestIDMiddleware, MetricsMiddleware
from domus.api.v1 import admin, houses, payments, rooms, stats, tenants
from domus.domain.exceptions import NotFoundError, StoreUnavailableError
from domus.infrastructure.database.session import init_db
from domus.infrastructure.observability.logging import setup_logging
from domus.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Create missing tables on startup"""
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Domus Rentals",
        description="Houses, rooms, tenants and monthly rent tracking",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Storage failures on read paths are fatal to the request, never retried
    @app.exception_handler(OperationalError)
    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: Exception):
        logging.error(f"Store unavailable: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(houses.router, prefix="/v1", tags=["houses"])
    app.include_router(rooms.router, prefix="/v1", tags=["rooms"])
    app.include_router(tenants.router, prefix="/v1", tags=["tenants"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(stats.router, prefix="/v1", tags=["stats"])
    app.include_router(admin.router, prefix="/v1", tags=["admin"])

    return app


app = create_app()
