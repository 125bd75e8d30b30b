"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from payout_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from payout_gateway.api.routes import account, banks, history, payouts
from payout_gateway.api.schemas import ErrorResponse
from payout_gateway.domain.exceptions import (
    DirectoryUnavailable,
    SecondaryDirectoryError,
    UpstreamError,
    ValidationError,
)
from payout_gateway.infrastructure.observability.logging import setup_logging
from payout_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = settings.missing_credentials()
    if missing:
        logging.error(f"Missing payOS env variables: {', '.join(missing)}")
        raise RuntimeError(f"Missing payOS env variables: {', '.join(missing)}")
    yield


def _error(status_code: int, message, detail=None) -> JSONResponse:
    body = ErrorResponse(message=message, detail=detail).model_dump()
    if body["detail"] is None:
        del body["detail"]
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and request-validation errors to the `{error, message}` bodies the browser expects"""

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return _error(400, f"Invalid request: {problems}")

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        message = exc.detail if exc.detail is not None else exc.message
        return _error(exc.status_code or 500, message)

    @app.exception_handler(DirectoryUnavailable)
    async def handle_directory_unavailable(request: Request, exc: DirectoryUnavailable):
        return _error(500, str(exc))

    @app.exception_handler(SecondaryDirectoryError)
    async def handle_secondary_directory_error(request: Request, exc: SecondaryDirectoryError):
        return _error(500, "Could not fetch the bank list from vietqr.io", detail=exc.detail or exc.message)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="payOS Payout Gateway",
        description="Signed payout submission, bank directories and payout history proxy",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(banks.router, prefix="/api", tags=["banks"])
    app.include_router(account.router, prefix="/api", tags=["account"])
    app.include_router(payouts.router, prefix="/api", tags=["payouts"])
    app.include_router(history.router, prefix="/api", tags=["history"])

    return app


app = create_app()
