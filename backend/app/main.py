"""
FastAPI application entry point.

create_app() builds the app from one Settings object; the token codec and
storage gateway are created here once and shared through app.state.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from app.api.router import api_router
from app.auth.gateway import AuthGatewayMiddleware
from app.auth.tokens import TokenCodec
from app.config import Settings, get_settings
from app.database import init_db
from app.errors import VaultixError
from app.middleware.metrics_middleware import MetricsMiddleware
from app.storage.gateway import ObjectStorageGateway
from app.utils.logging import configure_logging

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Configure logging and create tables
    """
    settings: Settings = app.state.settings

    # Configure structured JSON logging
    configure_logging('vaultix-api', settings.log_level)

    await init_db()

    yield


async def vaultix_error_handler(request: Request, exc: VaultixError) -> JSONResponse:
    """Render application errors as {detail, kind, ...details}."""
    if exc.status_code >= 500:
        logger.error(
            f"Request failed: {exc.message}",
            extra={"event": "request_failed", "kind": exc.kind, "path": request.url.path}
        )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_response(), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Schema violations are client errors: 400 ValidationFailed."""
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid request body",
            "kind": "ValidationFailed",
            "issues": jsonable_encoder(exc.errors()),
        },
    )


def create_app(settings: Settings) -> FastAPI:
    """Build the API for the given settings."""
    app = FastAPI(
        title="Vaultix API",
        description="Accounts, folders and direct-to-storage uploads",
        version=API_VERSION,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.token_codec = TokenCodec.from_settings(settings)
    app.state.storage_gateway = ObjectStorageGateway(settings)

    app.add_exception_handler(VaultixError, vaultix_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Innermost: runs after CORS and metrics, before any route
    app.add_middleware(AuthGatewayMiddleware, token_codec=app.state.token_codec)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Metrics middleware (outermost so rejected requests are counted too)
    app.add_middleware(MetricsMiddleware)

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Vaultix API",
            "version": API_VERSION,
            "environment": settings.environment
        }

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    return app


app = create_app(get_settings())
