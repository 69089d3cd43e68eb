"""
FastAPI Application

Wires the orchestrator flows to HTTP and maps the exception taxonomy
to status codes:

- validation errors        → 400 with field-level messages
- AuthenticationError      → 401
- PermissionDeniedError    → 403
- NotFoundError            → 404
- DuplicateError           → 400
- StorageError / anything  → 500 with a generic message

Chatbot provider failures never reach this layer; the insight agent
turns them into replies.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from shopledger import __version__
from shopledger.api.routes import (
    assistant_router,
    auth_router,
    stats_router,
    transactions_router,
)
from shopledger.auth import AuthenticationError, PermissionDeniedError
from shopledger.config import ensure_secure_settings, get_settings
from shopledger.orchestrator import AppComponents, create_app_components
from shopledger.services.storage import DuplicateError, NotFoundError, StorageError
from shopledger.telemetry import (
    bind_correlation_id,
    clear_log_context,
    configure_logging,
    create_correlation_id,
    get_logger,
)


logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, **extra})


def _field_errors(errors: list[dict]) -> list[dict]:
    """Flatten pydantic errors into {field, message, type} entries."""
    flattened = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        flattened.append({
            "field": ".".join(location),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "value_error"),
        })
    return flattened


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request data",
            errors=_field_errors(exc.errors()),
        )

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        return _error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request data",
            errors=_field_errors(exc.errors()),
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_handler(request: Request, exc: AuthenticationError):
        return _error(status.HTTP_401_UNAUTHORIZED, str(exc))

    @app.exception_handler(PermissionDeniedError)
    async def permission_handler(request: Request, exc: PermissionDeniedError):
        return _error(status.HTTP_403_FORBIDDEN, str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(DuplicateError)
    async def duplicate_handler(request: Request, exc: DuplicateError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(StorageError)
    async def storage_handler(request: Request, exc: StorageError):
        logger.error("storage_error", path=request.url.path, error=str(exc))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def create_app(components: Optional[AppComponents] = None) -> FastAPI:
    """
    Build the application.

    Args:
        components: Pre-wired flows. Defaults to create_app_components().

    Raises:
        InsecureConfigurationError: Default session secret outside development
    """
    settings = get_settings()
    ensure_secure_settings(settings)
    configure_logging(settings.app.log_level)
    components = components or create_app_components()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        components.database.connect()
        components.database.create_tables()
        logger.info("app_started", environment=settings.app.app_environment)
        yield
        logger.info("app_stopped")

    app = FastAPI(
        title="Shop Ledger API",
        version=__version__,
        debug=settings.app.debug_mode,
        lifespan=lifespan,
    )
    app.state.components = components

    auth_settings = settings.auth
    app.add_middleware(
        SessionMiddleware,
        secret_key=auth_settings.session_secret,
        max_age=auth_settings.session_max_age_seconds,
        https_only=auth_settings.https_only,
        same_site="lax",
    )

    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        """Correlation ID, access log for /api, and the last-resort 500."""
        correlation_id = create_correlation_id()
        request.state.correlation_id = correlation_id
        bind_correlation_id(correlation_id, method=request.method, path=request.url.path)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("unhandled_error")
            response = _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

        duration_ms = round((time.perf_counter() - started) * 1000, 1)
        if request.url.path.startswith("/api"):
            logger.info(
                "request_completed",
                status=response.status_code,
                duration_ms=duration_ms,
            )
        response.headers[CORRELATION_HEADER] = str(correlation_id)
        clear_log_context()
        return response

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(transactions_router)
    app.include_router(stats_router)
    app.include_router(assistant_router)

    return app
