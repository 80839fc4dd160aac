"""FastAPI app entrypoint."""

from __future__ import annotations

import logging

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pr_relay.api.middleware import (
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
)
from pr_relay.api.routes.trigger import router as trigger_router
from pr_relay.api.schemas.trigger import ErrorDetail, ErrorResponse, HealthResponse
from pr_relay.config import SERVICE_NAME, Settings
from pr_relay.core.dispatcher import Dispatcher
from pr_relay.core.errors import DispatchError, TriggerValidationError
from pr_relay.log import configure_logging

logger = logging.getLogger(__name__)


def _error(
    status_code: int,
    detail: ErrorDetail,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=detail).body(),
        headers=headers,
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TriggerValidationError)
    async def invalid_trigger(_: Request, exc: TriggerValidationError) -> JSONResponse:
        return _error(
            status.HTTP_400_BAD_REQUEST,
            ErrorDetail(message="Invalid input", details=exc.errors),
        )

    @app.exception_handler(DispatchError)
    async def dispatch_failed(_: Request, exc: DispatchError) -> JSONResponse:
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorDetail(message=exc.message, details=exc.details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return _error(
                status.HTTP_404_NOT_FOUND,
                ErrorDetail(message="Endpoint not found", path=request.url.path),
            )
        return _error(exc.status_code, ErrorDetail(message=str(exc.detail)), exc.headers)


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or Settings()
    logger.info(
        "GITHUB_REPO: %s, GITHUB_TOKEN configured: %s, environment: %s",
        settings.github_repo,
        bool(settings.token_value),
        settings.environment,
    )

    app = FastAPI(title="PR Relay", version="0.1.0")
    app.state.settings = settings
    app.state.dispatcher = Dispatcher(settings, transport=transport)

    app.add_middleware(
        UnhandledErrorMiddleware,
        include_traceback=settings.is_development,
    )
    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(
            settings.rate_limit_max,
            settings.rate_limit_window_seconds,
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    _register_error_handlers(app)
    app.include_router(trigger_router)

    @app.get("/health", tags=["system"], response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(service=SERVICE_NAME)

    return app


def run() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    logger.info("Server running on port %s", settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


app = create_app()
