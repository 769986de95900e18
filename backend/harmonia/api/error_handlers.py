"""Error Handlers — global exception handlers rendering the response envelope.

Invariants:
    - HarmoniaError → {status, data} with the error's own HTTP status
    - RequestValidationError (path/query typing) → 422 with field-level details
    - Exception (catch-all) → 500; traceback text only in development
    - Every handled failure yields exactly one envelope; no request left unanswered

Design Decisions:
    - Three-layer handler: domain (HarmoniaError), validation (FastAPI), catch-all
    - Registered by RouterRegistry together with the routes
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from harmonia.api.envelope import diagnostic_text
from harmonia.config import Environment
from harmonia.core.envelope import StatusCode, build_envelope
from harmonia.core.errors import HarmoniaError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI, environment: Environment) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_harmonia_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app, environment)


def _register_harmonia_error_handler(app: FastAPI) -> None:

    @app.exception_handler(HarmoniaError)
    async def harmonia_error_handler(request: Request, exc: HarmoniaError):
        """Handle all Harmonia domain/infrastructure errors."""
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"HarmoniaError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle FastAPI parameter validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=int(StatusCode.UNPROCESSABLE_ENTITY),
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI, environment: Environment) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all for failures inside a request's own error boundary."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        data = (
            diagnostic_text(exc, environment)
            if environment.is_development
            else "An unexpected error occurred"
        )
        return JSONResponse(
            status_code=int(StatusCode.INTERNAL_SERVER_ERROR),
            content=build_envelope(StatusCode.INTERNAL_SERVER_ERROR, data),
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return build_envelope(
        StatusCode.UNPROCESSABLE_ENTITY,
        [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    )
