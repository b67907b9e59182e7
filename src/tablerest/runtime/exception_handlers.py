"""
Exception handlers for tablerest applications.

Maps the error kinds reported by routers to HTTP responses:
- NotFoundError: 404
- ValidationError / ConditionError: 400
- RouterConfigurationError: 500

Any other exception keeps FastAPI's default handling.
"""

from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response

from tablerest.errors import (
    ConditionError,
    NotFoundError,
    RouterConfigurationError,
    TableRestError,
    ValidationError,
)
from tablerest.runtime.logging import get_logger

logger = get_logger("HTTP")


def error_body(exc: TableRestError, error_type: str) -> dict[str, Any]:
    """JSON body for a tablerest error."""
    body: dict[str, Any] = {"detail": exc.message, "type": error_type, "code": exc.code}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the tablerest exception handlers on a FastAPI application.

    Args:
        app: FastAPI application instance
    """
    from fastapi import Request

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> Response:
        """Convert missing resources/operations to 404 Not Found."""
        return JSONResponse(status_code=404, content=error_body(exc, "not_found"))

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> Response:
        """Convert invalid client input to 400 Bad Request."""
        return JSONResponse(status_code=400, content=error_body(exc, "validation_error"))

    @app.exception_handler(ConditionError)
    async def condition_error_handler(request: Request, exc: ConditionError) -> Response:
        """Condition errors that reached the app without being re-tagged."""
        return JSONResponse(status_code=400, content=error_body(exc, "validation_error"))

    @app.exception_handler(RouterConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: RouterConfigurationError
    ) -> Response:
        """Wiring mistakes are server errors."""
        logger.error(f"Router misconfigured for {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc), "type": "configuration_error"},
        )
