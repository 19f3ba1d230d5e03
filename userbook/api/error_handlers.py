"""Error Handlers: global exception handlers, the last line behind the routes.

Invariants:
    - UserbookError escaping a route -> error.html with the error's own status,
      logged at the level its severity names, with its category
    - RequestValidationError -> 400 error.html "invalid request"
    - Exception (catch-all) -> 500 "internal server error", never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse

from userbook.core.errors import ErrorSeverity, UserbookError
from userbook.schemas.views import ErrorPage

logger = logging.getLogger(__name__)

SEVERITY_LOG_LEVELS = {
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_userbook_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _render_error(request: Request, message: str, status_code: int) -> HTMLResponse:
    templates = request.app.state.templates
    return templates.TemplateResponse(
        request, "error.html",
        dict(ErrorPage(error=message, status_code=status_code)),
        status_code=status_code,
    )


def _register_userbook_error_handler(app: FastAPI) -> None:

    @app.exception_handler(UserbookError)
    async def userbook_error_handler(request: Request, exc: UserbookError):
        """Handle domain/infrastructure errors not mapped by a route."""
        logger.log(
            SEVERITY_LOG_LEVELS[exc.severity],
            f"UserbookError: {exc.message}",
            extra={
                "error_code": exc.code,
                "error_category": exc.category.value,
                "user_id": exc.context.user_id,
                "path": request.url.path,
            },
        )
        message = exc.message if exc.http_status < 500 else "internal server error"
        return _render_error(request, message, exc.http_status)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return _render_error(
            request, "invalid request", status.HTTP_400_BAD_REQUEST,
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return _render_error(
            request, "internal server error",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
