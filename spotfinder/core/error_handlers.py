"""
Error handlers for the FastAPI application.

Every failure leaves the API as an ErrorEnvelope carrying one human-readable
message plus the machine-readable code, reason and pipeline stage.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Optional

from spotfinder.core.exceptions import SpotFinderException, ErrorCode
from spotfinder.schemas.base import ErrorEnvelope

logger = logging.getLogger(__name__)

# Status codes raised by routing or dependencies, not by the pipeline
HTTP_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    503: ErrorCode.SERVICE_UNAVAILABLE.value,
}


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    request_id: str,
    reason: Optional[str] = None,
    stage: Optional[str] = None,
) -> JSONResponse:
    envelope = ErrorEnvelope(
        error=message,
        error_code=error_code,
        reason=reason,
        stage=stage,
        request_id=request_id,
    )
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))


async def handle_spot_finder_exception(request: Request, exc: SpotFinderException) -> JSONResponse:
    """
    Render a pipeline failure.

    The status code comes from the exception: 404 for a missing location or
    no match, 502 for upstream failures.
    """
    request_id = _request_id(request)
    stage = exc.stage.value if exc.stage else None

    logger.warning(
        f"{exc.reason.value} at {stage or 'unknown stage'} for request {request_id}: {exc.message}",
        extra={
            'request_id': request_id,
            'error_code': exc.error_code.value,
            'reason': exc.reason.value,
            'stage': stage,
            'details': exc.details,
        }
    )

    return error_response(
        exc.status_code,
        exc.error_code.value,
        exc.message,
        request_id,
        reason=exc.reason.value,
        stage=stage,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten request validation errors into one "field: message" string."""
    request_id = _request_id(request)

    messages = []
    for error in exc.errors():
        field = '.'.join(str(loc) for loc in error['loc'] if loc not in ('body', 'query'))
        messages.append(f"{field}: {error['msg']}" if field else error['msg'])

    logger.info(
        f"Rejected request {request_id}: {'; '.join(messages)}",
        extra={'request_id': request_id, 'request_path': request.url.path}
    )

    return error_response(
        422,
        ErrorCode.VALIDATION_ERROR.value,
        "; ".join(messages) or "Request validation failed",
        request_id,
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    request_id = _request_id(request)
    error_code = HTTP_ERROR_CODES.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR.value)

    logger.info(
        f"{request.method} {request.url.path} -> {exc.status_code} {exc.detail}",
        extra={'request_id': request_id}
    )

    return error_response(exc.status_code, error_code, str(exc.detail), request_id)


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log with traceback and hide the details from the client."""
    request_id = _request_id(request)

    logger.error(
        f"Unhandled {type(exc).__name__} in request {request_id}: {exc}",
        exc_info=exc,
        extra={'request_id': request_id, 'request_path': request.url.path}
    )

    return error_response(
        500,
        ErrorCode.INTERNAL_SERVER_ERROR.value,
        "An internal server error occurred",
        request_id,
    )


def setup_error_handlers(app):
    """
    Register the envelope handlers on the application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(SpotFinderException, handle_spot_finder_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)
