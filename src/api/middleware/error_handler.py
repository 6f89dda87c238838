"""
Error handling middleware.

Standardizes all API error responses to the shape
``{error, errorCode, hint, path, timestamp}``:
- error: human-readable description
- errorCode: machine-readable identifier
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger
from src.core.exceptions import (
    AuthenticationError,
    IdentityProviderError,
    PdfRenderError,
    QuoteAppError,
    RecordNotFoundError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"

# Map exceptions to HTTP status codes; first match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    RecordNotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    IdentityProviderError: status.HTTP_400_BAD_REQUEST,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    PdfRenderError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "UNAUTHORIZED": "Send a valid access token as 'Authorization: Bearer <token>'.",
    "QUOTATION_NOT_FOUND": "Check the quotation ID and try GET /quotations to list your quotations.",
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET /invoices to list your invoices.",
    "CLIENT_NOT_FOUND": "Check the client ID and try GET /clients to list your clients.",
    "PROFILE_NOT_FOUND": "Create the profile with PUT /profile.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "IDENTITY_PROVIDER_ERROR": "The account could not be created. Check the email address and password.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "PDF_RENDER_FAILED": "The PDF could not be generated. Check the document data.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required.",
    404: "The requested resource was not found. Verify the ID.",
    405: "This method is not allowed on this path.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: object = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=message,
        error_code=error_code,
        hint=_get_hint(error_code, status_code),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.to_body())


def handle_app_error(request: Request, exc: QuoteAppError) -> JSONResponse:
    """Convert a domain exception to its HTTP response."""
    status_code = _status_for(exc)
    request_id = getattr(request.state, "request_id", None)

    if status_code >= 500:
        logger.error(
            "request_failed",
            request_id=request_id,
            path=request.url.path,
            error_type=exc.code,
            error=exc.message,
        )
        return build_error_response(request, status_code, exc.code, GENERIC_ERROR_MESSAGE)

    logger.info(
        "request_rejected",
        request_id=request_id,
        path=request.url.path,
        status_code=status_code,
        error_type=exc.code,
    )
    # Reasons from the identity provider are not echoed back on 401
    detail = None if isinstance(exc, AuthenticationError) else exc.details or None
    return build_error_response(request, status_code, exc.code, exc.message, detail)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Last line of defence: anything not handled by the exception handlers
    becomes a 500 with a generic message.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)

        except QuoteAppError as e:
            return handle_app_error(request, e)

        except Exception as e:
            logger.error(
                "unhandled_exception",
                request_id=getattr(request.state, "request_id", None),
                path=request.url.path,
                error_type=e.__class__.__name__,
                error=str(e),
                traceback=traceback.format_exc(),
            )
            return build_error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                GENERIC_ERROR_MESSAGE,
            )


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(QuoteAppError)
    async def app_error_handler(request: Request, exc: QuoteAppError) -> JSONResponse:
        return handle_app_error(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return build_error_response(
            request,
            422,
            "REQUEST_VALIDATION_ERROR",
            "Request validation failed",
            "; ".join(errors),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions (unknown routes, bad methods) with the same shape."""
        return build_error_response(
            request,
            exc.status_code,
            _infer_error_code(exc.status_code),
            str(exc.detail or "An error occurred"),
        )


def _infer_error_code(status_code: int) -> str:
    """Machine-readable error code for a bare HTTP status."""
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "UNPROCESSABLE_ENTITY",
    }.get(status_code, "HTTP_ERROR")
