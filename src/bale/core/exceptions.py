"""Domain error taxonomy and the handlers that render it as JSON.

Every API failure leaves the service as ``{"error": ..., "request_id": ...}``.
Services raise the subclasses of :class:`BaleError`; anything else that
escapes a handler is an upstream failure and is logged in full but reported
to the client generically.
"""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.bale.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"


class BaleError(Exception):
    """Base class for expected domain failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BaleError):
    """Malformed or missing input. Always caller-correctable."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationRequired(BaleError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class AuthorizationDenied(BaleError):
    """Caller is known but lacks the role. The message never says which check failed."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"

    def __init__(self, message: str | None = None):
        # Reason is kept for logs only.
        self.reason = message
        super().__init__(self.default_message)


class NotFound(BaleError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidState(BaleError):
    """Entity exists but is not in the status the transition requires."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid state"


class UpstreamFailure(BaleError):
    """Store or identity provider failed. Detail stays server-side."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = GENERIC_SERVER_ERROR

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(self.default_message)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "request_id": correlation_id.get()},
    )


def _humanize_validation_error(exc: RequestValidationError) -> str:
    """Turn the first pydantic error into a field-level message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request body"

    first = errors[0]
    # loc is ("body", "field", ...) for body params
    field_path = [str(part) for part in first.get("loc", ()) if part not in ("body", "query")]
    field = ".".join(field_path)
    if first.get("type") == "missing":
        return f"{field} is required" if field else "Request body is required"
    if first.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    message = first.get("msg", "is invalid")
    return f"{field}: {message}" if field else message


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers that render every failure with an error field and request_id."""

    @app.exception_handler(BaleError)
    async def bale_error_handler(request: Request, exc: BaleError) -> JSONResponse:
        if isinstance(exc, UpstreamFailure):
            logger.error(
                "Upstream failure",
                path=request.url.path,
                detail=exc.detail,
            )
        elif isinstance(exc, AuthorizationDenied):
            logger.info("Authorization denied", path=request.url.path, reason=exc.reason)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, _humanize_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        return _error_response(
            status.HTTP_429_TOO_MANY_REQUESTS, f"Rate limit exceeded: {exc.detail}"
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_SERVER_ERROR)
