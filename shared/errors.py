"""
Shared error handling for the access guard services.
"""

from typing import Dict, Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry import trace
from pydantic import BaseModel, Field

from shared.logging import get_logger


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for access guard services."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class RemoteAuthorityError(AccessLayerException):
    """The remote authority answered with a non-success status."""

    status_code = 502

    def __init__(self, message: str, status: int, body: str, details: Optional[Dict[str, Any]] = None):
        self.status = status
        self.body = body
        merged = {"status": status, "body": body}
        merged.update(details or {})
        super().__init__("REMOTE_AUTHORITY_ERROR", message, merged)


class MalformedResponseError(AccessLayerException):
    """A payload did not match the expected schema."""

    status_code = 502

    def __init__(self, message: str, body: str, details: Optional[Dict[str, Any]] = None):
        self.body = body
        merged = {"body": body}
        merged.update(details or {})
        super().__init__("MALFORMED_RESPONSE", message, merged)


class MissingCredentialError(AccessLayerException):
    """Request credentials are absent, unknown or do not match.

    Every signature failure surfaces as this one error so callers cannot tell
    a missing header from an unreachable authority or a bad hash.
    """

    status_code = 401

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__("UNAUTHORIZED", message, details)


class InvalidContextError(AccessLayerException):
    """Flag context lacks the identifiers needed to build a cache key."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_CONTEXT", message, details)


def register_error_handlers(app: FastAPI) -> None:
    """Render AccessLayerException subclasses as ErrorResponse payloads."""
    logger = get_logger("shared.errors")

    @app.exception_handler(AccessLayerException)
    async def access_layer_exception_handler(request: Request, exc: AccessLayerException):
        """Handle AccessLayerException."""
        logger.warning(
            "Access layer error",
            code=exc.code,
            status_code=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_response().model_dump()
        )
