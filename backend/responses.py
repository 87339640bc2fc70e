"""Standardized response infrastructure for API endpoints.

Every endpoint answers with the same envelope: a structured code, a success
flag, a user-facing message, and either a data payload or error details.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from fastapi.responses import JSONResponse


class ResponseCode(str, Enum):
    """Response codes for API responses.

    Ranges: 0xxx=Success, 1xxx=Client Error, 2xxx=Server Error, 3xxx=External Service
    """

    # Success codes
    SUCCESS = "0000"
    FILE_PARSED = "0001"

    # Client errors
    VALIDATION_ERROR = "1000"
    UNSUPPORTED_FILE_TYPE = "1001"
    FILE_TOO_LARGE = "1002"
    NO_FILE_PROVIDED = "1003"
    CLIENT_RATE_LIMIT = "1004"
    CORRUPTED_FILE = "1005"
    NOT_FOUND = "1006"

    # Server errors
    INTERNAL_ERROR = "2000"

    # External service errors
    LLM_ERROR = "3000"
    LLM_RATE_LIMIT = "3001"
    LLM_AUTH_FAILED = "3002"


# Response messages mapped to codes
RESPONSE_MESSAGES: dict[ResponseCode, str] = {
    ResponseCode.SUCCESS: "Operation completed successfully",
    ResponseCode.FILE_PARSED: "File parsed successfully",
    ResponseCode.VALIDATION_ERROR: "Request validation failed",
    ResponseCode.UNSUPPORTED_FILE_TYPE: "Unsupported file type",
    ResponseCode.FILE_TOO_LARGE: "File exceeds maximum allowed size",
    ResponseCode.NO_FILE_PROVIDED: "No file provided",
    ResponseCode.CLIENT_RATE_LIMIT: "Too many requests. Please slow down.",
    ResponseCode.CORRUPTED_FILE: "File appears corrupted",
    ResponseCode.NOT_FOUND: "Resource not found",
    ResponseCode.INTERNAL_ERROR: "An internal error occurred",
    ResponseCode.LLM_ERROR: "Failed to get AI response",
    ResponseCode.LLM_RATE_LIMIT: "Rate limit exceeded. Please wait a moment and try again.",
    ResponseCode.LLM_AUTH_FAILED: "Invalid API key. Please check your Anthropic API key.",
}

# HTTP status codes for each response code
HTTP_STATUS_MAP: dict[ResponseCode, int] = {
    ResponseCode.SUCCESS: 200,
    ResponseCode.FILE_PARSED: 200,
    ResponseCode.VALIDATION_ERROR: 422,
    ResponseCode.UNSUPPORTED_FILE_TYPE: 400,
    ResponseCode.FILE_TOO_LARGE: 413,
    ResponseCode.NO_FILE_PROVIDED: 400,
    ResponseCode.CLIENT_RATE_LIMIT: 429,
    ResponseCode.CORRUPTED_FILE: 400,
    ResponseCode.NOT_FOUND: 404,
    ResponseCode.INTERNAL_ERROR: 500,
    ResponseCode.LLM_ERROR: 500,
    ResponseCode.LLM_RATE_LIMIT: 429,
    ResponseCode.LLM_AUTH_FAILED: 401,
}


def get_message(code: ResponseCode) -> str:
    """Get the message for a response code."""
    return RESPONSE_MESSAGES.get(code, "Unknown error")


def get_http_status(code: ResponseCode) -> int:
    """Get HTTP status code for a response code."""
    return HTTP_STATUS_MAP.get(code, 500)


def success_dict(
    code: ResponseCode,
    data: Any = None,
    custom_message: str | None = None,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Build a standardized success response dictionary."""
    return {
        "code": code.value,
        "success": True,
        "message": custom_message or get_message(code),
        "timestamp": datetime.now(UTC).isoformat(),
        "request_id": request_id,
        "data": data,
    }


def error_dict(
    code: ResponseCode,
    custom_message: str | None = None,
    error_details: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Build a standardized error response dictionary."""
    return {
        "code": code.value,
        "success": False,
        "message": custom_message or get_message(code),
        "timestamp": datetime.now(UTC).isoformat(),
        "request_id": request_id,
        "error_details": error_details,
    }


# --- JSONResponse helpers ---


def success_response(
    code: ResponseCode,
    data: Any = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a JSONResponse with success format."""
    return JSONResponse(
        content=success_dict(code, data, request_id=request_id),
        status_code=get_http_status(code),
    )


def error_response(
    code: ResponseCode,
    custom_message: str | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a JSONResponse with error format."""
    return JSONResponse(
        content=error_dict(code, custom_message, request_id=request_id),
        status_code=get_http_status(code),
    )
