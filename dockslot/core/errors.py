"""
Centralized error handling for booking and calendar operations.
Services raise DockSlotError; the app renders it as {success, error, code}.
"""
from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

VALIDATION = "VALIDATION"
NOT_FOUND = "NOT_FOUND"
UNAVAILABLE = "UNAVAILABLE"
HIBERNATING = "HIBERNATING"
CAPACITY = "CAPACITY"
DUPLICATE = "DUPLICATE"
UNAUTHORIZED = "UNAUTHORIZED"
DATABASE = "DATABASE"
UNKNOWN = "UNKNOWN"

# HTTP status per code. Unlisted codes map to 500.
ERROR_STATUS: dict[str, int] = {
    VALIDATION: 400,
    CAPACITY: 400,
    UNAUTHORIZED: 401,
    HIBERNATING: 403,
    NOT_FOUND: 404,
    UNAVAILABLE: 409,
    DUPLICATE: 409,
    DATABASE: 500,
    UNKNOWN: 500,
}

STATUS_INTERNAL_ERROR = 500

MSG_SLOT_TAKEN = "Selected time slot is no longer available"


class DockSlotError(Exception):
    """A failure with a user-facing message and a machine-readable code."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message, "code": self.code}


def error_status(code: str) -> int:
    return ERROR_STATUS.get(code, STATUS_INTERNAL_ERROR)


def error_response(code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=error_status(code), content=DockSlotError(code, message).to_dict())


def _describe_validation_error(exc: RequestValidationError) -> str:
    problems = exc.errors()
    if not problems:
        return "Invalid request"
    first = problems[0]
    # drop the "body"/"query"/"path" prefix
    location = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def dockslot_error_handler(request: Request, exc: DockSlotError) -> JSONResponse:
    return JSONResponse(status_code=error_status(exc.code), content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(VALIDATION, _describe_validation_error(exc))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(UNKNOWN, "An unexpected error occurred")
