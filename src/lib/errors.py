"""
Centralized Error Response Builder for the Action Wizard.

Provides consistent error codes and user-facing messages for the
notifications the wizard raises (toasts, inline warnings).

Error codes are constants that map to message strings. The builder
returns structured error dicts the host application can render as-is.
"""

from __future__ import annotations

from typing import Any

from src.lib.exceptions import (
    ActionNotFoundError,
    ColorExtractionError,
    ColorLimitReachedError,
    DuplicateSubmissionError,
    GatewayError,
    PaletteCodeNotFoundError,
    StepValidationError,
)

# =============================================================================
# Error Code Constants
# =============================================================================

VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"
GATEWAY_ERROR = "GATEWAY_ERROR"
EXTRACTION_FAILED = "EXTRACTION_FAILED"
COLOR_LIMIT_REACHED = "COLOR_LIMIT_REACHED"
DUPLICATE_SUBMISSION = "DUPLICATE_SUBMISSION"
PARTIAL_FAILURE = "PARTIAL_FAILURE"
INTERNAL_ERROR = "INTERNAL_ERROR"

# =============================================================================
# Message Registry
# =============================================================================

_ERROR_MESSAGES: dict[str, str] = {
    VALIDATION_ERROR: "Some required information is missing. Please check the form.",
    NOT_FOUND: "We couldn't find what you were looking for.",
    GATEWAY_ERROR: "Something went wrong while saving. Please try again.",
    EXTRACTION_FAILED: "We couldn't read colors from that image.",
    COLOR_LIMIT_REACHED: "You've reached the maximum number of colors.",
    DUPLICATE_SUBMISSION: "Hang on, we're still working on your last request.",
    PARTIAL_FAILURE: "Saved, but one follow-up step didn't complete.",
    INTERNAL_ERROR: "An internal error occurred. Please try again.",
}

# Exception type -> error code, most specific first
_EXCEPTION_CODES: tuple[tuple[type[Exception], str], ...] = (
    (StepValidationError, VALIDATION_ERROR),
    (PaletteCodeNotFoundError, NOT_FOUND),
    (ActionNotFoundError, NOT_FOUND),
    (ColorLimitReachedError, COLOR_LIMIT_REACHED),
    (ColorExtractionError, EXTRACTION_FAILED),
    (DuplicateSubmissionError, DUPLICATE_SUBMISSION),
    (GatewayError, GATEWAY_ERROR),
)


# =============================================================================
# Error Response Builder
# =============================================================================


def get_error_message(code: str) -> str:
    """
    Get the user-facing message for an error code.

    Falls back to a generic message if the error code is unknown.
    """
    return _ERROR_MESSAGES.get(code, "An error occurred.")


def error_code_for(exc: Exception) -> str:
    """Map an exception to its error code (INTERNAL_ERROR if unmapped)."""
    for exc_type, code in _EXCEPTION_CODES:
        if isinstance(exc, exc_type):
            return code
    return INTERNAL_ERROR


def build_error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build a structured error response dict.

    If no message is provided, the registered message for the error code
    is used.

    Args:
        code: Error code constant (e.g. VALIDATION_ERROR, NOT_FOUND)
        message: Optional override message
        details: Optional additional error details

    Returns:
        Structured error dict: {"code": str, "message": str, "details": dict}
    """
    resolved_message = message if message is not None else get_error_message(code)
    error: dict[str, Any] = {
        "code": code,
        "message": resolved_message,
    }
    if details is not None:
        error["details"] = details
    return error


def build_error_from_exception(exc: Exception) -> dict[str, Any]:
    """Build an error response for a caught wizard exception."""
    code = error_code_for(exc)
    details: dict[str, Any] | None = None
    if isinstance(exc, StepValidationError):
        details = {"errors": exc.errors}
    elif isinstance(exc, GatewayError) and exc.status_code is not None:
        details = {"status_code": exc.status_code, **exc.details}
    message = str(exc) if code in {GATEWAY_ERROR, VALIDATION_ERROR} else None
    return build_error_response(code, message=message, details=details)


__all__ = [
    # Error code constants
    "VALIDATION_ERROR",
    "NOT_FOUND",
    "GATEWAY_ERROR",
    "EXTRACTION_FAILED",
    "COLOR_LIMIT_REACHED",
    "DUPLICATE_SUBMISSION",
    "PARTIAL_FAILURE",
    "INTERNAL_ERROR",
    # Functions
    "get_error_message",
    "error_code_for",
    "build_error_response",
    "build_error_from_exception",
]
