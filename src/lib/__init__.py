"""
Lib package for the Action Wizard.

Contains shared utilities:
- exceptions.py: Exception hierarchy
- errors.py: Error codes and user-facing error responses
- color_math.py: RGB/hex conversion and distance helpers
- logging.py: structlog configuration
"""

from src.lib.color_math import Rgb, euclidean_distance, hex_to_rgb, rgb_to_hex
from src.lib.errors import (
    COLOR_LIMIT_REACHED,
    DUPLICATE_SUBMISSION,
    EXTRACTION_FAILED,
    GATEWAY_ERROR,
    INTERNAL_ERROR,
    NOT_FOUND,
    PARTIAL_FAILURE,
    VALIDATION_ERROR,
    build_error_from_exception,
    build_error_response,
    get_error_message,
)

__all__ = [
    # Colour math
    "Rgb",
    "euclidean_distance",
    "hex_to_rgb",
    "rgb_to_hex",
    # Errors
    "VALIDATION_ERROR",
    "NOT_FOUND",
    "GATEWAY_ERROR",
    "EXTRACTION_FAILED",
    "COLOR_LIMIT_REACHED",
    "DUPLICATE_SUBMISSION",
    "PARTIAL_FAILURE",
    "INTERNAL_ERROR",
    "get_error_message",
    "build_error_response",
    "build_error_from_exception",
]
