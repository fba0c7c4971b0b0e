"""
Custom exception hierarchy for the Action Wizard.

Provides structured exception types for every subsystem:
- Configuration and step navigation
- Step validation and duplicate submissions
- Colour matching and image extraction
- The persistence gateway

All exceptions inherit from ActionWizardException, enabling a
catch-all for wizard errors while keeping the ability to catch
specific error types.
"""

from __future__ import annotations

from typing import Any


class ActionWizardException(Exception):
    """Base exception for all Action Wizard errors."""


class ConfigurationError(ActionWizardException):
    """Missing environment variables, invalid config values, or startup failures."""


class StateError(ActionWizardException):
    """Invalid state transitions, missing required state."""


class StepTransitionError(StateError):
    """Advance past the last step or retreat before the first one."""


class DuplicateSubmissionError(StateError):
    """An async operation was started while the session is busy."""


class ActionNotFoundError(ActionWizardException):
    """No action is registered under the requested identifier."""


class StepValidationError(ActionWizardException):
    """Required input is missing or invalid for the requested transition."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Validation failed")


class PaletteCodeNotFoundError(ActionWizardException):
    """A manually typed palette code matches no entry."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"No palette entry matches code {code!r}")


class ColorLimitReachedError(ActionWizardException):
    """The session already holds the maximum number of colours."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"A session can hold at most {limit} colors")


class ColorExtractionError(ActionWizardException):
    """Colour sampling or dominant-colour extraction failed."""


class ImageDecodeError(ColorExtractionError):
    """The supplied bytes could not be decoded as an image."""


class GatewayError(ActionWizardException):
    """The persistence gateway rejected a call or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)
