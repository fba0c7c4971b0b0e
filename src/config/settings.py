"""
Runtime Settings for the Action Wizard.

Values that depend on the deployment (gateway location, timeouts, log mode)
are read from environment variables. Policy numbers live in policy.py.

Environment:
    WIZARD_GATEWAY_URL: Base URL of the persistence API
    WIZARD_GATEWAY_TIMEOUT: Per-request timeout in seconds (default 30)
    WIZARD_DEV_MODE: "1" for human-readable logs
    LOG_LEVEL: stdlib level name (default INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from src.lib.exceptions import ConfigurationError

DEFAULT_GATEWAY_URL = "http://localhost:5000/api"
DEFAULT_GATEWAY_TIMEOUT = 30.0


@dataclass(frozen=True)
class WizardSettings:
    """Deployment settings resolved once at startup."""

    gateway_url: str = DEFAULT_GATEWAY_URL
    gateway_timeout: float = DEFAULT_GATEWAY_TIMEOUT
    dev_mode: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> WizardSettings:
        """
        Build settings from the process environment.

        Raises:
            ConfigurationError: If a numeric setting cannot be parsed
        """
        raw_timeout = os.getenv("WIZARD_GATEWAY_TIMEOUT", str(DEFAULT_GATEWAY_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(
                f"WIZARD_GATEWAY_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from None
        if timeout <= 0:
            raise ConfigurationError("WIZARD_GATEWAY_TIMEOUT must be positive")

        return cls(
            gateway_url=os.getenv("WIZARD_GATEWAY_URL", DEFAULT_GATEWAY_URL).rstrip("/"),
            gateway_timeout=timeout,
            dev_mode=os.getenv("WIZARD_DEV_MODE") == "1",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
