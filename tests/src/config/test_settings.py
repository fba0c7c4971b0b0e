"""
Tests for runtime settings and policy tables.
"""

from decimal import Decimal

import pytest

from src.config.policy import MARGIN_GUARDRAILS, QUALITY_TIER_THRESHOLDS, get_guardrail
from src.config.settings import DEFAULT_GATEWAY_TIMEOUT, WizardSettings
from src.lib.exceptions import ConfigurationError


class TestWizardSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("WIZARD_GATEWAY_URL", "WIZARD_GATEWAY_TIMEOUT", "WIZARD_DEV_MODE", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        settings = WizardSettings.from_env()
        assert settings.gateway_timeout == DEFAULT_GATEWAY_TIMEOUT == 30.0
        assert settings.dev_mode is False
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WIZARD_GATEWAY_URL", "https://api.example.com/v1/")
        monkeypatch.setenv("WIZARD_GATEWAY_TIMEOUT", "12.5")
        monkeypatch.setenv("WIZARD_DEV_MODE", "1")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = WizardSettings.from_env()
        assert settings.gateway_url == "https://api.example.com/v1"
        assert settings.gateway_timeout == 12.5
        assert settings.dev_mode is True
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["soon", "0", "-3"])
    def test_rejects_bad_timeout(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("WIZARD_GATEWAY_TIMEOUT", value)
        with pytest.raises(ConfigurationError):
            WizardSettings.from_env()


class TestPolicy:
    def test_tier_thresholds_are_increasing(self) -> None:
        bounds = [bound for bound, _ in QUALITY_TIER_THRESHOLDS]
        assert bounds == sorted(bounds)

    def test_guardrails(self) -> None:
        assert get_guardrail("wholesale").min == Decimal("0.42")
        assert get_guardrail("event_retail").min == Decimal("0.55")
        for guardrail in MARGIN_GUARDRAILS.values():
            assert guardrail.min < guardrail.max

    def test_unknown_margin_type(self) -> None:
        with pytest.raises(KeyError, match="retail_plus"):
            get_guardrail("retail_plus")
