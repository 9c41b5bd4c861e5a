"""Tests for settings loading and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from trustgate.config import Settings, get_settings


def make_settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestSettingsDefaults:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = make_settings()
        assert settings.environment == "production"
        assert settings.log_level == "INFO"
        assert settings.log_to_file is False
        assert settings.api_port == 8080
        assert settings.block_bots is True
        assert settings.rate_limit_max_requests == 30
        assert settings.rate_limit_window_seconds == 60.0
        assert settings.allowed_origins == []

    def test_trust_defaults(self):
        settings = make_settings()
        assert settings.trust_weight_behavioral == 0.30
        assert settings.trust_weight_browser == 0.35
        assert settings.trust_weight_honeypot == 0.20
        assert settings.trust_weight_request == 0.15
        assert settings.trust_threshold_definite == 80
        assert settings.trust_threshold_likely == 60
        assert settings.trust_threshold_suspicious == 40
        assert settings.trust_quick_check_threshold == 70


class TestSettingsFromEnvironment:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("API_PORT", "9090")
        monkeypatch.setenv("BLOCK_BOTS", "false")
        monkeypatch.setenv("TRUST_THRESHOLD_DEFINITE", "90")
        settings = make_settings()
        assert settings.api_port == 9090
        assert settings.block_bots is False
        assert settings.trust_threshold_definite == 90

    def test_allowed_origins_parsed(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,,")
        settings = make_settings()
        assert settings.allowed_origins == ["https://a.example", "https://b.example"]

    def test_empty_allowed_origins(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "")
        assert make_settings().allowed_origins == []


class TestSettingsValidation:
    def test_weight_out_of_range(self):
        with pytest.raises(ValidationError, match="between 0 and 1"):
            make_settings(trust_weight_behavioral=1.5)

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValidationError, match="sum to 1.0"):
            make_settings(trust_weight_request=0.5)

    def test_threshold_out_of_range(self):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            make_settings(trust_threshold_definite=120)

    def test_thresholds_must_be_ordered(self):
        with pytest.raises(ValidationError, match="suspicious < likely < definite"):
            make_settings(trust_threshold_suspicious=70)

    def test_rate_limit_must_allow_one_request(self):
        with pytest.raises(ValidationError, match="at least 1"):
            make_settings(rate_limit_max_requests=0)


class TestSettingsHelpers:
    def test_is_development(self):
        assert make_settings(environment="Development").is_development is True
        assert make_settings(environment="production").is_development is False

    def test_log_file_path(self):
        settings = make_settings(log_directory="/var/log/tg", log_file_prefix="gate")
        assert settings.log_file_path == "/var/log/tg/gate.log"

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
