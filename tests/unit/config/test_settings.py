"""
Module: test_settings.py
Description: Unit tests for relay settings.
"""

import pytest
from pydantic import ValidationError

from webhook_relay.config.settings import DistributionMode, Settings


class TestSettings:
    """Test cases for defaults, environment loading, and validation."""

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "PRODUCTION_URL", "DISTRIBUTION_MODE", "POLL_SECRET", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.port == 3080
        assert settings.forward_timeout == 10.0
        assert settings.retention_max_size == 100
        assert settings.retention_ttl_seconds == 300
        assert settings.distribution_mode == DistributionMode.FANOUT
        assert settings.is_fanout
        assert settings.poll_secret is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8081")
        monkeypatch.setenv("PRODUCTION_URL", "https://inventory.example.com/api/webhooks/stubhub")
        monkeypatch.setenv("DISTRIBUTION_MODE", "retention")
        monkeypatch.setenv("POLL_SECRET", "shh")

        settings = Settings(_env_file=None)

        assert settings.port == 8081
        assert settings.production_url == "https://inventory.example.com/api/webhooks/stubhub"
        assert settings.is_retention
        assert settings.poll_secret == "shh"

    def test_initial_secondaries_from_json(self, monkeypatch):
        monkeypatch.setenv("INITIAL_SECONDARIES", '["https://dev.example.com/hook"]')

        settings = Settings(_env_file=None)

        assert settings.initial_secondaries == ["https://dev.example.com/hook"]

    def test_log_level_is_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("overrides", [
        {"production_url": "inventory.example.com/hook"},
        {"production_url": ""},
        {"log_level": "LOUD"},
        {"distribution_mode": "broadcast"},
        {"forward_timeout": 0},
        {"initial_secondaries": ["ftp://dev.example.com"]},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)
