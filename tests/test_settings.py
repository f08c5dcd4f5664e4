"""Tests for application settings."""

import logging

import pytest
from pydantic import ValidationError

from config.settings import Settings, configure_logging, get_settings


class TestSettings:
    """Tests for Settings defaults and validation."""

    def test_defaults(self):
        settings = Settings()
        assert settings.sample_count == 30
        assert settings.reference_sample_index == 14
        assert settings.lattice_min_steps == 100
        assert settings.lattice_max_steps == 1000
        assert settings.significance_level == 0.05
        assert settings.critical_value == 1.96
        assert settings.base_edge_threshold == 0.02
        assert settings.reference_volatility == 0.20

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SAMPLE_COUNT", "50")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        settings = Settings()
        assert settings.sample_count == 50
        assert settings.log_level == "DEBUG"

    def test_step_bounds_validated(self):
        with pytest.raises(ValidationError):
            Settings(lattice_min_steps=2000, lattice_max_steps=1000)

    def test_reference_index_validated(self):
        with pytest.raises(ValidationError):
            Settings(sample_count=10, reference_sample_index=10)

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestConfigureLogging:
    """Tests for logging setup."""

    def test_sets_level(self, monkeypatch):
        captured = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
        configure_logging("warning")
        assert captured["level"] == logging.WARNING
        assert "%(name)s" in captured["format"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
