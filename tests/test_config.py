"""Tests for configuration module."""

import pytest
from pydantic import ValidationError

from agent_studio.config import Settings, get_settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_default_values(self):
        """Test default values are set correctly."""
        settings = Settings(_env_file=None)

        assert settings.validation_threshold == 0.8
        assert settings.max_agents_before_penalty == 10
        assert settings.missing_capability_penalty == 0.1
        assert settings.conflict_penalty == 0.05
        assert settings.oversize_penalty == 0.05
        assert settings.cache_enabled is True
        assert settings.cache_max_size == 128
        assert settings.cache_ttl_seconds == 1800
        assert settings.catalog_path is None
        assert settings.output_format == "yaml"

    def test_settings_loads_from_env(self, monkeypatch):
        """Test that settings load from prefixed environment variables."""
        monkeypatch.setenv("AGENT_STUDIO_VALIDATION_THRESHOLD", "0.5")
        monkeypatch.setenv("AGENT_STUDIO_CACHE_ENABLED", "false")
        monkeypatch.setenv("AGENT_STUDIO_OUTPUT_FORMAT", "json")

        settings = get_settings()

        assert settings.validation_threshold == 0.5
        assert settings.cache_enabled is False
        assert settings.output_format == "json"

    def test_threshold_bounds(self):
        """Test the threshold must lie in [0, 1]."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, validation_threshold=1.5)

    def test_invalid_output_format(self):
        """Test only yaml and json bundles are accepted."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_format="toml")
