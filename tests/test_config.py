"""Tests for perplexity_core.config.load_settings."""

import pytest

from perplexity_core import ConfigError, Settings, load_settings
from perplexity_core.config import API_URL, DEFAULT_MODEL


class TestLoadSettings:

    def test_reads_api_key_with_defaults(self):
        settings = load_settings({"PERPLEXITY_API_KEY": "pplx-123"})

        assert settings == Settings(api_key="pplx-123")
        assert settings.api_url == API_URL == "https://api.perplexity.ai/chat/completions"
        assert settings.model == DEFAULT_MODEL == "sonar-pro"
        assert settings.timeout_seconds is None

    @pytest.mark.parametrize("environ", [{}, {"PERPLEXITY_API_KEY": ""}])
    def test_missing_api_key_is_config_error(self, environ):
        with pytest.raises(ConfigError, match="PERPLEXITY_API_KEY"):
            load_settings(environ)

    def test_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("PERPLEXITY_API_KEY", "pplx-from-env")
        monkeypatch.delenv("PERPLEXITY_TIMEOUT_SECONDS", raising=False)

        assert load_settings().api_key == "pplx-from-env"

    def test_timeout_is_parsed(self):
        settings = load_settings(
            {"PERPLEXITY_API_KEY": "k", "PERPLEXITY_TIMEOUT_SECONDS": "12.5"}
        )

        assert settings.timeout_seconds == 12.5

    @pytest.mark.parametrize("raw", ["soon", "0", "-3"])
    def test_bad_timeout_is_config_error(self, raw):
        with pytest.raises(ConfigError, match="PERPLEXITY_TIMEOUT_SECONDS"):
            load_settings({"PERPLEXITY_API_KEY": "k", "PERPLEXITY_TIMEOUT_SECONDS": raw})

    def test_settings_are_immutable(self):
        settings = Settings(api_key="k")

        with pytest.raises(AttributeError):
            settings.api_key = "other"
