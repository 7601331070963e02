"""Unit tests for environment configuration: HelperConfig and AppSettings."""

import pytest
from pydantic import ValidationError

from shared.models.config import AppSettings


class TestHelperConfig:
    """Test reading typed values from the environment."""

    def test_string_value_is_stripped(self, helper_config, clean_environment):
        clean_environment.setenv("CHROMA_URL", "  http://chroma:8000  ")
        assert helper_config.get_string_val("chroma_url") == "http://chroma:8000"

    def test_missing_string_without_default_raises(self, helper_config):
        with pytest.raises(ValueError, match="CHROMA_URL"):
            helper_config.get_string_val("CHROMA_URL")

    def test_empty_string_falls_back_to_default(self, helper_config, clean_environment):
        clean_environment.setenv("OPENAI_MODEL", "")
        assert helper_config.get_string_val("OPENAI_MODEL", default="gpt-4o-mini") == "gpt-4o-mini"

    def test_number_values(self, helper_config, clean_environment):
        clean_environment.setenv("RAG_HISTORY_WINDOW", "5")
        clean_environment.setenv("RAG_RELEVANCE_THRESHOLD", "0.8")
        assert helper_config.get_number_val("RAG_HISTORY_WINDOW") == 5
        assert helper_config.get_number_val("RAG_RELEVANCE_THRESHOLD") == 0.8

    def test_invalid_number_raises(self, helper_config, clean_environment):
        clean_environment.setenv("RAG_HISTORY_WINDOW", "ten")
        with pytest.raises(ValueError, match="not a valid number"):
            helper_config.get_number_val("RAG_HISTORY_WINDOW")

    def test_bool_values(self, helper_config, clean_environment):
        clean_environment.setenv("FLAG_A", "yes")
        clean_environment.setenv("FLAG_B", "off")
        assert helper_config.get_bool_val("FLAG_A") is True
        assert helper_config.get_bool_val("FLAG_B") is False
        assert helper_config.get_bool_val("FLAG_C_UNSET_FOR_TEST", default=True) is True

    def test_list_values(self, helper_config, clean_environment):
        clean_environment.setenv("SOME_LIST", "[a, b,,c ]")
        assert helper_config.get_list_val("SOME_LIST") == ["a", "b", "c"]

    def test_list_without_brackets_raises(self, helper_config, clean_environment):
        clean_environment.setenv("SOME_LIST", "a,b")
        with pytest.raises(ValueError, match="format"):
            helper_config.get_list_val("SOME_LIST")


class TestAppSettings:
    """Test the frozen application settings."""

    def test_defaults(self, helper_config):
        settings = AppSettings.from_helper_config(helper_config)
        assert settings.relevance_threshold == 1.2
        assert settings.history_window == 10
        assert settings.default_context_limit == 3
        assert settings.cors_origin == "http://localhost:4200"

    def test_values_from_environment(self, helper_config, clean_environment):
        clean_environment.setenv("RAG_HISTORY_WINDOW", "5")
        clean_environment.setenv("CORS_ORIGIN", "http://example.org")
        settings = AppSettings.from_helper_config(helper_config)
        assert settings.history_window == 5
        assert settings.cors_origin == "http://example.org"

    def test_settings_are_immutable(self):
        settings = AppSettings()
        with pytest.raises(ValidationError):
            settings.history_window = 3
