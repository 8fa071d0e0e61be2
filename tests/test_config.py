"""Tests for environment settings."""

from Listing_Engine.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        settings = Settings(_env_file=None)
        assert settings.LLM_PROVIDER == "google"
        assert settings.GENERATION_MODEL == "gemini-2.5-flash"
        assert settings.EXTRACTION_MODEL == "gemini-2.5-pro"

    def test_api_key_lookup(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        settings = Settings(_env_file=None)
        assert settings.api_key_for("openai") == "sk-test"
        assert settings.api_key_for("local_ollama") is None
        assert settings.api_key_for("unknown") is None
