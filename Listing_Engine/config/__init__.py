"""
Configuration — environment settings and UI option catalogs.

Settings are read from environment variables (and a local .env file) via
pydantic-settings. The catalogs below feed the dashboard sidebar and the
prompt builder.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic_settings import BaseSettings

from Listing_Engine.core.models import (
    CustomizationOptions,
    Emojis,
    Language,
    Length,
    OutputLanguage,
    Tone,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # LLM Provider
    LLM_PROVIDER: str = "google"
    GENERATION_MODEL: str = "gemini-2.5-flash"
    EXTRACTION_MODEL: str = "gemini-2.5-pro"
    LLM_TEMPERATURE: float = 0.7

    # Provider API keys (env var names match registry.PROVIDER_SPECS)
    GOOGLE_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    ANTHROPIC_API_KEY: Optional[str] = None
    DEEPSEEK_API_KEY: Optional[str] = None
    DASHSCOPE_API_KEY: Optional[str] = None

    # Page fetching (URL mode)
    FETCH_TIMEOUT_SEC: int = 15
    MAX_HTML_CHARS: int = 200_000

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def api_key_for(self, provider: str) -> str | None:
        """Resolve the API key for a registry provider key (None if unset)."""
        from Listing_Engine.saas_core.llm.registry import PROVIDER_SPECS

        env_var = PROVIDER_SPECS.get(provider, {}).get("env_var")
        if not env_var:
            return None
        return getattr(self, env_var, None)


def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """basicConfig at LOG_LEVEL (or an explicit override)."""
    resolved = (level or get_settings().LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, resolved, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Option catalogs (sidebar)
# ---------------------------------------------------------------------------
TONES: list[dict] = [
    {
        "value": Tone.FORMAL,
        "tooltip": "Objective, factual, and direct. Focuses on specifications "
                   "and is ideal for technical products or formal contexts.",
    },
    {
        "value": Tone.CASUAL,
        "tooltip": "Friendly, relaxed, and conversational. Good for everyday "
                   "products and connecting with a broad audience.",
    },
    {
        "value": Tone.PERSUASIVE,
        "tooltip": "Engaging and benefit-focused. Uses marketing language to "
                   "create desire and convince the customer to buy.",
    },
]
LENGTHS: list[Length] = list(Length)
EMOJIS: list[Emojis] = list(Emojis)
LANGUAGES: list[Language] = list(Language)
OUTPUT_LANGUAGES: list[OutputLanguage] = list(OutputLanguage)

DEFAULT_OPTIONS = CustomizationOptions()
DEFAULT_OUTPUT_LANGUAGE = OutputLanguage.AUTO

# Description word ranges for explicit length brackets ("Auto" has none)
LENGTH_WORD_RANGES: dict[Length, str] = {
    Length.SHORT:  "50-150 words",
    Length.MEDIUM: "150-300 words",
    Length.LONG:   "300-500 words",
}
