"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    analysis_provider: Literal["openai", "openrouter"] = "openai"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    openai_store: bool = False
    openrouter_api_key: str | None = None
    openrouter_model: str = "google/gemini-2.5-flash"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def analysis_api_key(self) -> str:
        """Return the API key for the selected provider."""
        key = (
            self.openrouter_api_key
            if self.analysis_provider == "openrouter"
            else self.openai_api_key
        )
        if not key:
            raise ValueError(f"Missing API key for provider {self.analysis_provider}")
        return key

    def analysis_model(self) -> str:
        """Return the model name for the selected provider."""
        if self.analysis_provider == "openrouter":
            return self.openrouter_model
        return self.openai_model
