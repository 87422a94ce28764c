"""Application configuration loaded from .env and environment."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from location_agent.errors import ConfigurationError


class Settings(BaseSettings):
    """Load and validate environment variables with type hints and defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow TRIPADVISOR_API_KEY or tripadvisor_api_key
        extra="ignore",
        frozen=True,
    )

    # LLM APIs
    llm_provider: Literal["openai", "huggingface"] = "openai"
    openai_api_key: Optional[str] = None
    huggingface_api_key: Optional[str] = None
    model_name: str = "gpt-4o"
    supervisor_model_name: Optional[str] = None
    temperature: float = 0.0

    # Location API
    tripadvisor_api_key: str
    tripadvisor_base_url: str = "http://api.tripadvisor.com/api/partner/2.0/location"
    tripadvisor_user_agent: str = "cashew"

    # Search
    tavily_api_key: Optional[str] = None
    search_max_results: int = 4

    http_timeout: float = 30.0

    # Workflow limits
    step_budget: int = 25
    max_tool_rounds: int = 1

    log_level: str = "WARNING"

    @model_validator(mode="after")
    def _require_llm_key(self) -> "Settings":
        key = self.openai_api_key if self.llm_provider == "openai" else self.huggingface_api_key
        if not key:
            raise ValueError(f"an API key is required for the '{self.llm_provider}' LLM provider")
        if self.step_budget < 1:
            raise ValueError("step_budget must be at least 1")
        return self


@lru_cache
def get_settings() -> Settings:
    """Load settings once at startup, failing fast on missing secrets."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
