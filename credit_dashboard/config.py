"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./credit_dashboard.db"

    # AI chat-completion endpoint; AI features are disabled while either is empty
    ai_endpoint: str = Field(default="", validation_alias=AliasChoices("AI_ENDPOINT", "AZURE_ENDPOINT"))
    ai_api_key: str = Field(default="", validation_alias=AliasChoices("AI_API_KEY", "AZURE_API_KEY"))
    ai_temperature: float = 0.7
    ai_max_tokens: int = 2000
    chat_max_tokens: int = 1000
    report_max_tokens: int = 4000
    generation_max_tokens: int = 4000

    # Service
    service_name: str = "credit-dashboard"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 30.0

    # Profile generation
    default_profile_count: int = 50
    max_profile_count: int = 200
    fallback_seed: Optional[int] = None  # Seed for reproducible local profiles


settings = Settings()
