"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placehub"

    # DeepSeek AI (OpenAI-compatible), used for thread summaries only
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com/v1"

    # JWT Auth - tokens are issued by the main PlaceHub backend
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Archive scheduler
    archive_age_seconds: int = 120
    archive_interval_seconds: int = 30
    archive_scheduler_enabled: bool = True

    # App
    log_level: str = "INFO"
    debug: bool = True

    @property
    def deepseek_configured(self) -> bool:
        """True when a real DeepSeek API key is present"""
        return bool(self.deepseek_api_key) and self.deepseek_api_key != "your_deepseek_api_key_here"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
