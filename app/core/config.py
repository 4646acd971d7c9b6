from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "CryptoForge"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Input limits
    max_input_length: int = 100_000

    # Rail fence bounds
    min_rails: int = 2
    max_rails: int = 20

    # Pipeline behaviour
    pipeline_reverse_on_decrypt: bool = False

    # Default stage parameters
    default_aes_key: str = "my-secret-key"
    default_vigenere_key: str = "CIPHER"
    default_rails: int = 3

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
