"""Configuration management using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the image relay, read once from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Segmentation API (Photoroom)
    photoroom_api_key: str | None = None  # Set via PHOTOROOM_API_KEY
    photoroom_segment_url: str = "https://sdk.photoroom.com/v1/segment"
    photoroom_timeout: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    cors_allow_origins: list[str] = ["*"]
    log_level: str = "INFO"

    @field_validator("photoroom_api_key")
    @classmethod
    def _blank_key_is_missing(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


# Global settings instance
settings = Settings()
