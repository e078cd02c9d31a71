from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pushrelay.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application configuration loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "Push Relay"
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # VAPID key pair, both URL-safe base64 without padding
    VAPID_PUBLIC_KEY: str
    VAPID_PRIVATE_KEY: str
    VAPID_CLAIMS_EMAIL: str = "mailto:admin@example.com"

    SUBSCRIPTIONS_FILE: str = "data/subscriptions.json"
    STATIC_DIR: str = "static"

    # Delivery
    PUSH_TTL: int = 30
    PUSH_MAX_CONCURRENCY: int = 10

    @field_validator("VAPID_PUBLIC_KEY", "VAPID_PRIVATE_KEY")
    @classmethod
    def require_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("VAPID_CLAIMS_EMAIL")
    @classmethod
    def ensure_mailto(cls, value: str) -> str:
        """VAPID "sub" claim must be a mailto: or https: URI."""
        value = value.strip()
        if value.startswith(("mailto:", "https:")):
            return value
        return f"mailto:{value}"

    @field_validator("PUSH_MAX_CONCURRENCY")
    @classmethod
    def positive_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(
            f"{err['loc'][0]}: {err['msg']}" if err.get("loc") else err["msg"] for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e
