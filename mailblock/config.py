"""SDK configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://sdk-backend-production-20e1.up.railway.app"


class Settings(BaseSettings):
    """SDK settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Credentials
    MAILBLOCK_API_KEY: str | None = Field(
        default=None,
        description="API key used when the client is created without one",
    )

    # Backend
    MAILBLOCK_BASE_URL: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the Mailblock REST backend",
    )
    MAILBLOCK_HTTP_TIMEOUT: float | None = Field(
        default=None,
        description="Timeout in seconds for the default HTTP transport (unset = none)",
    )

    # Diagnostics
    MAILBLOCK_DEBUG: bool = Field(
        default=False,
        description="Emit diagnostic log entries for every request",
    )

    @property
    def base_url(self) -> str:
        """Base URL without a trailing slash."""
        return self.MAILBLOCK_BASE_URL.rstrip("/")


# Global settings instance
settings = Settings()
