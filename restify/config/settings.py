"""Package configuration using Pydantic settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # API Configuration
    API_TITLE: str = "Restify API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "REST endpoints generated from repositories"
    # Prefix every repository route is mounted under
    API_PREFIX: str = "/restify-api"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./restify.db", description="Async SQLAlchemy database URL"
    )

    # Authorization
    POLICY_MODULES: list[str] = Field(
        default_factory=list, description="Modules scanned for <Model>Policy classes"
    )

    # Attach the JSON exception handlers to the app
    REGISTER_EXCEPTION_HANDLERS: bool = True

    # Monitoring
    LOG_LEVEL: str = "INFO"

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        v = v.upper()
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v):
        """Normalize the route prefix to a leading slash and no trailing slash."""
        v = "/" + v.strip("/")
        return "" if v == "/" else v


# Global settings instance
settings = Settings()
