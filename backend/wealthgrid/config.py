"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

QUICK_RANGES = ("YTD", "1Y", "5Y", "MAX")
WORTH_RANGES = ("YTD", "1Y", "5Y", "MAX", "Custom")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Wealth Grid"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # CORS - the UI runs on the Vite dev server locally
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Request bodies carry full snapshot histories for every asset
    MAX_REQUEST_SIZE_MB: int = 10

    # Snapshot history table
    HISTORY_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 500

    # Default windows when the caller does not pick one
    DEFAULT_HEATMAP_RANGE: str = "MAX"  # YTD, 1Y, 5Y, MAX
    DEFAULT_WORTH_RANGE: str = "1Y"  # YTD, 1Y, 5Y, MAX, Custom

    # Monitoring
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # 'text' or 'json' (json for production)
    ENVIRONMENT: str = "development"  # development, staging, production

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("DEFAULT_HEATMAP_RANGE")
    @classmethod
    def validate_heatmap_range(cls, v: str) -> str:
        """Only the heatmap quick filters are valid defaults."""
        if v not in QUICK_RANGES:
            raise ValueError(f"DEFAULT_HEATMAP_RANGE must be one of {', '.join(QUICK_RANGES)}")
        return v

    @field_validator("DEFAULT_WORTH_RANGE")
    @classmethod
    def validate_worth_range(cls, v: str) -> str:
        """Custom needs explicit dates, so it cannot be the default."""
        if v not in WORTH_RANGES or v == "Custom":
            raise ValueError("DEFAULT_WORTH_RANGE must be one of YTD, 1Y, 5Y, MAX")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise the level name so logging.getLevelName accepts it."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
