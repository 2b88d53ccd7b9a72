"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Velotour"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./velotour.db"
    DB_ECHO: bool = False

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:8081"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Planning
    DEFAULT_DAILY_DISTANCE_KM: float = 80.0  # Used when a trip is created without a daily target

    # Expenses
    DEFAULT_CURRENCY: str = "EUR"  # Single-currency trips, no conversion
    NEAR_BUDGET_THRESHOLD_PERCENT: float = 80.0  # Lower bound of the "near budget" band

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
