"""
Configuration management for the trajectory planner API.
Loads environment variables and provides typed configuration.
"""
from typing import List
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ========================================================================
    # API Configuration
    # ========================================================================
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False

    # ========================================================================
    # CORS Configuration
    # ========================================================================
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ========================================================================
    # Application Configuration
    # ========================================================================
    environment: str = "development"
    log_level: str = "info"

    # ========================================================================
    # Request Limits
    # ========================================================================
    max_waypoints: int = 500
    max_plan_size_bytes: int = 1024 * 1024

    # ========================================================================
    # Pydantic Settings Configuration
    # ========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()


# Convenience exports
settings = get_settings()
