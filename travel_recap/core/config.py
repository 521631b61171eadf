"""
Configuration management for Travel Recap.

Loads settings from environment variables with sensible defaults.
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

from .exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Ingestion Configuration
    probability_threshold: float = 0.0  # minimum visit confidence, 0 keeps everything

    # Country Boundaries Configuration
    countries_geojson: Optional[str] = None  # path or http(s) URL
    http_timeout: float = 30.0

    # Geodata Cache Configuration
    geodata_cache_enabled: bool = False
    redis_url: str = "redis://localhost:6379"
    geodata_cache_ttl: int = 2592000  # 30 days in seconds

    # Report Configuration
    top_places_limit: int = 4
    top_transport_limit: int = 6

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @field_validator('probability_threshold')
    @classmethod
    def check_threshold(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("probability_threshold must be between 0 and 1")
        return v


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings


def resolve_probability_threshold(value: Optional[float] = None) -> float:
    """CLI value if given, else the configured threshold; must be within [0, 1]."""
    threshold = settings.probability_threshold if value is None else value
    if not 0.0 <= threshold <= 1.0:
        raise ConfigError(f"Probability threshold must be between 0 and 1, got {threshold}")
    return threshold
