"""
Application configuration using Pydantic settings.
"""
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field

from due_diligence.infrastructure.api_constants import ArcGISLayers


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ArcGIS Layer Configuration
    bia_tribal_lands_url: str = Field(
        default=ArcGISLayers.BIA_AIAN_LAR,
        description="ArcGIS query endpoint for BIA AIAN land area representations"
    )
    census_tribal_lands_url: Optional[str] = Field(
        default=ArcGISLayers.CENSUS_TIGER_AIAN,
        description="Fallback ArcGIS query endpoint for Census TIGERweb AIAN areas (empty disables)"
    )
    nrhp_boundaries_url: str = Field(
        default=ArcGISLayers.NPS_NRHP_BOUNDARIES,
        description="ArcGIS query endpoint for NRHP boundary features"
    )

    # Offline fixture layers (ArcGIS JSON feature sets)
    static_tribal_lands_path: Optional[str] = Field(
        default=None,
        description="Serve tribal-land queries from a local feature set instead of ArcGIS"
    )
    static_nrhp_path: Optional[str] = Field(
        default=None,
        description="Serve NRHP queries from a local feature set instead of ArcGIS"
    )

    # Search radii
    tribal_search_radius_miles: float = Field(
        default=50.0,
        description="Buffer radius for enumerating nearby tribal lands"
    )
    nrhp_search_radius_miles: float = Field(
        default=1.0,
        description="Buffer radius for enumerating nearby NRHP properties"
    )

    # Upstream call behaviour
    arcgis_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for each ArcGIS query"
    )
    arcgis_max_retry_attempts: int = Field(
        default=1,
        description="Attempts per ArcGIS query (1 = no retry, failures are treated as no data)"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=1,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=5,
        description="Maximum wait time in seconds between retries"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Rio Grande Due Diligence - Cultural Resources",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
