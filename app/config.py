"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Layout Defaults
    default_vine_spacing_ft: float = Field(
        default=6.0,
        description="Vine spacing used when a request does not provide one"
    )
    default_row_spacing_ft: float = Field(
        default=10.0,
        description="Row spacing used when a request does not provide one"
    )

    # Row Layout Approximation
    row_layout_lat_feet_per_degree: float = Field(
        default=364000.0,
        description="Approximate feet per degree of latitude for row placement"
    )
    row_layout_lng_feet_per_degree: float = Field(
        default=300000.0,
        description="Approximate feet per degree of longitude for row placement"
    )
    max_polygon_vertices: int = Field(
        default=500,
        description="Maximum number of vertices accepted for a field boundary"
    )
    max_row_candidates: int = Field(
        default=5000,
        description="Maximum number of candidate row lines generated for one field"
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
    rate_limit_enabled: bool = Field(
        default=True,
        description="Whether per-client rate limiting is applied"
    )

    # Application Settings
    app_name: str = Field(
        default="Vineyard Layout API",
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
