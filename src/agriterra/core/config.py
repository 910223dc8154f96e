"""
Configuration settings for the Agriterra application.

Two layers:
- ``Settings``: process-wide ambient settings read from the environment
  (logging, provider endpoints, timeouts).
- ``AnalysisConfig``: the per-analysis options recognized by the engine.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from agriterra.core.errors import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Attributes:
        environment: Deployment environment, drives log formatting
        log_level: Default log level name
        open_meteo_base_url: Base URL of the Open-Meteo elevation API
        gmrt_base_url: Base URL of the GMRT point server
        provider_timeout: HTTP timeout for elevation providers in seconds
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="AGRITERRA_",
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Optional[str] = None

    # Elevation providers
    open_meteo_base_url: str = "https://api.open-meteo.com"
    gmrt_base_url: str = "https://www.gmrt.org:443"
    provider_timeout: float = 3.0

    @property
    def effective_log_level(self) -> str:
        """Log level to use when none was configured explicitly."""
        if self.log_level:
            return self.log_level.upper()
        return "DEBUG" if self.environment == "development" else "INFO"


class AnalysisConfig(BaseModel):
    """
    Options recognized by the terrain and suitability engine.

    Field names are snake_case; the camelCase spellings
    (``gridSpacingMeters``, ``maxBatchSize``...) are accepted as aliases.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    grid_spacing_meters: float = Field(
        default=10.0, gt=0, le=10_000, description="Sampling lattice spacing in meters"
    )
    max_points_per_chunk: int = Field(
        default=1000, ge=1, le=100_000, description="Maximum sample points per chunk"
    )
    chunk_area_threshold_m2: float = Field(
        default=1_000_000.0,
        gt=0,
        alias="chunkAreaThresholdM2",
        description="Polygons larger than this are sampled in quadrant chunks",
    )
    max_batch_size: int = Field(
        default=20, ge=1, le=1000, description="Maximum points per provider batch"
    )
    request_delay_ms: float = Field(
        default=500.0, ge=0, description="Delay between batches and base retry backoff"
    )
    max_retries: int = Field(
        default=3, ge=0, le=10, description="Retries per batch for failed points"
    )
    raster_target_cells: int = Field(
        default=25, ge=9, le=250_000, description="Target cell count of the hydrology raster"
    )
    hemisphere: Literal["north", "south"] = Field(
        default="north", description="Hemisphere used by the solar exposure weights"
    )

    @classmethod
    def from_options(cls, options: Optional[Dict[str, Any]] = None) -> "AnalysisConfig":
        """
        Build a config from a plain options mapping.

        Args:
            options: Options keyed by snake_case or camelCase names

        Returns:
            Validated AnalysisConfig

        Raises:
            ConfigurationError: If an option is unknown or out of range
        """
        try:
            return cls.model_validate(options or {})
        except ValidationError as e:
            first = e.errors()[0]
            key = ".".join(str(part) for part in first.get("loc", ()))
            raise ConfigurationError(
                f"Invalid analysis option '{key}': {first.get('msg')}",
                config_key=key,
                details={"errors": e.errors(include_url=False)},
            ) from e


# Global settings instance
settings = Settings()
