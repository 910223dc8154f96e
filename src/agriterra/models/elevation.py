"""
Elevation data models exchanged with elevation providers.

A provider answers every requested coordinate with either an
``ElevationPoint`` or an ``ElevationFailure``, in request order.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Plausible terrestrial and bathymetric range in meters
MIN_ELEVATION = -11000.0
MAX_ELEVATION = 9000.0


class ElevationDataSource(str, Enum):
    """Source dataset for elevation data."""

    OPEN_METEO = "Open-Meteo Copernicus DEM"
    GMRT = "Global Multi-Resolution Topography"
    SYNTHETIC = "Synthetic"
    UNKNOWN = "Unknown"


class ElevationPoint(BaseModel):
    """
    Single point elevation returned by a provider.

    The elevation itself is not range-checked here; the enricher validates it
    so that out-of-range values count as per-point failures instead of
    aborting the batch.

    Attributes:
        longitude: Longitude coordinate (WGS84)
        latitude: Latitude coordinate (WGS84)
        elevation: Elevation value in meters
        data_source: Source dataset
    """

    model_config = ConfigDict(frozen=True)

    longitude: float = Field(..., ge=-180, le=180, description="Longitude (WGS84)")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude (WGS84)")
    elevation: Any = Field(..., description="Elevation value in meters")
    data_source: ElevationDataSource = Field(
        default=ElevationDataSource.UNKNOWN, description="Source dataset"
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "longitude": self.longitude,
            "latitude": self.latitude,
            "elevation": self.elevation,
            "data_source": self.data_source.value,
        }


class ElevationFailure(BaseModel):
    """
    Per-point failure returned by a provider instead of raising.

    Attributes:
        longitude: Longitude of the failed coordinate
        latitude: Latitude of the failed coordinate
        reason: Human-readable failure reason
    """

    model_config = ConfigDict(frozen=True)

    longitude: float
    latitude: float
    reason: str = "unknown"
    status_code: Optional[int] = Field(None, description="HTTP status, when known")


ElevationResult = Union[ElevationPoint, ElevationFailure]
