"""
Open-Meteo elevation integration.

Provides Copernicus DEM elevations for up to 100 coordinates per request.
"""

from agriterra.integrations.open_meteo.client import (
    MAX_COORDINATES_PER_REQUEST,
    OpenMeteoClientConfig,
    OpenMeteoElevationClient,
)

__all__ = [
    "MAX_COORDINATES_PER_REQUEST",
    "OpenMeteoClientConfig",
    "OpenMeteoElevationClient",
]
