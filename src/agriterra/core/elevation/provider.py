"""
Elevation provider interface.

Providers resolve coordinates to elevations. They must return exactly one
result per requested coordinate, in request order, and report per-point
problems as ``ElevationFailure`` entries rather than raising. Raising is
reserved for failures of the whole request.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from agriterra.models.elevation import ElevationResult

Coordinate = Tuple[float, float]


class ElevationProvider(ABC):
    """Abstract source of point elevations."""

    #: Name used in logs and ProviderError details
    name: str = "provider"

    @abstractmethod
    async def fetch(self, points: Sequence[Coordinate]) -> List[ElevationResult]:
        """
        Resolve elevations for a batch of (lon, lat) coordinates.

        Args:
            points: Coordinates as (longitude, latitude) tuples

        Returns:
            One ElevationPoint or ElevationFailure per coordinate, in order
        """
