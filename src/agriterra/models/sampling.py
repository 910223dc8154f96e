"""
Sample point models shared by the sampling planner and elevation enricher.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class SamplePoint:
    """
    A lattice point inside the analysed polygon.

    Attributes:
        lon: Longitude (WGS84)
        lat: Latitude (WGS84)
        elevation: Elevation in meters, set by the enricher
    """

    lon: float
    lat: float
    elevation: Optional[float] = None

    @property
    def coordinates(self) -> Tuple[float, float]:
        """Coordinates as (lon, lat)."""
        return (self.lon, self.lat)

    def with_elevation(self, elevation: float) -> "SamplePoint":
        """Return a copy carrying the given elevation."""
        return replace(self, elevation=elevation)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"lon": self.lon, "lat": self.lat, "elevation": self.elevation}


@dataclass(frozen=True)
class PointGrid:
    """
    Ordered, in-polygon sample points emitted by the sampling planner.

    Attributes:
        points: Points in deterministic scan order
        spacing_meters: Lattice spacing that produced the points
        chunk_count: Number of leaf chunks that were sampled
        centroid_added: Whether the sparse-polygon fallback point was emitted
    """

    points: Tuple[SamplePoint, ...]
    spacing_meters: float
    chunk_count: int = 1
    centroid_added: bool = False

    def __len__(self) -> int:
        return len(self.points)

    def coordinates(self) -> Tuple[Tuple[float, float], ...]:
        """All point coordinates as (lon, lat) tuples."""
        return tuple(p.coordinates for p in self.points)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "point_count": len(self.points),
            "spacing_meters": self.spacing_meters,
            "chunk_count": self.chunk_count,
            "centroid_added": self.centroid_added,
        }
