"""
Validated area model produced by the geometry validator.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from shapely.geometry import MultiPolygon, Polygon, mapping


@dataclass(frozen=True)
class ValidatedArea:
    """
    A polygon that passed validation, with its cached spherical area.

    Attributes:
        geometry: Shapely Polygon or MultiPolygon, exteriors counter-clockwise
        area_sqm: Area in square meters (spherical excess)
        geometry_type: Original GeoJSON type ("Polygon" or "MultiPolygon")
    """

    geometry: Union[Polygon, MultiPolygon]
    area_sqm: float
    geometry_type: str

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Bounding box as (min_lon, min_lat, max_lon, max_lat)."""
        return tuple(self.geometry.bounds)  # type: ignore[return-value]

    @property
    def centroid(self) -> Tuple[float, float]:
        """Planar centroid as (lon, lat)."""
        c = self.geometry.centroid
        return (c.x, c.y)

    @property
    def area_hectares(self) -> float:
        """Area in hectares."""
        return self.area_sqm / 10_000.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "geometry": mapping(self.geometry),
            "geometry_type": self.geometry_type,
            "area_sqm": self.area_sqm,
            "area_hectares": self.area_hectares,
            "bounds": self.bounds,
            "centroid": self.centroid,
        }
