"""
Polygon validation and spherical geodesy.
"""

from agriterra.core.geometry.geodesy import (
    EARTH_RADIUS,
    haversine_distance,
    local_metric_offsets,
    meters_to_degrees,
    spherical_area,
)
from agriterra.core.geometry.validator import GeometryValidator, validate_geometry

__all__ = [
    "EARTH_RADIUS",
    "GeometryValidator",
    "haversine_distance",
    "local_metric_offsets",
    "meters_to_degrees",
    "spherical_area",
    "validate_geometry",
]
