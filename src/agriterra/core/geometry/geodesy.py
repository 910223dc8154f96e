"""
Spherical geodesy helpers.

All distances and areas use a spherical Earth of radius ``EARTH_RADIUS``
(the IUGG mean radius), consistent with the haversine model used by the
terrain analysis.
"""

import math
from typing import Any, Tuple, Union

import numpy as np
from pyproj import Geod
from shapely.geometry import MultiPolygon, Polygon

# Mean Earth radius in meters (IUGG)
EARTH_RADIUS = 6371008.8

# Flattening 0 makes pyproj integrate on the sphere, which yields the
# spherical-excess area.
SPHERE = Geod(a=EARTH_RADIUS, f=0.0)


def haversine_distance(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """
    Great-circle distance between two points.

    Args:
        lon1: Longitude of the first point in degrees
        lat1: Latitude of the first point in degrees
        lon2: Longitude of the second point in degrees
        lat2: Latitude of the second point in degrees

    Returns:
        Distance in meters
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = phi2 - phi1
    dlmb = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS * math.asin(min(1.0, math.sqrt(a)))


def spherical_area(geometry: Union[Polygon, MultiPolygon]) -> float:
    """
    Area of a lon/lat polygon on the sphere.

    Holes are subtracted. Orientation does not matter.

    Args:
        geometry: Polygon or MultiPolygon in WGS84 degrees

    Returns:
        Area in square meters
    """
    area, _perimeter = SPHERE.geometry_area_perimeter(geometry)
    return abs(area)


def meters_to_degrees(meters: float, latitude: float) -> Tuple[float, float]:
    """
    Convert a ground distance to degree steps at a given latitude.

    Args:
        meters: Ground distance in meters
        latitude: Latitude at which the longitude step applies

    Returns:
        Tuple of (longitude step, latitude step) in degrees
    """
    dlat = math.degrees(meters / EARTH_RADIUS)
    cos_lat = max(math.cos(math.radians(latitude)), 1e-6)
    return (dlat / cos_lat, dlat)


def local_metric_offsets(
    lons: np.ndarray, lats: np.ndarray, origin_lon: Any, origin_lat: Any
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Project coordinates onto an equirectangular tangent plane around an origin.

    Over the small extents of a single triangle this agrees with haversine
    distances to well below a millimeter per meter.

    Args:
        lons: Longitudes in degrees
        lats: Latitudes in degrees
        origin_lon: Longitude of the plane origin (scalar or broadcastable array)
        origin_lat: Latitude of the plane origin (scalar or broadcastable array)

    Returns:
        Tuple of (east, north) offsets in meters
    """
    cos_lat = np.cos(np.radians(origin_lat))
    east = np.radians(np.asarray(lons, dtype=float) - origin_lon) * EARTH_RADIUS * cos_lat
    north = np.radians(np.asarray(lats, dtype=float) - origin_lat) * EARTH_RADIUS
    return east, north
