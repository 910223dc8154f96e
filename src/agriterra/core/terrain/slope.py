"""
Slope of TIN triangles and slope statistics.

Each triangle is projected onto a local tangent plane in meters around its
centroid. The plane gradient gives the fall-line slope; horizontal
distances are scaled by a curvature factor of 1.02 and slopes are clamped
to a minimum of 0.1 degrees.
"""

import hashlib
import logging
from typing import Any, Dict, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from agriterra.core.geometry.geodesy import local_metric_offsets
from agriterra.core.terrain import statistics
from agriterra.core.terrain.aspect import aspect_fractions, calculate_aspects
from agriterra.models.surface import TINTriangle
from agriterra.models.terrain import SlopeClass, SlopeClassSummary, SlopeStats

logger = logging.getLogger(__name__)

CURVATURE_FACTOR = 1.02
MIN_SLOPE_DEGREES = 0.1

# Upper bound (inclusive, degrees) and description of each slope class
SLOPE_CLASS_LIMITS: Dict[SlopeClass, Tuple[float, str]] = {
    SlopeClass.OPTIMAL: (5.0, "Ideal for most crops"),
    SlopeClass.MODERATE: (8.0, "Suitable with minor conservation"),
    SlopeClass.STEEP: (16.0, "Requires significant conservation"),
    SlopeClass.VERY_STEEP: (30.0, "Limited to specific crops"),
    SlopeClass.EXTREME: (float("inf"), "Not recommended for cultivation"),
}

FloatArray = NDArray[np.floating[Any]]


def triangle_gradients(triangles: Sequence[TINTriangle]) -> Tuple[FloatArray, FloatArray]:
    """
    Plane gradient of each triangle in meters per meter.

    The plane normal is the cross product of the second and third edge
    vectors (B to C and C to A) in local east/north/up coordinates.

    Args:
        triangles: Non-degenerate TIN triangles

    Returns:
        Tuple of (eastward, northward) gradient arrays
    """
    vertices = np.array([t.vertices for t in triangles], dtype=float)  # (m, 3, 2)
    heights = np.array([t.elevations for t in triangles], dtype=float)  # (m, 3)

    centroid_lon = vertices[:, :, 0].mean(axis=1, keepdims=True)
    centroid_lat = vertices[:, :, 1].mean(axis=1, keepdims=True)
    east, north = local_metric_offsets(
        vertices[:, :, 0], vertices[:, :, 1], centroid_lon, centroid_lat
    )

    points = np.stack([east, north, heights], axis=-1)  # (m, 3, 3)
    edge_bc = points[:, 2] - points[:, 1]
    edge_ca = points[:, 0] - points[:, 2]
    normal = np.cross(edge_bc, edge_ca)

    gradient_x = -normal[:, 0] / normal[:, 2]
    gradient_y = -normal[:, 1] / normal[:, 2]
    return gradient_x, gradient_y


def slopes_from_gradients(gradient_x: FloatArray, gradient_y: FloatArray) -> FloatArray:
    """
    Fall-line slope in degrees for each gradient.

    Args:
        gradient_x: Eastward gradient components
        gradient_y: Northward gradient components

    Returns:
        Slopes in degrees, at least MIN_SLOPE_DEGREES
    """
    magnitude = np.hypot(gradient_x, gradient_y)
    slope = np.degrees(np.arctan(magnitude / CURVATURE_FACTOR))
    return np.maximum(slope, MIN_SLOPE_DEGREES)


def calculate_slopes(triangles: Sequence[TINTriangle]) -> FloatArray:
    """
    Slope in degrees of each TIN triangle.

    Args:
        triangles: Non-degenerate TIN triangles

    Returns:
        Slopes in degrees, one per triangle, in triangle order
    """
    if not triangles:
        return np.zeros(0, dtype=float)
    return slopes_from_gradients(*triangle_gradients(triangles))


def classify_slope(slope_degrees: float) -> SlopeClass:
    """
    Slope class of a single slope value.

    Args:
        slope_degrees: Slope in degrees

    Returns:
        First class whose upper bound is not exceeded
    """
    for slope_class, (upper, _description) in SLOPE_CLASS_LIMITS.items():
        if slope_degrees <= upper:
            return slope_class
    return SlopeClass.EXTREME


def slope_distribution(slopes: FloatArray, area_sqm: float) -> Dict[SlopeClass, SlopeClassSummary]:
    """
    Share of slopes in each class with the proportional polygon area.

    Args:
        slopes: Slopes in degrees
        area_sqm: Polygon area in square meters

    Returns:
        Summaries for every class, in class order; percentages sum to 100
    """
    values = np.asarray(slopes, dtype=float)
    total = values.size
    distribution: Dict[SlopeClass, SlopeClassSummary] = {}

    lower = -np.inf
    for slope_class, (upper, description) in SLOPE_CLASS_LIMITS.items():
        count = int(np.count_nonzero((values > lower) & (values <= upper)))
        fraction = count / total if total else 0.0
        distribution[slope_class] = SlopeClassSummary(
            percentage=fraction * 100.0,
            area=fraction * area_sqm,
            description=description,
        )
        lower = upper

    return distribution


class SlopeAnalyzer:
    """
    Computes slope statistics for one analysis.

    The class distribution is memoised by the content hash of the slope
    sequence. An instance lives for a single analysis, so the cache never
    outlives the call that filled it.
    """

    def __init__(self) -> None:
        self._distribution_cache: Dict[str, Dict[SlopeClass, SlopeClassSummary]] = {}

    @staticmethod
    def _cache_key(slopes: FloatArray, area_sqm: float) -> str:
        digest = hashlib.sha256(np.ascontiguousarray(slopes, dtype=np.float64).tobytes())
        digest.update(repr(float(area_sqm)).encode())
        return digest.hexdigest()

    def distribution(self, slopes: FloatArray, area_sqm: float) -> Dict[SlopeClass, SlopeClassSummary]:
        """
        Memoised slope class distribution.

        Args:
            slopes: Slopes in degrees
            area_sqm: Polygon area in square meters

        Returns:
            Slope class summaries
        """
        key = self._cache_key(slopes, area_sqm)
        cached = self._distribution_cache.get(key)
        if cached is not None:
            logger.debug(f"Slope distribution cache hit for key {key[:8]}...")
            return cached

        result = slope_distribution(slopes, area_sqm)
        self._distribution_cache[key] = result
        return result

    def analyze(self, triangles: Sequence[TINTriangle], area_sqm: float) -> Tuple[SlopeStats, FloatArray]:
        """
        Slope and aspect statistics over TIN triangles.

        Args:
            triangles: Non-degenerate TIN triangles
            area_sqm: Polygon area in square meters

        Returns:
            Tuple of (SlopeStats, per-triangle slopes in degrees)

        Raises:
            ValueError: If there are no triangles
        """
        if not triangles:
            raise ValueError("Slope statistics need at least one triangle")

        gradient_x, gradient_y = triangle_gradients(triangles)
        slopes = slopes_from_gradients(gradient_x, gradient_y)
        aspects = calculate_aspects(gradient_x, gradient_y)

        stats = SlopeStats(
            mean=statistics.mean(slopes),
            median=statistics.median(slopes),
            std_dev=statistics.std_dev(slopes),
            confidence=statistics.confidence_interval(slopes),
            distribution=self.distribution(slopes, area_sqm),
            aspects=aspect_fractions(aspects),
            count=int(slopes.size),
            minimum=float(slopes.min()),
            maximum=float(slopes.max()),
        )

        logger.debug(
            f"Slope over {stats.count} triangles: mean={stats.mean:.2f}°, "
            f"std={stats.std_dev:.2f}°, dominant aspect={stats.aspects.dominant}"
        )

        return stats, slopes
