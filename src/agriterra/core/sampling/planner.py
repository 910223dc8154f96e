"""
Sampling planner.

Lays a regular lattice over the polygon and keeps the lattice points that
fall strictly inside it. Large polygons are sampled in quadrant chunks so
that every chunk contributes a bounded number of points.

The lattice is anchored to the bounding box of the whole polygon, and
chunk boxes are half-open, so chunked and unchunked sampling select the
same lattice points whenever no per-chunk cap is reached.
"""

import logging
import math
from typing import List, Optional, Tuple, Union

import numpy as np
import shapely
from shapely.geometry import MultiPolygon, Polygon, box
from shapely.geometry.base import BaseGeometry

from agriterra.core.config import AnalysisConfig
from agriterra.core.geometry.geodesy import meters_to_degrees, spherical_area
from agriterra.models.geometry import ValidatedArea
from agriterra.models.sampling import PointGrid, SamplePoint

logger = logging.getLogger(__name__)

# Fewer lattice points than this triggers the sparse-polygon fallback
MIN_LATTICE_POINTS = 3

# Target number of lattice cells for the sparse-polygon resample
SPARSE_TARGET_CELLS = 16

DEFAULT_MAX_DEPTH = 8

Bounds = Tuple[float, float, float, float]


class SamplingPlanner:
    """
    Produces the in-polygon point grid for an analysis.

    Attributes:
        config: Analysis configuration (spacing, per-chunk cap, chunk threshold)
        max_depth: Maximum quadrant recursion depth
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """
        Initialize the planner.

        Args:
            config: Analysis configuration, defaults to AnalysisConfig()
            max_depth: Maximum chunk recursion depth; deeper chunks are sampled directly
        """
        self.config = config or AnalysisConfig()
        self.max_depth = max_depth

    def plan(self, area: ValidatedArea) -> PointGrid:
        """
        Sample the polygon on a regular lattice.

        Args:
            area: Validated polygon with its spherical area

        Returns:
            PointGrid with at least one point, all strictly inside the polygon
        """
        spacing = self.config.grid_spacing_meters
        points, chunk_count = self._sample(area, spacing)

        if len(points) >= MIN_LATTICE_POINTS:
            logger.debug(
                f"Sampled {len(points)} points at {spacing:.2f}m spacing "
                f"in {chunk_count} chunk(s)"
            )
            return PointGrid(points=tuple(points), spacing_meters=spacing, chunk_count=chunk_count)

        # Sparse polygon: resample at a finer adaptive spacing and add an interior point
        adaptive = min(spacing / 2.0, math.sqrt(area.area_sqm / SPARSE_TARGET_CELLS))
        resampled, chunk_count = self._sample(area, adaptive)
        if len(resampled) > len(points):
            points, spacing = resampled, adaptive

        anchor = self._interior_point(area.geometry)
        if anchor not in points:
            points.append(anchor)

        logger.info(
            f"Sparse polygon: {len(points)} points after resampling at "
            f"{spacing:.2f}m with an interior anchor point"
        )

        return PointGrid(
            points=tuple(points),
            spacing_meters=spacing,
            chunk_count=chunk_count,
            centroid_added=True,
        )

    def _sample(self, area: ValidatedArea, spacing: float) -> Tuple[List[SamplePoint], int]:
        """Sample the whole polygon at the given spacing, chunking as configured."""
        xs, ys = self._lattice(area.bounds, spacing)
        points: List[SamplePoint] = []
        chunk_count = self._sample_box(
            area.geometry, area.bounds, area.area_sqm, xs, ys, depth=0, out=points
        )
        return points, chunk_count

    def _lattice(self, bounds: Bounds, spacing: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Lattice coordinates anchored at the bounding box and centred in it.

        Args:
            bounds: (min_lon, min_lat, max_lon, max_lat) of the whole polygon
            spacing: Lattice spacing in meters

        Returns:
            Tuple of ascending longitude and latitude arrays
        """
        min_x, min_y, max_x, max_y = bounds
        mid_lat = (min_y + max_y) / 2.0
        dlon, dlat = meters_to_degrees(spacing, mid_lat)

        return (
            self._axis(min_x, max_x, dlon),
            self._axis(min_y, max_y, dlat),
        )

    @staticmethod
    def _axis(lower: float, upper: float, step: float) -> np.ndarray:
        """Evenly spaced axis values centred within [lower, upper]."""
        extent = upper - lower
        intervals = int(math.floor(extent / step))
        offset = lower + (extent - intervals * step) / 2.0
        return offset + np.arange(intervals + 1, dtype=float) * step

    def _sample_box(
        self,
        geometry: Union[Polygon, MultiPolygon],
        bounds: Bounds,
        piece_area: float,
        xs: np.ndarray,
        ys: np.ndarray,
        depth: int,
        out: List[SamplePoint],
    ) -> int:
        """
        Recursively sample one chunk box.

        Args:
            geometry: The full polygon
            bounds: Half-open chunk box
            piece_area: Spherical area of the polygon inside the box
            xs: Global lattice longitudes
            ys: Global lattice latitudes
            depth: Current recursion depth
            out: Accumulator for emitted points

        Returns:
            Number of leaf chunks sampled
        """
        if piece_area <= self.config.chunk_area_threshold_m2 or depth >= self.max_depth:
            out.extend(self._sample_leaf(geometry, bounds, xs, ys))
            return 1

        chunk_count = 0
        for sub_bounds in self._quadrants(bounds):
            piece = _polygonal(geometry.intersection(box(*sub_bounds)))
            if piece is None:
                continue
            chunk_count += self._sample_box(
                geometry, sub_bounds, spherical_area(piece), xs, ys, depth + 1, out
            )

        return chunk_count

    def _sample_leaf(
        self,
        geometry: Union[Polygon, MultiPolygon],
        bounds: Bounds,
        xs: np.ndarray,
        ys: np.ndarray,
    ) -> List[SamplePoint]:
        """Lattice points of one chunk box strictly inside the polygon, in scan order."""
        min_x, min_y, max_x, max_y = bounds
        sub_xs = xs[(xs >= min_x) & (xs < max_x)]
        sub_ys = ys[(ys >= min_y) & (ys < max_y)]
        if sub_xs.size == 0 or sub_ys.size == 0:
            return []

        # Rows run south to north, columns west to east
        grid_x, grid_y = np.meshgrid(sub_xs, sub_ys)
        flat_x = grid_x.ravel()
        flat_y = grid_y.ravel()
        inside = shapely.contains_xy(geometry, flat_x, flat_y)

        selected_x = flat_x[inside][: self.config.max_points_per_chunk]
        selected_y = flat_y[inside][: self.config.max_points_per_chunk]

        if int(inside.sum()) > self.config.max_points_per_chunk:
            logger.debug(
                f"Chunk {bounds} capped at {self.config.max_points_per_chunk} "
                f"of {int(inside.sum())} points"
            )

        return [SamplePoint(lon=float(x), lat=float(y)) for x, y in zip(selected_x, selected_y)]

    @staticmethod
    def _quadrants(bounds: Bounds) -> List[Bounds]:
        """Split a box into SW, SE, NW, NE quadrants."""
        min_x, min_y, max_x, max_y = bounds
        mid_x = (min_x + max_x) / 2.0
        mid_y = (min_y + max_y) / 2.0
        return [
            (min_x, min_y, mid_x, mid_y),
            (mid_x, min_y, max_x, mid_y),
            (min_x, mid_y, mid_x, max_y),
            (mid_x, mid_y, max_x, max_y),
        ]

    @staticmethod
    def _interior_point(geometry: Union[Polygon, MultiPolygon]) -> SamplePoint:
        """The centroid when it lies inside the polygon, else a representative point."""
        centroid = geometry.centroid
        if shapely.contains_xy(geometry, centroid.x, centroid.y):
            return SamplePoint(lon=centroid.x, lat=centroid.y)

        point = geometry.representative_point()
        return SamplePoint(lon=point.x, lat=point.y)


def _polygonal(geometry: BaseGeometry) -> Optional[Union[Polygon, MultiPolygon]]:
    """Polygonal part of an intersection result, or None if it has no area."""
    if geometry.is_empty:
        return None

    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry if geometry.area > 0 else None

    parts = [g for g in getattr(geometry, "geoms", []) if isinstance(g, Polygon) and g.area > 0]
    if not parts:
        return None
    return MultiPolygon(parts)


def plan_samples(area: ValidatedArea, config: Optional[AnalysisConfig] = None) -> PointGrid:
    """
    Convenience function to sample a validated polygon.

    Args:
        area: Validated polygon
        config: Analysis configuration

    Returns:
        PointGrid
    """
    return SamplingPlanner(config).plan(area)
