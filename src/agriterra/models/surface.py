"""
Terrain surface models: TIN triangles, the TIN itself, the hydrology raster
and the D8 flow grid derived from it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import numpy as np
from scipy.spatial import Delaunay

from agriterra.models.sampling import SamplePoint

Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class TINTriangle:
    """
    Canonical triangle record.

    Attributes:
        vertices: Three (lon, lat) vertices in Delaunay order
        elevations: Vertex elevations (a, b, c) in the same order
    """

    vertices: Tuple[Coordinate, Coordinate, Coordinate]
    elevations: Tuple[float, float, float]

    @property
    def planar_area(self) -> float:
        """Unsigned planar area in square degrees."""
        (x1, y1), (x2, y2), (x3, y3) = self.vertices
        return abs((x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1)) / 2.0

    @property
    def centroid(self) -> Coordinate:
        """Planar centroid as (lon, lat)."""
        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        return (sum(xs) / 3.0, sum(ys) / 3.0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "vertices": [list(v) for v in self.vertices],
            "elevations": list(self.elevations),
        }


@dataclass(frozen=True, eq=False)
class TIN:
    """
    Delaunay triangulated irregular network over enriched sample points.

    Attributes:
        vertices: Enriched sample points, in enricher order
        triangles: Non-degenerate triangles, in Delaunay simplex order
        delaunay: Underlying scipy triangulation (all simplices)
        kept: Boolean mask over ``delaunay.simplices`` marking kept triangles
    """

    vertices: Tuple[SamplePoint, ...]
    triangles: Tuple[TINTriangle, ...]
    delaunay: Delaunay = field(repr=False)
    kept: np.ndarray = field(repr=False)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Bounding box of the vertices as (min_lon, min_lat, max_lon, max_lat)."""
        lons = [p.lon for p in self.vertices]
        lats = [p.lat for p in self.vertices]
        return (min(lons), min(lats), max(lons), max(lats))

    @property
    def elevations(self) -> np.ndarray:
        """Vertex elevations as a float array."""
        return np.array([p.elevation for p in self.vertices], dtype=float)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "vertex_count": len(self.vertices),
            "triangle_count": len(self.triangles),
            "bounds": self.bounds,
        }


@dataclass(frozen=True, eq=False)
class RasterGrid:
    """
    Square elevation grid interpolated from a TIN.

    Row 0 is the northernmost row, column 0 the westernmost column.

    Attributes:
        elevations: N x N float array of cell elevations
        bounds: Grid extent as (min_lon, min_lat, max_lon, max_lat)
        cell_width_m: East-west cell size in meters
        cell_height_m: North-south cell size in meters
    """

    elevations: np.ndarray = field(repr=False)
    bounds: Tuple[float, float, float, float]
    cell_width_m: float
    cell_height_m: float

    def __post_init__(self) -> None:
        """Validate the grid is square."""
        if self.elevations.ndim != 2 or self.elevations.shape[0] != self.elevations.shape[1]:
            raise ValueError(f"Raster must be square, got shape {self.elevations.shape}")

    @property
    def size(self) -> int:
        """Side length N."""
        return int(self.elevations.shape[0])

    @property
    def cell_count(self) -> int:
        """Total number of cells (N * N)."""
        return int(self.elevations.size)

    @property
    def cell_size_m(self) -> float:
        """Representative cell size in meters (mean of both axes)."""
        return (self.cell_width_m + self.cell_height_m) / 2.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "size": self.size,
            "cell_count": self.cell_count,
            "bounds": self.bounds,
            "cell_width_m": self.cell_width_m,
            "cell_height_m": self.cell_height_m,
            "cell_size_m": self.cell_size_m,
        }


@dataclass(frozen=True, eq=False)
class FlowGrid:
    """
    D8 routing results over a raster.

    Attributes:
        filled: Depression-filled elevations
        flow_direction: Direction codes 0..7 (N, NE, E, SE, S, SW, W, NW), -1 terminal
        accumulation: 1 plus the flow-path lengths of cells terminating here (>= 1)
        fill_passes: Number of filling passes until stable
    """

    filled: np.ndarray = field(repr=False)
    flow_direction: np.ndarray = field(repr=False)
    accumulation: np.ndarray = field(repr=False)
    fill_passes: int = 0

    @property
    def size(self) -> int:
        """Side length N."""
        return int(self.filled.shape[0])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "size": self.size,
            "fill_passes": self.fill_passes,
            "max_accumulation": int(self.accumulation.max()),
            "terminal_cells": int(np.count_nonzero(self.flow_direction == -1)),
        }
