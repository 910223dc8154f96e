"""
Rasterization of a TIN onto a square grid for hydrology.
"""

import logging
import math

import numpy as np
from scipy.spatial import cKDTree

from agriterra.core.geometry.geodesy import haversine_distance
from agriterra.models.surface import TIN, RasterGrid

logger = logging.getLogger(__name__)

# A D8 neighbourhood needs at least one interior cell
MIN_RASTER_SIZE = 3


def raster_size(target_cells: int) -> int:
    """Side length N = ceil(sqrt(target_cells)), at least 3."""
    return max(MIN_RASTER_SIZE, int(math.ceil(math.sqrt(target_cells))))


def rasterize(tin: TIN, target_cells: int = 25) -> RasterGrid:
    """
    Interpolate the TIN onto an N x N grid over its bounding box.

    Cell centres inside a kept triangle get the barycentric interpolation of
    its vertex elevations; all other cells take the nearest vertex elevation.

    Args:
        tin: Triangulated surface
        target_cells: Desired number of cells

    Returns:
        RasterGrid with row 0 as the northernmost row
    """
    n = raster_size(target_cells)
    min_x, min_y, max_x, max_y = tin.bounds

    col_step = (max_x - min_x) / n
    row_step = (max_y - min_y) / n
    xs = min_x + (np.arange(n) + 0.5) * col_step
    ys = max_y - (np.arange(n) + 0.5) * row_step

    grid_x, grid_y = np.meshgrid(xs, ys)
    query = np.column_stack([grid_x.ravel(), grid_y.ravel()])

    delaunay = tin.delaunay
    vertex_elevations = tin.elevations

    simplex = delaunay.find_simplex(query)
    inside = simplex >= 0
    inside[inside] = tin.kept[simplex[inside]]

    values = np.empty(len(query), dtype=float)

    if inside.any():
        hit = simplex[inside]
        transform = delaunay.transform[hit]
        delta = query[inside] - transform[:, 2]
        bary = np.einsum("ijk,ik->ij", transform[:, :2], delta)
        weights = np.column_stack([bary, 1.0 - bary.sum(axis=1)])
        corner_elevations = vertex_elevations[delaunay.simplices[hit]]
        values[inside] = (weights * corner_elevations).sum(axis=1)

    outside = ~inside
    if outside.any():
        coords = np.array([[p.lon, p.lat] for p in tin.vertices], dtype=float)
        _, nearest = cKDTree(coords).query(query[outside])
        values[outside] = vertex_elevations[nearest]

    mid_lat = (min_y + max_y) / 2.0
    mid_lon = (min_x + max_x) / 2.0
    width_m = haversine_distance(min_x, mid_lat, max_x, mid_lat)
    height_m = haversine_distance(mid_lon, min_y, mid_lon, max_y)

    logger.debug(
        f"Rasterized TIN to {n}x{n} grid "
        f"({int(inside.sum())} interpolated, {int(outside.sum())} nearest-vertex)"
    )

    return RasterGrid(
        elevations=values.reshape(n, n),
        bounds=(min_x, min_y, max_x, max_y),
        cell_width_m=width_m / n,
        cell_height_m=height_m / n,
    )
