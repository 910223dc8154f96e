"""
Terrain surface reconstruction: Delaunay TIN and hydrology raster.
"""

from agriterra.core.surface.raster import raster_size, rasterize
from agriterra.core.surface.tin import MIN_TRIANGLE_AREA_DEG2, build_tin

__all__ = [
    "MIN_TRIANGLE_AREA_DEG2",
    "build_tin",
    "raster_size",
    "rasterize",
]
