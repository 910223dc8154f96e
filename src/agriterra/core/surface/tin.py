"""
Delaunay TIN construction over enriched sample points.
"""

import logging
from typing import List, Sequence

import numpy as np
from scipy.spatial import Delaunay, QhullError

from agriterra.core.errors import DegenerateSurfaceError
from agriterra.models.sampling import SamplePoint
from agriterra.models.surface import TIN, TINTriangle

logger = logging.getLogger(__name__)

# Triangles with a smaller planar area (square degrees) are treated as collinear
MIN_TRIANGLE_AREA_DEG2 = 1e-12


def build_tin(points: Sequence[SamplePoint]) -> TIN:
    """
    Triangulate enriched points on their planar (lon, lat) coordinates.

    Args:
        points: Points carrying elevations, in enricher order

    Returns:
        TIN whose triangles keep Delaunay simplex order; each triangle's
        elevations follow its vertex order

    Raises:
        DegenerateSurfaceError: If no non-degenerate triangle can be formed
    """
    if len(points) < 3:
        raise DegenerateSurfaceError(
            f"A surface needs at least 3 points, got {len(points)}",
            point_count=len(points),
        )

    coords = np.array([[p.lon, p.lat] for p in points], dtype=float)
    elevations = np.array([p.elevation for p in points], dtype=float)

    try:
        delaunay = Delaunay(coords)
    except QhullError as e:
        raise DegenerateSurfaceError(
            "Sample points are collinear; no triangle can be formed",
            point_count=len(points),
            details={"qhull": str(e).splitlines()[0] if str(e) else ""},
        ) from e

    kept = np.zeros(len(delaunay.simplices), dtype=bool)
    triangles: List[TINTriangle] = []

    for index, simplex in enumerate(delaunay.simplices):
        a, b, c = (int(v) for v in simplex)
        triangle = TINTriangle(
            vertices=(
                (coords[a, 0], coords[a, 1]),
                (coords[b, 0], coords[b, 1]),
                (coords[c, 0], coords[c, 1]),
            ),
            elevations=(float(elevations[a]), float(elevations[b]), float(elevations[c])),
        )
        if triangle.planar_area < MIN_TRIANGLE_AREA_DEG2:
            continue
        kept[index] = True
        triangles.append(triangle)

    if not triangles:
        raise DegenerateSurfaceError(
            "All triangles are degenerate",
            point_count=len(points),
            details={"simplices": int(len(delaunay.simplices))},
        )

    dropped = len(delaunay.simplices) - len(triangles)
    logger.debug(
        f"Built TIN with {len(triangles)} triangles over {len(points)} points"
        + (f" ({dropped} degenerate dropped)" if dropped else "")
    )

    return TIN(
        vertices=tuple(points),
        triangles=tuple(triangles),
        delaunay=delaunay,
        kept=kept,
    )
