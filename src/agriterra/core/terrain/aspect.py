"""
Aspect of TIN triangles and aspect-weighted solar exposure.

Aspect is the compass bearing of the gradient of a triangle's plane,
measured clockwise from north. A triangle with no gradient has aspect 0
(north).
"""

from enum import Enum
from typing import Any, Dict

import numpy as np
from numpy.typing import NDArray

from agriterra.models.terrain import AspectFractions, SolarExposure

# Gradients below this magnitude (m/m) are treated as flat
FLAT_GRADIENT = 1e-12


class AspectQuadrant(str, Enum):
    """Compass quadrants used for aspect classification."""

    NORTH = "north"  # >= 315 or < 45
    EAST = "east"  # [45, 135)
    SOUTH = "south"  # [135, 225)
    WEST = "west"  # [225, 315)


# Solar weights per quadrant, keyed by hemisphere. Equator-facing slopes
# receive the most radiation.
SOLAR_WEIGHTS: Dict[str, Dict[AspectQuadrant, float]] = {
    "north": {
        AspectQuadrant.SOUTH: 1.0,
        AspectQuadrant.EAST: 0.7,
        AspectQuadrant.WEST: 0.7,
        AspectQuadrant.NORTH: 0.4,
    },
    "south": {
        AspectQuadrant.NORTH: 1.0,
        AspectQuadrant.EAST: 0.7,
        AspectQuadrant.WEST: 0.7,
        AspectQuadrant.SOUTH: 0.4,
    },
}

SOLAR_CATEGORIES = [
    (0.3, "Low"),
    (0.5, "Moderate"),
    (0.7, "High"),
    (0.9, "Very High"),
]


def calculate_aspects(
    gradient_x: NDArray[np.floating[Any]], gradient_y: NDArray[np.floating[Any]]
) -> NDArray[np.floating[Any]]:
    """
    Compass bearing of each gradient vector.

    Args:
        gradient_x: Eastward gradient components
        gradient_y: Northward gradient components

    Returns:
        Aspects in degrees, in [0, 360)
    """
    gx = np.asarray(gradient_x, dtype=float)
    gy = np.asarray(gradient_y, dtype=float)

    aspect = (np.degrees(np.arctan2(gx, gy)) + 360.0) % 360.0
    aspect[np.hypot(gx, gy) < FLAT_GRADIENT] = 0.0
    return aspect


def aspect_to_quadrant(aspect_degrees: float) -> AspectQuadrant:
    """
    Classify a bearing into a compass quadrant.

    Args:
        aspect_degrees: Bearing in degrees

    Returns:
        AspectQuadrant
    """
    aspect = aspect_degrees % 360.0
    if aspect >= 315.0 or aspect < 45.0:
        return AspectQuadrant.NORTH
    if aspect < 135.0:
        return AspectQuadrant.EAST
    if aspect < 225.0:
        return AspectQuadrant.SOUTH
    return AspectQuadrant.WEST


def aspect_fractions(aspects: NDArray[np.floating[Any]]) -> AspectFractions:
    """
    Fraction of aspects in each quadrant.

    Args:
        aspects: Bearings in degrees

    Returns:
        AspectFractions summing to 1 (all zero for an empty input)
    """
    values = np.asarray(aspects, dtype=float) % 360.0
    total = values.size
    if total == 0:
        return AspectFractions(north=0.0, east=0.0, south=0.0, west=0.0)

    east = int(np.count_nonzero((values >= 45.0) & (values < 135.0)))
    south = int(np.count_nonzero((values >= 135.0) & (values < 225.0)))
    west = int(np.count_nonzero((values >= 225.0) & (values < 315.0)))
    north = total - east - south - west

    return AspectFractions(
        north=north / total,
        east=east / total,
        south=south / total,
        west=west / total,
    )


def classify_solar_exposure(score: float) -> str:
    """Solar exposure category for a score."""
    for threshold, category in SOLAR_CATEGORIES:
        if score <= threshold:
            return category
    return "Optimal"


def calculate_solar_exposure(aspects: AspectFractions, hemisphere: str = "north") -> SolarExposure:
    """
    Aspect-weighted solar exposure score.

    Args:
        aspects: Quadrant fractions
        hemisphere: "north" or "south"; swaps the north- and south-facing weights

    Returns:
        SolarExposure with score in [0.4, 1]
    """
    weights = SOLAR_WEIGHTS[hemisphere]
    score = (
        aspects.south * weights[AspectQuadrant.SOUTH]
        + aspects.east * weights[AspectQuadrant.EAST]
        + aspects.west * weights[AspectQuadrant.WEST]
        + aspects.north * weights[AspectQuadrant.NORTH]
    )

    return SolarExposure(
        score=score,
        category=classify_solar_exposure(score),
        hemisphere=hemisphere,
        aspects=aspects,
    )
