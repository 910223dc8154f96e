"""
Terrain analysis: slope, aspect, D8 drainage and derived indices.
"""

from agriterra.core.terrain.analyzer import (
    TerrainAnalyzer,
    calculate_complexity,
    calculate_erosion_risk,
    calculate_water_retention,
    classify_erosion,
)
from agriterra.core.terrain.aspect import (
    AspectQuadrant,
    aspect_fractions,
    aspect_to_quadrant,
    calculate_aspects,
    calculate_solar_exposure,
    classify_solar_exposure,
)
from agriterra.core.terrain.hydrology import (
    analyze_drainage,
    classify_drainage_pattern,
    fill_depressions,
    flow_accumulation,
    flow_directions,
    route_flow,
)
from agriterra.core.terrain.slope import (
    SlopeAnalyzer,
    calculate_slopes,
    classify_slope,
    slope_distribution,
)

__all__ = [
    "AspectQuadrant",
    "SlopeAnalyzer",
    "TerrainAnalyzer",
    "analyze_drainage",
    "aspect_fractions",
    "aspect_to_quadrant",
    "calculate_aspects",
    "calculate_complexity",
    "calculate_erosion_risk",
    "calculate_slopes",
    "calculate_solar_exposure",
    "calculate_water_retention",
    "classify_drainage_pattern",
    "classify_erosion",
    "classify_slope",
    "classify_solar_exposure",
    "fill_depressions",
    "flow_accumulation",
    "flow_directions",
    "route_flow",
    "slope_distribution",
]
