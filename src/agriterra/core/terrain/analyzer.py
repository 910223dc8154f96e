"""
Terrain analysis over a TIN and its hydrology raster.

Combines slope statistics, D8 drainage, erosion risk, water retention,
solar exposure and terrain complexity into a single TerrainAnalysis.
"""

import logging
import math
from typing import Any, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from agriterra.core.cancellation import CancelSignal, check_cancelled
from agriterra.core.config import AnalysisConfig
from agriterra.core.terrain import statistics
from agriterra.core.terrain.aspect import calculate_solar_exposure
from agriterra.core.terrain.hydrology import analyze_drainage, route_flow
from agriterra.core.terrain.slope import SlopeAnalyzer
from agriterra.models.geometry import ValidatedArea
from agriterra.models.surface import TIN, RasterGrid
from agriterra.models.terrain import (
    ErosionRisk,
    SlopeClass,
    SlopeStats,
    TerrainAnalysis,
    TerrainComplexity,
    WaterRetention,
)
from agriterra.utils.logging import log_performance

logger = logging.getLogger(__name__)

EROSION_EXPONENT = 1.3
EROSION_CATEGORIES = [
    (0.2, "Very Low"),
    (0.4, "Low"),
    (0.6, "Moderate"),
    (0.8, "High"),
]

RETENTION_DECAY = 0.04
RETENTION_BASE_MM = 100.0

# Slope standard deviation (degrees) that maps to complexity 1
COMPLEXITY_SCALE = 45.0


def classify_erosion(score: float) -> str:
    """Erosion risk category for a score."""
    for threshold, category in EROSION_CATEGORIES:
        if score <= threshold:
            return category
    return "Very High"


def calculate_erosion_risk(slope_stats: SlopeStats) -> ErosionRisk:
    """
    Erosion risk from mean slope and slope variability.

    score = sin(mean slope)^1.3 * (1 + std_dev / 45)

    Args:
        slope_stats: Slope statistics

    Returns:
        ErosionRisk
    """
    slope_factor = math.sin(math.radians(slope_stats.mean)) ** EROSION_EXPONENT
    variability_factor = 1.0 + slope_stats.std_dev / 45.0
    score = slope_factor * variability_factor

    return ErosionRisk(
        score=score,
        category=classify_erosion(score),
        slope_factor=slope_factor,
        variability_factor=variability_factor,
    )


def calculate_water_retention(slope_stats: SlopeStats) -> WaterRetention:
    """
    Water retention capacity from mean slope and the share of optimal slopes.

    Args:
        slope_stats: Slope statistics

    Returns:
        WaterRetention
    """
    slope_factor = math.exp(-RETENTION_DECAY * slope_stats.mean)
    distribution_factor = slope_stats.distribution[SlopeClass.OPTIMAL].percentage / 100.0

    return WaterRetention(
        capacity_mm=RETENTION_BASE_MM * slope_factor * distribution_factor,
        efficiency=slope_factor * 100.0,
        slope_factor=slope_factor,
        distribution_factor=distribution_factor,
    )


def calculate_complexity(slopes: NDArray[np.floating[Any]]) -> TerrainComplexity:
    """Terrain complexity from the spread of per-triangle slopes."""
    return TerrainComplexity(
        score=statistics.std_dev(slopes) / COMPLEXITY_SCALE,
        variability=statistics.mean_absolute_deviation(slopes),
    )


class TerrainAnalyzer:
    """
    Runs every terrain sub-analysis for one area.

    Usage:
        analyzer = TerrainAnalyzer(AnalysisConfig(hemisphere="south"))
        slope_stats, terrain = analyzer.analyze(area, tin, raster)
    """

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config or AnalysisConfig()
        self.slope_analyzer = SlopeAnalyzer()

    @log_performance(threshold_ms=500)
    def analyze(
        self,
        area: ValidatedArea,
        tin: TIN,
        raster: RasterGrid,
        cancel: Optional[CancelSignal] = None,
    ) -> Tuple[SlopeStats, TerrainAnalysis]:
        """
        Analyze terrain.

        Args:
            area: Validated polygon
            tin: Triangulated surface
            raster: Elevation raster derived from the TIN
            cancel: Optional cancellation signal, checked between sub-analyses

        Returns:
            Tuple of (SlopeStats, TerrainAnalysis)

        Raises:
            AnalysisCancelledError: If cancellation is observed
            InternalInvariantError: If depression filling does not settle
        """
        check_cancelled(cancel, "slope")
        slope_stats, slopes = self.slope_analyzer.analyze(tin.triangles, area.area_sqm)

        check_cancelled(cancel, "drainage")
        flow = route_flow(raster)
        drainage = analyze_drainage(raster, area.area_sqm, flow=flow)

        check_cancelled(cancel, "erosion")
        erosion = calculate_erosion_risk(slope_stats)

        check_cancelled(cancel, "water_retention")
        retention = calculate_water_retention(slope_stats)

        check_cancelled(cancel, "solar_exposure")
        solar = calculate_solar_exposure(slope_stats.aspects, self.config.hemisphere)

        check_cancelled(cancel, "complexity")
        complexity = calculate_complexity(slopes)

        logger.info(
            f"Terrain analyzed: mean slope {slope_stats.mean:.2f}°, "
            f"drainage {drainage.pattern.value}, erosion {erosion.category}, "
            f"solar {solar.category}"
        )

        return slope_stats, TerrainAnalysis(
            drainage=drainage,
            erosion_risk=erosion,
            water_retention=retention,
            solar_exposure=solar,
            complexity=complexity,
        )
