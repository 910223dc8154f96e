"""
Terrain suitability pipeline.

``analyze_area`` runs every stage once, in order:

    validate -> sample -> enrich -> triangulate -> rasterize
        -> terrain analysis -> suitability and ROI -> report

Only enrichment suspends; every other stage is synchronous numpy/scipy
work. Any error aborts the run and propagates unchanged.
"""

import asyncio
import logging
import time
import uuid
from typing import Any, Dict, Mapping, Optional, Union

import numpy as np

from agriterra.core.cancellation import CancelSignal, check_cancelled
from agriterra.core.config import AnalysisConfig
from agriterra.core.elevation.enricher import ElevationEnricher
from agriterra.core.elevation.provider import ElevationProvider
from agriterra.core.errors import AgriterraException
from agriterra.core.geometry.validator import GeometryValidator
from agriterra.core.logging_config import add_log_context
from agriterra.core.sampling.planner import SamplingPlanner
from agriterra.core.suitability.crops import assess_crop_suitability
from agriterra.core.suitability.recommendations import generate_recommendations
from agriterra.core.suitability.roi import calculate_roi
from agriterra.core.surface.raster import rasterize
from agriterra.core.surface.tin import build_tin
from agriterra.core.terrain.analyzer import TerrainAnalyzer
from agriterra.models.suitability import ElevationRange, SuitabilityReport
from agriterra.utils.logging import PerformanceTimer
from agriterra.utils.version import get_version

logger = logging.getLogger(__name__)

ConfigLike = Union[AnalysisConfig, Mapping[str, Any], None]


class TerrainSuitabilityEngine:
    """
    Assess the agricultural suitability of a polygon.

    A single engine can run any number of analyses; every per-analysis
    value lives inside the ``analyze_area`` call.

    Usage:
        async with OpenMeteoElevationClient() as provider:
            engine = TerrainSuitabilityEngine(provider)
            report = await engine.analyze_area(polygon)
    """

    def __init__(
        self,
        provider: ElevationProvider,
        config: ConfigLike = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            provider: Source of point elevations
            config: AnalysisConfig or a plain options mapping (snake_case or
                camelCase keys); defaults when omitted

        Raises:
            ConfigurationError: If an option is unknown or out of range
        """
        self.provider = provider
        if isinstance(config, AnalysisConfig):
            self.config = config
        else:
            self.config = AnalysisConfig.from_options(dict(config) if config else None)
        self.validator = GeometryValidator()

    async def analyze_area(
        self,
        geojson: Any,
        cancel: Optional[CancelSignal] = None,
    ) -> SuitabilityReport:
        """
        Run the full analysis for one polygon.

        Args:
            geojson: GeoJSON Polygon or MultiPolygon, or a Feature wrapping one
            cancel: Optional signal exposing ``is_set()``

        Returns:
            SuitabilityReport

        Raises:
            InvalidGeometryError: If the polygon is malformed
            ProviderError: If no point of a batch resolves on any attempt
            InsufficientDataError: If fewer than two points get elevations
            DegenerateSurfaceError: If no triangle can be formed
            AnalysisCancelledError: If cancellation is observed
            InternalInvariantError: If a post-condition is violated
        """
        analysis_id = str(uuid.uuid4())
        stages: Dict[str, float] = {}
        started = time.perf_counter()

        with add_log_context(analysis_id=analysis_id):
            logger.info(f"Starting terrain suitability analysis {analysis_id}")
            try:
                check_cancelled(cancel, "validation")
                with PerformanceTimer("validation") as timer:
                    area = self.validator.validate(geojson)
                stages["validation"] = timer.duration_ms

                check_cancelled(cancel, "sampling")
                with PerformanceTimer("sampling") as timer:
                    grid = SamplingPlanner(self.config).plan(area)
                stages["sampling"] = timer.duration_ms

                enricher = ElevationEnricher(self.provider, self.config)
                with PerformanceTimer("enrichment", log_level=logging.INFO) as timer:
                    points = await enricher.enrich(grid, cancel)
                stages["enrichment"] = timer.duration_ms

                check_cancelled(cancel, "surface")
                with PerformanceTimer("surface") as timer:
                    tin = build_tin(points)
                    raster = rasterize(tin, self.config.raster_target_cells)
                stages["surface"] = timer.duration_ms

                check_cancelled(cancel, "terrain")
                with PerformanceTimer("terrain") as timer:
                    slope_stats, terrain = TerrainAnalyzer(self.config).analyze(
                        area, tin, raster, cancel
                    )
                stages["terrain"] = timer.duration_ms

                check_cancelled(cancel, "suitability")
                with PerformanceTimer("suitability") as timer:
                    elevations = np.array([p.elevation for p in points], dtype=float)
                    elevation_range = ElevationRange(
                        min=float(elevations.min()),
                        max=float(elevations.max()),
                        mean=float(elevations.mean()),
                        median=float(np.median(elevations)),
                    )
                    crops = assess_crop_suitability(slope_stats, terrain, elevation_range.mean)
                    roi = calculate_roi(area.area_sqm, slope_stats, terrain)
                    recommendations = generate_recommendations(crops, roi)
                stages["suitability"] = timer.duration_ms

            except AgriterraException as e:
                logger.error(f"Analysis {analysis_id} failed: {e}")
                raise

            performance = {
                "engine_version": get_version(),
                "processing_time_ms": (time.perf_counter() - started) * 1000,
                "stages_ms": stages,
                "points": {
                    "sampled": len(grid),
                    "enriched": len(points),
                    "dropped": enricher.stats.dropped,
                    "chunks": grid.chunk_count,
                    "centroid_added": grid.centroid_added,
                },
                "enrichment": enricher.stats.to_dict(),
                "surface": {
                    "triangles": len(tin.triangles),
                    "raster_size": raster.size,
                    "cell_size_m": raster.cell_size_m,
                },
            }

            logger.info(
                f"Analysis {analysis_id} completed in "
                f"{performance['processing_time_ms']:.1f}ms"
            )

        return SuitabilityReport(
            total_area=area.area_sqm,
            elevation_range=elevation_range,
            slope=slope_stats,
            terrain_analysis=terrain,
            crop_suitability=crops,
            roi_analysis=roi,
            recommendations=recommendations,
            performance=performance,
            analysis_id=analysis_id,
        )


def analyze_area(
    geojson: Any,
    provider: ElevationProvider,
    config: ConfigLike = None,
) -> SuitabilityReport:
    """
    Synchronous wrapper around ``TerrainSuitabilityEngine.analyze_area``.

    Must not be called from inside a running event loop.

    Args:
        geojson: GeoJSON Polygon or MultiPolygon, or a Feature wrapping one
        provider: Source of point elevations
        config: AnalysisConfig or a plain options mapping

    Returns:
        SuitabilityReport
    """
    engine = TerrainSuitabilityEngine(provider, config)
    return asyncio.run(engine.analyze_area(geojson))
