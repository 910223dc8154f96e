#!/usr/bin/env python3
"""
Example: Terrain Suitability Analysis

This script demonstrates how to:
1. Fetch elevations for a field from the Open-Meteo elevation API
2. Run the full terrain suitability pipeline
3. Display slope, terrain, crop and ROI results

Run:
    python examples/terrain_suitability_example.py
"""

import asyncio
import json
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from agriterra.core.analysis.engine import TerrainSuitabilityEngine
from agriterra.core.config import AnalysisConfig
from agriterra.core.errors import AgriterraException
from agriterra.core.logging_config import setup_logging
from agriterra.integrations.open_meteo import OpenMeteoElevationClient

# Roughly 20 ha of farmland near Davis, CA
FIELD = {
    "type": "Polygon",
    "coordinates": [
        [
            [-121.7700, 38.5400],
            [-121.7646, 38.5400],
            [-121.7646, 38.5440],
            [-121.7700, 38.5440],
            [-121.7700, 38.5400],
        ]
    ],
}


async def analyze_field_example():
    """Example: Analyze a single field."""
    print("=" * 60)
    print("Terrain Suitability Analysis Example")
    print("=" * 60)

    config = AnalysisConfig(grid_spacing_meters=50, request_delay_ms=250)

    async with OpenMeteoElevationClient() as provider:
        engine = TerrainSuitabilityEngine(provider, config)
        report = await engine.analyze_area(FIELD)

    print(f"\nArea: {report.total_area / 10_000:.2f} ha")
    elevation = report.elevation_range
    print(f"Elevation: {elevation.min:.1f} - {elevation.max:.1f} m (mean {elevation.mean:.1f} m)")

    print(f"\n{'SLOPE':^60}")
    print("-" * 60)
    print(f"Mean: {report.slope.mean:.2f} deg")
    print(f"Median: {report.slope.median:.2f} deg")
    print(f"Dominant aspect: {report.slope.aspects.dominant}")
    for slope_class, summary in report.slope.distribution.items():
        print(f"  {slope_class.value:<20} {summary.percentage:6.1f}%")

    terrain = report.terrain_analysis
    print(f"\n{'TERRAIN':^60}")
    print("-" * 60)
    print(f"Drainage pattern: {terrain.drainage.pattern.value}")
    print(f"Erosion risk: {terrain.erosion_risk.category} ({terrain.erosion_risk.score:.2f})")
    print(f"Solar exposure: {terrain.solar_exposure.category} ({terrain.solar_exposure.score:.2f})")

    print(f"\n{'CROP SUITABILITY':^60}")
    print("-" * 60)
    for crop, assessment in report.crop_suitability.scores.items():
        label = assessment.classification.suitability_class.value
        print(f"  {crop.value:<12} {assessment.score:.2f}  {label}")

    roi = report.roi_analysis
    print(f"\n{'ROI':^60}")
    print("-" * 60)
    print(f"Development cost: ${roi.development_costs.total_cost:,.0f}")
    print(f"Per hectare: ${roi.development_costs.per_hectare:,.0f}")
    print(f"Sustainability score: {roi.sustainability_score:.2f}")

    print(f"\n{'RECOMMENDATIONS':^60}")
    print("-" * 60)
    for block in report.recommendations:
        print(f"{block.category}:")
        for suggestion in block.suggestions:
            print(f"  - {json.dumps(suggestion)}")

    print(f"\nProcessing time: {report.performance['processing_time_ms']:.0f} ms")


async def main():
    """Run all examples."""
    setup_logging(log_level="INFO")
    try:
        await analyze_field_example()
    except AgriterraException as e:
        print(f"\nAnalysis failed: {e}")
        for suggestion in e.suggestions:
            print(f"  - {suggestion}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
