"""
End-to-end terrain suitability analysis.
"""

from agriterra.core.analysis.engine import TerrainSuitabilityEngine, analyze_area

__all__ = [
    "TerrainSuitabilityEngine",
    "analyze_area",
]
