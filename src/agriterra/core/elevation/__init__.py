"""
Elevation enrichment through pluggable providers.
"""

from agriterra.core.elevation.enricher import (
    ElevationEnricher,
    EnrichmentStats,
    batch_size_for,
    validate_elevation,
)
from agriterra.core.elevation.provider import ElevationProvider

__all__ = [
    "ElevationEnricher",
    "ElevationProvider",
    "EnrichmentStats",
    "batch_size_for",
    "validate_elevation",
]
