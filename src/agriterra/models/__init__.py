"""
Data models and schemas.
"""

from .elevation import (
    MAX_ELEVATION,
    MIN_ELEVATION,
    ElevationDataSource,
    ElevationFailure,
    ElevationPoint,
    ElevationResult,
)
from .geometry import ValidatedArea
from .sampling import PointGrid, SamplePoint
from .suitability import (
    CropAssessment,
    CropFactors,
    CropSuitability,
    CropType,
    DevelopmentCosts,
    ElevationRange,
    Limitation,
    MaintenanceFactors,
    MaintenanceRequirement,
    ProductivityClassification,
    ProductivityPotential,
    Recommendation,
    RiskFactors,
    ROIAnalysis,
    SuitabilityClass,
    SuitabilityClassification,
    SuitabilityReport,
    SuitabilityZone,
)
from .surface import TIN, FlowGrid, RasterGrid, TINTriangle
from .terrain import (
    AspectFractions,
    ConfidenceInterval,
    DrainageAnalysis,
    DrainagePattern,
    ErosionRisk,
    SlopeClass,
    SlopeClassSummary,
    SlopeStats,
    SolarExposure,
    TerrainAnalysis,
    TerrainComplexity,
    WaterRetention,
)

__all__ = [
    # Elevation
    "MAX_ELEVATION",
    "MIN_ELEVATION",
    "ElevationDataSource",
    "ElevationFailure",
    "ElevationPoint",
    "ElevationResult",
    # Geometry and sampling
    "ValidatedArea",
    "PointGrid",
    "SamplePoint",
    # Surface
    "TIN",
    "TINTriangle",
    "RasterGrid",
    "FlowGrid",
    # Terrain
    "AspectFractions",
    "ConfidenceInterval",
    "DrainageAnalysis",
    "DrainagePattern",
    "ErosionRisk",
    "SlopeClass",
    "SlopeClassSummary",
    "SlopeStats",
    "SolarExposure",
    "TerrainAnalysis",
    "TerrainComplexity",
    "WaterRetention",
    # Suitability
    "CropAssessment",
    "CropFactors",
    "CropSuitability",
    "CropType",
    "DevelopmentCosts",
    "ElevationRange",
    "Limitation",
    "MaintenanceFactors",
    "MaintenanceRequirement",
    "ProductivityClassification",
    "ProductivityPotential",
    "Recommendation",
    "RiskFactors",
    "ROIAnalysis",
    "SuitabilityClass",
    "SuitabilityClassification",
    "SuitabilityReport",
    "SuitabilityZone",
]
