"""
Crop suitability, ROI and report models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from agriterra.models.terrain import SlopeStats, TerrainAnalysis


class CropType(str, Enum):
    """Crop groups scored by the suitability model."""

    GRAINS = "GRAINS"
    VEGETABLES = "VEGETABLES"
    ORCHARDS = "ORCHARDS"
    ROOT_CROPS = "ROOT_CROPS"


class SuitabilityClass(str, Enum):
    """FAO land suitability classes."""

    S1 = "S1"  # Highly suitable
    S2 = "S2"  # Moderately suitable
    S3 = "S3"  # Marginally suitable
    N1 = "N1"  # Currently not suitable
    N2 = "N2"  # Permanently not suitable


@dataclass(frozen=True)
class SuitabilityClassification:
    """
    FAO class assigned to a crop score.

    Attributes:
        suitability_class: FAO class code
        name: Human-readable class name
        confidence: Confidence attached to the class
        severity: Relative shortfall from the S1 threshold, in [0, 1]
        impact: "Significant" or "Moderate"
        improvement_potential: Expected headroom in [0, 1]
        recommendations: Class-specific management advice
    """

    suitability_class: SuitabilityClass
    name: str
    confidence: float
    severity: float
    impact: str
    improvement_potential: float
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "class": self.suitability_class.value,
            "name": self.name,
            "confidence": self.confidence,
            "limitations": {
                "severity": self.severity,
                "impact": self.impact,
                "improvement_potential": self.improvement_potential,
            },
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class CropFactors:
    """The four multiplicative factors behind a crop score."""

    slope_suitability: float
    elevation_suitability: float
    drainage_adjustment: float
    erosion_adjustment: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "slope_suitability": self.slope_suitability,
            "elevation_suitability": self.elevation_suitability,
            "drainage_adjustment": self.drainage_adjustment,
            "erosion_adjustment": self.erosion_adjustment,
        }


@dataclass(frozen=True)
class CropAssessment:
    """Suitability of one crop group."""

    crop: CropType
    score: float
    classification: SuitabilityClassification
    factors: CropFactors
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "crop": self.crop.value,
            "score": self.score,
            "category": self.classification.to_dict(),
            "factors": self.factors.to_dict(),
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class SuitabilityZone:
    """Crop tagged as an Optimal or Suitable zone."""

    zone_type: str
    crop: CropType
    score: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.zone_type, "crop": self.crop.value, "score": self.score}


@dataclass(frozen=True)
class Limitation:
    """Terrain limitation affecting all crops."""

    limitation_type: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.limitation_type, "description": self.description}


@dataclass(frozen=True)
class CropSuitability:
    """Per-crop scores with zonation and limitations."""

    scores: Dict[CropType, CropAssessment]
    zonation: List[SuitabilityZone]
    limitations: List[Limitation]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "scores": {crop.value: a.to_dict() for crop, a in self.scores.items()},
            "zonation": [z.to_dict() for z in self.zonation],
            "limitations": [lim.to_dict() for lim in self.limitations],
        }


@dataclass(frozen=True)
class DevelopmentCosts:
    """Estimated land development cost in USD."""

    total_cost: float
    per_hectare: float
    area_hectares: float
    slope_multiplier: float
    complexity_multiplier: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_cost": self.total_cost,
            "per_hectare": self.per_hectare,
            "area_hectares": self.area_hectares,
            "factors": {
                "slope_multiplier": self.slope_multiplier,
                "complexity_multiplier": self.complexity_multiplier,
            },
        }


@dataclass(frozen=True)
class MaintenanceRequirement:
    """Recurring maintenance task."""

    requirement_type: str
    frequency: str
    priority: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.requirement_type,
            "frequency": self.frequency,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class MaintenanceFactors:
    """
    Maintenance requirements and annual cost estimate.

    ``scores`` only holds entries for requirements that were triggered.
    """

    requirements: List[MaintenanceRequirement]
    scores: Dict[str, float]
    annual_estimate: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "requirements": [r.to_dict() for r in self.requirements],
            "scores": dict(self.scores),
            "annual_estimate": self.annual_estimate,
        }


@dataclass(frozen=True)
class ProductivityClassification:
    """Productivity class with management guidance."""

    code: str
    name: str
    confidence: float
    yield_potential: str
    management_level: str
    improvement_potential: Dict[str, Any]
    constraints: List[Dict[str, str]]
    recommendations: List[Dict[str, str]]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "class": self.code,
            "name": self.name,
            "confidence": self.confidence,
            "yield_potential": self.yield_potential,
            "management_level": self.management_level,
            "improvement_potential": dict(self.improvement_potential),
            "constraints": [dict(c) for c in self.constraints],
            "recommendations": [dict(r) for r in self.recommendations],
        }


@dataclass(frozen=True)
class ProductivityPotential:
    """Terrain-driven productivity potential."""

    score: float
    classification: ProductivityClassification
    drainage_adjustment: float
    erosion_adjustment: float
    solar_adjustment: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "category": self.classification.to_dict(),
            "adjustments": {
                "drainage": self.drainage_adjustment,
                "erosion": self.erosion_adjustment,
                "solar": self.solar_adjustment,
            },
        }


@dataclass(frozen=True)
class RiskFactors:
    """Risk indicators carried into the ROI block."""

    erosion_risk: float
    erosion_category: str
    waterlogging_risk: float
    solar_risk: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "erosion_risk": {"score": self.erosion_risk, "category": self.erosion_category},
            "waterlogging_risk": self.waterlogging_risk,
            "solar_risk": self.solar_risk,
        }


@dataclass(frozen=True)
class ROIAnalysis:
    """Return-on-investment indicators."""

    development_costs: DevelopmentCosts
    maintenance_factors: MaintenanceFactors
    productivity_potential: ProductivityPotential
    risk_factors: RiskFactors
    sustainability_score: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "development_costs": self.development_costs.to_dict(),
            "maintenance_factors": self.maintenance_factors.to_dict(),
            "productivity_potential": self.productivity_potential.to_dict(),
            "risk_factors": self.risk_factors.to_dict(),
            "sustainability_score": self.sustainability_score,
        }


@dataclass(frozen=True)
class Recommendation:
    """Recommendation block with structured suggestions."""

    category: str
    suggestions: List[Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "category": self.category,
            "suggestions": [dict(s) for s in self.suggestions],
        }


@dataclass(frozen=True)
class ElevationRange:
    """Summary of enriched sample elevations in meters."""

    min: float
    max: float
    mean: float
    median: float

    @property
    def relief(self) -> float:
        """Difference between highest and lowest sample."""
        return self.max - self.min

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "median": self.median,
        }


@dataclass(frozen=True)
class SuitabilityReport:
    """
    Aggregate result of one terrain suitability analysis.

    Attributes:
        total_area: Polygon area in square meters
        elevation_range: Sample elevation summary
        slope: Slope and aspect statistics
        terrain_analysis: Drainage, erosion, retention, solar and complexity
        crop_suitability: Per-crop scores, zonation and limitations
        roi_analysis: Development, maintenance, productivity and risk
        recommendations: Crop selection and development advice
        performance: Stage timings and point counts
        analysis_id: Identifier attached to the run's log records
    """

    total_area: float
    elevation_range: ElevationRange
    slope: SlopeStats
    terrain_analysis: TerrainAnalysis
    crop_suitability: CropSuitability
    roi_analysis: ROIAnalysis
    recommendations: List[Recommendation]
    performance: Dict[str, Any] = field(default_factory=dict)
    analysis_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "analysis_id": self.analysis_id,
            "area_characteristics": {
                "total_area": self.total_area,
                "elevation_range": self.elevation_range.to_dict(),
                "slope": self.slope.to_dict(),
            },
            "terrain_analysis": self.terrain_analysis.to_dict(),
            "crop_suitability": self.crop_suitability.to_dict(),
            "roi_analysis": self.roi_analysis.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "performance": dict(self.performance),
        }
