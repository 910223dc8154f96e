"""
Crop suitability scoring with FAO land suitability classes.

Each crop score is the product of four factors:

    slope_suitability * elevation_suitability
        * (1 - 0.5 * waterlogging_risk) * (1 - 0.3 * erosion_score)

clamped to [0, 1] and mapped onto the FAO classes S1, S2, S3, N1 and N2.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from agriterra.models.suitability import (
    CropAssessment,
    CropFactors,
    CropSuitability,
    CropType,
    Limitation,
    SuitabilityClass,
    SuitabilityClassification,
    SuitabilityZone,
)
from agriterra.models.terrain import SlopeStats, TerrainAnalysis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CropRequirements:
    """Slope tolerance (degrees) and elevation band (meters) of a crop."""

    slope_optimal: float
    slope_max: float
    elevation_min: float
    elevation_max: float


CROP_REQUIREMENTS: Dict[CropType, CropRequirements] = {
    CropType.GRAINS: CropRequirements(5.0, 8.0, 0.0, 2500.0),
    CropType.VEGETABLES: CropRequirements(3.0, 5.0, 0.0, 2000.0),
    CropType.ORCHARDS: CropRequirements(15.0, 30.0, 0.0, 1800.0),
    CropType.ROOT_CROPS: CropRequirements(2.0, 5.0, 0.0, 1500.0),
}

# (class, lower threshold, name, confidence), highest class first
SUITABILITY_CLASSES: List[Tuple[SuitabilityClass, float, str, float]] = [
    (SuitabilityClass.S1, 0.85, "Highly Suitable", 0.95),
    (SuitabilityClass.S2, 0.70, "Moderately Suitable", 0.85),
    (SuitabilityClass.S3, 0.50, "Marginally Suitable", 0.75),
    (SuitabilityClass.N1, 0.30, "Currently Not Suitable", 0.70),
    (SuitabilityClass.N2, 0.0, "Permanently Not Suitable", 0.90),
]

# Severity is measured as the shortfall from the S1 threshold
TOP_CLASS_THRESHOLD = 0.85

CLASS_RECOMMENDATIONS: Dict[SuitabilityClass, List[str]] = {
    SuitabilityClass.S1: ["Maintain current land management practices"],
    SuitabilityClass.S2: [
        "Implement targeted improvements for specific limitations",
        "Regular monitoring of soil conditions recommended",
    ],
    SuitabilityClass.S3: [
        "Significant improvements required for optimal production",
        "Conduct detailed soil analysis",
        "Consider alternative crop selections",
    ],
    SuitabilityClass.N1: [
        "Major land improvements required",
        "Evaluate cost-benefit of land development",
        "Consider temporary alternative land use",
    ],
    SuitabilityClass.N2: [
        "Land not recommended for agricultural use",
        "Consider permanent alternative land use options",
    ],
}

OPTIMAL_ZONE_THRESHOLD = 0.7
SUITABLE_ZONE_THRESHOLD = 0.4

STEEP_SLOPE_LIMIT = 15.0
WATERLOGGING_LIMIT = 0.5


def slope_suitability(mean_slope: float, requirements: CropRequirements) -> float:
    """
    Slope suitability in [0, 1].

    1 up to the optimal slope, falling linearly to 0 at the maximum slope.
    """
    if mean_slope <= requirements.slope_optimal:
        return 1.0
    if mean_slope <= requirements.slope_max:
        span = requirements.slope_max - requirements.slope_optimal
        return 1.0 - (mean_slope - requirements.slope_optimal) / span
    return 0.0


def elevation_suitability(elevation: float, requirements: CropRequirements) -> float:
    """
    Elevation suitability in [0, 1].

    Peaks at the middle of the crop's elevation band and reaches 0 at its
    edges; elevations outside the band score 0.
    """
    if elevation < requirements.elevation_min or elevation > requirements.elevation_max:
        return 0.0
    midpoint = (requirements.elevation_min + requirements.elevation_max) / 2.0
    half_range = (requirements.elevation_max - requirements.elevation_min) / 2.0
    return 1.0 - abs(elevation - midpoint) / half_range


def classify_suitability(score: float) -> SuitabilityClassification:
    """
    Map a score onto an FAO class with limitations and recommendations.

    Args:
        score: Suitability score in [0, 1]

    Returns:
        SuitabilityClassification

    Raises:
        ValueError: If the score is outside [0, 1]
    """
    if not 0.0 <= score <= 1.0:
        raise ValueError(f"Suitability score must be between 0 and 1, got {score}")

    for suitability_class, threshold, name, confidence in SUITABILITY_CLASSES:
        if score >= threshold:
            break

    severity = max(0.0, (TOP_CLASS_THRESHOLD - score) / TOP_CLASS_THRESHOLD)
    recommendations = list(CLASS_RECOMMENDATIONS[suitability_class])
    if suitability_class is SuitabilityClass.S1 and score < 0.95:
        recommendations.append("Consider minor optimizations for maximum yield")

    return SuitabilityClassification(
        suitability_class=suitability_class,
        name=name,
        confidence=confidence,
        severity=severity,
        impact="Significant" if severity > 0.5 else "Moderate",
        improvement_potential=min(1.0, (1.0 - severity) * 1.5),
        recommendations=recommendations,
    )


def _explain(crop: CropType, score: float, classification: SuitabilityClassification, factors: CropFactors) -> str:
    named = {
        "slope": factors.slope_suitability,
        "elevation": factors.elevation_suitability,
        "drainage": factors.drainage_adjustment,
        "erosion": factors.erosion_adjustment,
    }
    weakest = min(named, key=lambda key: named[key])
    return (
        f"{crop.value} scores {score:.2f} ({classification.suitability_class.value}, "
        f"{classification.name}); slope {factors.slope_suitability:.2f}, "
        f"elevation {factors.elevation_suitability:.2f}, "
        f"drainage {factors.drainage_adjustment:.2f}, "
        f"erosion {factors.erosion_adjustment:.2f}; "
        f"most limiting factor: {weakest}"
    )


def assess_crop(
    crop: CropType,
    slope_stats: SlopeStats,
    terrain: TerrainAnalysis,
    field_elevation: float,
) -> CropAssessment:
    """
    Score one crop group.

    Args:
        crop: Crop group
        slope_stats: Slope statistics of the area
        terrain: Terrain analysis of the area
        field_elevation: Mean sample elevation in meters

    Returns:
        CropAssessment
    """
    requirements = CROP_REQUIREMENTS[crop]
    factors = CropFactors(
        slope_suitability=slope_suitability(slope_stats.mean, requirements),
        elevation_suitability=elevation_suitability(field_elevation, requirements),
        drainage_adjustment=1.0 - terrain.drainage.waterlogging_risk * 0.5,
        erosion_adjustment=1.0 - terrain.erosion_risk.score * 0.3,
    )

    raw = (
        factors.slope_suitability
        * factors.elevation_suitability
        * factors.drainage_adjustment
        * factors.erosion_adjustment
    )
    score = min(1.0, max(0.0, raw))
    classification = classify_suitability(score)

    return CropAssessment(
        crop=crop,
        score=score,
        classification=classification,
        factors=factors,
        explanation=_explain(crop, score, classification, factors),
    )


def generate_zones(scores: Dict[CropType, CropAssessment]) -> List[SuitabilityZone]:
    """Tag crops scoring above 0.7 as Optimal and above 0.4 as Suitable."""
    zones = []
    for crop, assessment in scores.items():
        if assessment.score > OPTIMAL_ZONE_THRESHOLD:
            zones.append(SuitabilityZone("Optimal", crop, assessment.score))
        elif assessment.score > SUITABLE_ZONE_THRESHOLD:
            zones.append(SuitabilityZone("Suitable", crop, assessment.score))
    return zones


def identify_limitations(slope_stats: SlopeStats, terrain: TerrainAnalysis) -> List[Limitation]:
    """Terrain limitations shared by every crop."""
    limitations = []
    if slope_stats.mean > STEEP_SLOPE_LIMIT:
        limitations.append(
            Limitation("Slope", "Steep slopes may require terracing or other conservation measures")
        )
    if terrain.drainage.waterlogging_risk > WATERLOGGING_LIMIT:
        limitations.append(
            Limitation("Drainage", "Poor drainage may require additional infrastructure")
        )
    return limitations


def assess_crop_suitability(
    slope_stats: SlopeStats,
    terrain: TerrainAnalysis,
    field_elevation: float,
) -> CropSuitability:
    """
    Score every crop group and derive zonation and limitations.

    Args:
        slope_stats: Slope statistics of the area
        terrain: Terrain analysis of the area
        field_elevation: Mean sample elevation in meters

    Returns:
        CropSuitability with crops in CropType order
    """
    scores = {crop: assess_crop(crop, slope_stats, terrain, field_elevation) for crop in CropType}

    logger.debug(
        "Crop scores: " + ", ".join(f"{crop.value}={a.score:.3f}" for crop, a in scores.items())
    )

    return CropSuitability(
        scores=scores,
        zonation=generate_zones(scores),
        limitations=identify_limitations(slope_stats, terrain),
    )
