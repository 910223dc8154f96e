"""
Return-on-investment indicators derived from terrain.

Costs are in USD. Development cost scales with area, mean slope and slope
variability; maintenance and productivity follow from erosion, drainage and
solar exposure.
"""

import logging
from typing import Any, Dict, List, Tuple

from agriterra.models.suitability import (
    DevelopmentCosts,
    MaintenanceFactors,
    MaintenanceRequirement,
    ProductivityClassification,
    ProductivityPotential,
    RiskFactors,
    ROIAnalysis,
)
from agriterra.models.terrain import SlopeStats, TerrainAnalysis

logger = logging.getLogger(__name__)

BASE_DEVELOPMENT_COST = 5000.0  # USD per hectare
BASE_MAINTENANCE_COST = 1000.0  # USD per year

MAINTENANCE_TRIGGER = 0.3

# (code, threshold, name, confidence, yield potential, management level)
PRODUCTIVITY_CLASSES: List[Tuple[str, float, str, float, str, str]] = [
    ("EXCEPTIONAL", 0.85, "Exceptional Productivity", 0.95, "> 90%", "Minimal"),
    ("HIGH", 0.70, "High Productivity", 0.85, "75-90%", "Low"),
    ("MODERATE", 0.50, "Moderate Productivity", 0.75, "50-75%", "Medium"),
    ("LOW", 0.30, "Low Productivity", 0.65, "25-50%", "High"),
    ("MARGINAL", 0.0, "Marginal Productivity", 0.80, "< 25%", "Intensive"),
]

PRODUCTIVITY_RECOMMENDATIONS: Dict[str, Dict[str, str]] = {
    "EXCEPTIONAL": {
        "focus": "Maintenance",
        "priority": "High",
        "action": "Maintain current management practices",
        "timeframe": "Ongoing",
    },
    "HIGH": {
        "focus": "Optimization",
        "priority": "Medium",
        "action": "Fine-tune management practices",
        "timeframe": "Quarterly",
    },
    "MODERATE": {
        "focus": "Enhancement",
        "priority": "High",
        "action": "Implement targeted improvements",
        "timeframe": "Monthly",
    },
    "LOW": {
        "focus": "Rehabilitation",
        "priority": "Urgent",
        "action": "Major management changes required",
        "timeframe": "Immediate",
    },
    "MARGINAL": {
        "focus": "Evaluation",
        "priority": "Critical",
        "action": "Reassess land use options",
        "timeframe": "Immediate",
    },
}

# Constraints are measured against the top productivity class
TOP_PRODUCTIVITY_THRESHOLD = 0.85


def _clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, value))


def estimate_development_costs(area_sqm: float, slope_stats: SlopeStats) -> DevelopmentCosts:
    """
    Land development cost estimate.

    Args:
        area_sqm: Polygon area in square meters
        slope_stats: Slope statistics

    Returns:
        DevelopmentCosts
    """
    hectares = area_sqm / 10000.0
    slope_multiplier = 1.0 + slope_stats.mean / 10.0
    complexity_multiplier = 1.0 + slope_stats.std_dev / 15.0
    total = BASE_DEVELOPMENT_COST * hectares * slope_multiplier * complexity_multiplier

    return DevelopmentCosts(
        total_cost=total,
        per_hectare=total / hectares if hectares > 0 else 0.0,
        area_hectares=hectares,
        slope_multiplier=slope_multiplier,
        complexity_multiplier=complexity_multiplier,
    )


def assess_maintenance(terrain: TerrainAnalysis) -> MaintenanceFactors:
    """
    Recurring maintenance requirements.

    Only requirements whose trigger exceeds 0.3 contribute to the annual
    estimate.

    Args:
        terrain: Terrain analysis

    Returns:
        MaintenanceFactors
    """
    requirements = []
    scores: Dict[str, float] = {}

    if terrain.erosion_risk.score > MAINTENANCE_TRIGGER:
        requirements.append(MaintenanceRequirement("Erosion Control", "Quarterly", "High"))
        scores["erosion_control"] = terrain.erosion_risk.score

    if terrain.drainage.waterlogging_risk > MAINTENANCE_TRIGGER:
        requirements.append(MaintenanceRequirement("Drainage Maintenance", "Bi-annual", "Medium"))
        scores["drainage_maintenance"] = terrain.drainage.waterlogging_risk

    multiplier = (
        1.0
        + scores.get("erosion_control", 0.0) * 0.5
        + scores.get("drainage_maintenance", 0.0) * 0.3
    )

    return MaintenanceFactors(
        requirements=requirements,
        scores=scores,
        annual_estimate=BASE_MAINTENANCE_COST * multiplier,
    )


def _improvement_potential(score: float) -> Dict[str, Any]:
    gain = max(0.0, 1.0 - score)
    return {
        "potential_gain": round(gain, 2),
        "feasibility": "High",
        "timeframe": "Long-term" if gain > 0.3 else "Short-term",
        "roi": "High" if gain > 0.5 else "Moderate",
    }


def _constraints(score: float) -> List[Dict[str, str]]:
    gap = TOP_PRODUCTIVITY_THRESHOLD - score
    constraints = []
    if gap > 0.3:
        constraints.append(
            {
                "type": "Structural",
                "severity": "High",
                "impact": "Significant yield reduction",
                "mitigation_complexity": "Complex",
            }
        )
    if gap > 0.1:
        constraints.append(
            {
                "type": "Management",
                "severity": "Moderate",
                "impact": "Reduced efficiency",
                "mitigation_complexity": "Moderate",
            }
        )
    return constraints


def classify_productivity(score: float) -> ProductivityClassification:
    """
    Productivity class with improvement potential, constraints and advice.

    Args:
        score: Productivity score; values above 1 classify as 1

    Returns:
        ProductivityClassification

    Raises:
        ValueError: If the score is negative
    """
    if score < 0.0:
        raise ValueError(f"Productivity score must be non-negative, got {score}")

    bounded = min(score, 1.0)
    for code, threshold, name, confidence, yield_potential, management in PRODUCTIVITY_CLASSES:
        if bounded >= threshold:
            break

    return ProductivityClassification(
        code=code,
        name=name,
        confidence=confidence,
        yield_potential=yield_potential,
        management_level=management,
        improvement_potential=_improvement_potential(bounded),
        constraints=_constraints(bounded),
        recommendations=[dict(PRODUCTIVITY_RECOMMENDATIONS[code])],
    )


def estimate_productivity(terrain: TerrainAnalysis) -> ProductivityPotential:
    """
    Productivity potential from drainage, erosion and solar exposure.

    Args:
        terrain: Terrain analysis

    Returns:
        ProductivityPotential
    """
    drainage = 1.0 - terrain.drainage.waterlogging_risk * 0.4
    erosion = 1.0 - terrain.erosion_risk.score * 0.3
    solar = 1.0 + terrain.solar_exposure.score * 0.2
    score = max(0.0, drainage * erosion * solar)

    return ProductivityPotential(
        score=score,
        classification=classify_productivity(score),
        drainage_adjustment=drainage,
        erosion_adjustment=erosion,
        solar_adjustment=solar,
    )


def assess_risk_factors(terrain: TerrainAnalysis) -> RiskFactors:
    """Risk indicators carried from the terrain analysis."""
    return RiskFactors(
        erosion_risk=terrain.erosion_risk.score,
        erosion_category=terrain.erosion_risk.category,
        waterlogging_risk=terrain.drainage.waterlogging_risk,
        solar_risk=1.0 - terrain.solar_exposure.score,
    )


def calculate_sustainability(terrain: TerrainAnalysis) -> float:
    """
    Sustainability score rounded to two decimals.

    Each adjustment is clamped to [0, 1] before combining and the product
    is capped at 1.
    """
    erosion = _clamp(1.0 - terrain.erosion_risk.score * 0.5)
    drainage = _clamp(1.0 - terrain.drainage.waterlogging_risk * 0.3)
    solar = _clamp(terrain.solar_exposure.score * 0.2)
    return round(_clamp(erosion * drainage * (1.0 + solar)), 2)


def calculate_roi(area_sqm: float, slope_stats: SlopeStats, terrain: TerrainAnalysis) -> ROIAnalysis:
    """
    Assemble every ROI indicator.

    Args:
        area_sqm: Polygon area in square meters
        slope_stats: Slope statistics
        terrain: Terrain analysis

    Returns:
        ROIAnalysis
    """
    roi = ROIAnalysis(
        development_costs=estimate_development_costs(area_sqm, slope_stats),
        maintenance_factors=assess_maintenance(terrain),
        productivity_potential=estimate_productivity(terrain),
        risk_factors=assess_risk_factors(terrain),
        sustainability_score=calculate_sustainability(terrain),
    )

    logger.debug(
        f"ROI: development {roi.development_costs.per_hectare:.0f} USD/ha, "
        f"productivity {roi.productivity_potential.classification.code}, "
        f"sustainability {roi.sustainability_score:.2f}"
    )
    return roi
