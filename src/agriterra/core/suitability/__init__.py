"""
Crop suitability, ROI and recommendations.
"""

from agriterra.core.suitability.crops import (
    CROP_REQUIREMENTS,
    CropRequirements,
    assess_crop,
    assess_crop_suitability,
    classify_suitability,
    elevation_suitability,
    generate_zones,
    identify_limitations,
    slope_suitability,
)
from agriterra.core.suitability.recommendations import generate_recommendations
from agriterra.core.suitability.roi import (
    assess_maintenance,
    assess_risk_factors,
    calculate_roi,
    calculate_sustainability,
    classify_productivity,
    estimate_development_costs,
    estimate_productivity,
)

__all__ = [
    "CROP_REQUIREMENTS",
    "CropRequirements",
    "assess_crop",
    "assess_crop_suitability",
    "assess_maintenance",
    "assess_risk_factors",
    "calculate_roi",
    "calculate_sustainability",
    "classify_productivity",
    "classify_suitability",
    "elevation_suitability",
    "estimate_development_costs",
    "estimate_productivity",
    "generate_recommendations",
    "generate_zones",
    "identify_limitations",
    "slope_suitability",
]
