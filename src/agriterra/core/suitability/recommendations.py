"""
Land use recommendations from crop suitability and ROI.
"""

from typing import List

from agriterra.models.suitability import CropSuitability, Recommendation, ROIAnalysis

CROP_SELECTION_THRESHOLD = 0.6
PHASED_DEVELOPMENT_COST = 7000.0  # USD per hectare


def generate_recommendations(
    crop_suitability: CropSuitability, roi: ROIAnalysis
) -> List[Recommendation]:
    """
    Crop selection and development strategy recommendations.

    Crops scoring above 0.6 are suggested best first. A per-hectare
    development cost above 7000 USD adds a phased development strategy.

    Args:
        crop_suitability: Per-crop scores
        roi: ROI indicators

    Returns:
        Recommendation blocks, possibly empty
    """
    recommendations = []

    best = sorted(
        (a for a in crop_suitability.scores.values() if a.score > CROP_SELECTION_THRESHOLD),
        key=lambda a: a.score,
        reverse=True,
    )
    if best:
        recommendations.append(
            Recommendation(
                category="Crop Selection",
                suggestions=[
                    {
                        "crop": a.crop.value,
                        "score": a.score,
                        "rationale": (
                            "Suitable based on terrain analysis with "
                            f"{a.score * 100:.1f}% compatibility"
                        ),
                    }
                    for a in best
                ],
            )
        )

    if roi.development_costs.per_hectare > PHASED_DEVELOPMENT_COST:
        recommendations.append(
            Recommendation(
                category="Development Strategy",
                suggestions=[
                    {
                        "type": "Phased Development",
                        "rationale": "High development costs suggest a phased approach to optimize ROI",
                    }
                ],
            )
        )

    return recommendations
