"""
Tests for crop suitability scoring and FAO classification.
"""

import pytest

from agriterra.core.suitability.crops import (
    CROP_REQUIREMENTS,
    assess_crop,
    assess_crop_suitability,
    classify_suitability,
    elevation_suitability,
    slope_suitability,
)
from agriterra.models.suitability import CropType, SuitabilityClass
from conftest import make_slope_stats, make_terrain


class TestFactors:
    """Tests for the slope and elevation factors."""

    @pytest.mark.parametrize(
        "slope, expected", [(0.1, 1.0), (5.0, 1.0), (6.5, 0.5), (8.0, 0.0), (12.0, 0.0)]
    )
    def test_slope_suitability_grains(self, slope: float, expected: float) -> None:
        """Test the linear fall-off between optimal and maximum slope."""
        assert slope_suitability(slope, CROP_REQUIREMENTS[CropType.GRAINS]) == pytest.approx(
            expected
        )

    @pytest.mark.parametrize(
        "elevation, expected",
        [(1250.0, 1.0), (500.0, 0.4), (0.0, 0.0), (2500.0, 0.0), (3000.0, 0.0), (-10.0, 0.0)],
    )
    def test_elevation_suitability_grains(self, elevation: float, expected: float) -> None:
        """Test the triangular elevation band peaking at its midpoint."""
        assert elevation_suitability(
            elevation, CROP_REQUIREMENTS[CropType.GRAINS]
        ) == pytest.approx(expected)


class TestClassifySuitability:
    """Tests for FAO class mapping."""

    @pytest.mark.parametrize(
        "score, expected",
        [
            (1.0, SuitabilityClass.S1),
            (0.85, SuitabilityClass.S1),
            (0.84, SuitabilityClass.S2),
            (0.7, SuitabilityClass.S2),
            (0.5, SuitabilityClass.S3),
            (0.3, SuitabilityClass.N1),
            (0.29, SuitabilityClass.N2),
            (0.0, SuitabilityClass.N2),
        ],
    )
    def test_thresholds(self, score: float, expected: SuitabilityClass) -> None:
        """Test class thresholds are inclusive lower bounds."""
        assert classify_suitability(score).suitability_class == expected

    @pytest.mark.parametrize("score", [-0.01, 1.01])
    def test_out_of_range(self, score: float) -> None:
        """Test scores outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            classify_suitability(score)

    def test_top_class_has_no_severity(self) -> None:
        """Test S1 scores carry no limitation severity."""
        result = classify_suitability(0.9)

        assert result.severity == 0.0
        assert result.impact == "Moderate"
        assert result.improvement_potential == 1.0
        assert "Consider minor optimizations for maximum yield" in result.recommendations

    def test_zero_score(self) -> None:
        """Test a zero score has full severity and no headroom."""
        result = classify_suitability(0.0)

        assert result.severity == 1.0
        assert result.impact == "Significant"
        assert result.improvement_potential == 0.0
        assert result.name == "Permanently Not Suitable"

    def test_severity_is_relative_shortfall(self) -> None:
        """Test severity measures the gap to the S1 threshold."""
        result = classify_suitability(0.51)
        assert result.severity == pytest.approx(0.4)
        assert result.impact == "Moderate"


class TestAssessCrop:
    """Tests for single-crop scoring."""

    def test_flat_field_at_500m(self) -> None:
        """Test flat terrain at 500 m is limited by elevation only."""
        assessment = assess_crop(CropType.GRAINS, make_slope_stats(), make_terrain(), 500.0)

        assert assessment.score == pytest.approx(0.4)
        assert assessment.factors.slope_suitability == 1.0
        assert assessment.classification.suitability_class == SuitabilityClass.N1
        assert "most limiting factor: elevation" in assessment.explanation

    def test_risk_adjustments(self) -> None:
        """Test waterlogging and erosion reduce the score multiplicatively."""
        terrain = make_terrain(waterlogging=0.6, erosion=0.5)
        assessment = assess_crop(CropType.GRAINS, make_slope_stats(), terrain, 1250.0)

        assert assessment.factors.drainage_adjustment == pytest.approx(0.7)
        assert assessment.factors.erosion_adjustment == pytest.approx(0.85)
        assert assessment.score == pytest.approx(0.595)

    def test_steep_terrain_scores_zero(self) -> None:
        """Test slopes beyond a crop's maximum give a zero score."""
        stats = make_slope_stats(mean=35.0, std_dev=5.0)

        for crop in (CropType.GRAINS, CropType.ORCHARDS):
            assessment = assess_crop(crop, stats, make_terrain(erosion=0.8), 500.0)
            assert assessment.score == 0.0
            assert assessment.classification.suitability_class == SuitabilityClass.N2


class TestAssessCropSuitability:
    """Tests for the full crop suitability block."""

    def test_all_crops_in_order(self) -> None:
        """Test every crop group is scored in declaration order."""
        result = assess_crop_suitability(make_slope_stats(), make_terrain(), 500.0)

        assert list(result.scores) == list(CropType)
        assert result.scores[CropType.VEGETABLES].score == pytest.approx(0.5)
        assert result.scores[CropType.ROOT_CROPS].score == pytest.approx(2 / 3)
        assert all(0.0 <= a.score <= 1.0 for a in result.scores.values())

    def test_zonation(self) -> None:
        """Test crops above 0.7 are Optimal and above 0.4 Suitable."""
        result = assess_crop_suitability(make_slope_stats(), make_terrain(), 1250.0)
        zones = {zone.crop: zone.zone_type for zone in result.zonation}

        assert zones == {
            CropType.GRAINS: "Optimal",
            CropType.VEGETABLES: "Optimal",
            CropType.ORCHARDS: "Suitable",
        }

    def test_limitations(self) -> None:
        """Test steep slopes and waterlogging are reported."""
        result = assess_crop_suitability(
            make_slope_stats(mean=20.0), make_terrain(waterlogging=0.6), 500.0
        )
        types = [lim.limitation_type for lim in result.limitations]
        assert types == ["Slope", "Drainage"]

    def test_no_limitations_on_gentle_terrain(self) -> None:
        """Test gentle, well-drained terrain has no limitations."""
        result = assess_crop_suitability(make_slope_stats(), make_terrain(), 500.0)
        assert result.limitations == []

    def test_to_dict(self) -> None:
        """Test serialization uses crop names as keys."""
        data = assess_crop_suitability(make_slope_stats(), make_terrain(), 500.0).to_dict()

        assert set(data["scores"]) == {"GRAINS", "VEGETABLES", "ORCHARDS", "ROOT_CROPS"}
        assert data["scores"]["GRAINS"]["category"]["class"] == "N1"


CLASS_RANK = {cls: rank for rank, cls in enumerate(reversed(list(SuitabilityClass)))}


def assert_non_decreasing(assessments: list) -> None:
    """Scores and FAO class ranks never fall along the sequence."""
    scores = [a.score for a in assessments]
    ranks = [CLASS_RANK[a.classification.suitability_class] for a in assessments]
    assert scores == sorted(scores)
    assert ranks == sorted(ranks)


@pytest.mark.parametrize("crop", list(CropType))
class TestScoreMonotonicity:
    """Improving one factor with the others fixed never lowers the score."""

    def test_decreasing_slope(self, crop: CropType) -> None:
        """Test gentler slopes score at least as well."""
        terrain = make_terrain(waterlogging=0.2, erosion=0.2)
        slopes = [40.0, 30.0, 20.0, 12.0, 8.0, 6.0, 4.0, 2.0, 0.1]
        assert_non_decreasing(
            [assess_crop(crop, make_slope_stats(mean=s), terrain, 600.0) for s in slopes]
        )

    def test_elevation_toward_band_centre(self, crop: CropType) -> None:
        """Test elevations closer to the band centre score at least as well."""
        requirements = CROP_REQUIREMENTS[crop]
        centre = (requirements.elevation_min + requirements.elevation_max) / 2.0
        elevations = [requirements.elevation_max + 100.0] + [
            centre + (requirements.elevation_max - centre) * f for f in (1.0, 0.75, 0.5, 0.25, 0.0)
        ]
        slope = make_slope_stats(mean=1.0)
        terrain = make_terrain()
        assert_non_decreasing([assess_crop(crop, slope, terrain, e) for e in elevations])

    def test_decreasing_waterlogging(self, crop: CropType) -> None:
        """Test lower waterlogging risk scores at least as well."""
        slope = make_slope_stats(mean=1.0)
        risks = [1.0, 0.8, 0.5, 0.3, 0.1, 0.0]
        assert_non_decreasing(
            [assess_crop(crop, slope, make_terrain(waterlogging=w), 600.0) for w in risks]
        )

    def test_decreasing_erosion(self, crop: CropType) -> None:
        """Test lower erosion risk scores at least as well."""
        slope = make_slope_stats(mean=1.0)
        risks = [1.0, 0.7, 0.4, 0.2, 0.0]
        assert_non_decreasing(
            [assess_crop(crop, slope, make_terrain(erosion=e), 600.0) for e in risks]
        )
