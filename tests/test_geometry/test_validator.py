"""
Tests for GeoJSON polygon validation.
"""

from typing import Any, Dict

import pytest

from agriterra.core.errors import InvalidGeometryError
from agriterra.core.geometry.validator import GeometryValidator, validate_geometry
from conftest import meters_east, meters_north, square_polygon


@pytest.fixture
def validator() -> GeometryValidator:
    """Create a validator instance."""
    return GeometryValidator()


class TestValidPolygons:
    """Tests for accepted input."""

    def test_square_area(self, validator: GeometryValidator, square: Dict[str, Any]) -> None:
        """Test a 100 m square measures about one hectare."""
        area = validator.validate(square)

        assert area.geometry_type == "Polygon"
        assert area.area_sqm == pytest.approx(10_000.0, rel=0.01)
        assert area.area_hectares == pytest.approx(1.0, rel=0.01)

    def test_clockwise_ring_is_reoriented(
        self, validator: GeometryValidator, square: Dict[str, Any]
    ) -> None:
        """Test clockwise exteriors are normalized to counter-clockwise."""
        clockwise = {"type": "Polygon", "coordinates": [square["coordinates"][0][::-1]]}

        area = validator.validate(clockwise)

        assert area.geometry.exterior.is_ccw
        assert area.area_sqm == pytest.approx(validator.validate(square).area_sqm)

    def test_hole_is_subtracted(self, validator: GeometryValidator) -> None:
        """Test interior rings reduce the area."""
        outer = square_polygon(100.0)["coordinates"][0]
        lon = outer[0][0] + meters_east(25.0, outer[0][1])
        lat = outer[0][1] + meters_north(25.0)
        hole = square_polygon(50.0, lon=lon, lat=lat)["coordinates"][0]

        area = validator.validate({"type": "Polygon", "coordinates": [outer, hole]})

        assert area.area_sqm == pytest.approx(7_500.0, rel=0.02)

    def test_multipolygon(self, validator: GeometryValidator) -> None:
        """Test MultiPolygon areas add up."""
        first = square_polygon(100.0)["coordinates"]
        second = square_polygon(100.0, lon=30.01)["coordinates"]

        area = validator.validate({"type": "MultiPolygon", "coordinates": [first, second]})

        assert area.geometry_type == "MultiPolygon"
        assert area.area_sqm == pytest.approx(20_000.0, rel=0.01)

    def test_feature_is_unwrapped(self, square: Dict[str, Any]) -> None:
        """Test a Feature wrapper is accepted and its properties ignored."""
        feature = {"type": "Feature", "properties": {"name": "field"}, "geometry": square}
        assert validate_geometry(feature).geometry_type == "Polygon"


class TestInvalidPolygons:
    """Tests for rejected input."""

    def test_self_intersection(self, validator: GeometryValidator, bowtie: Dict[str, Any]) -> None:
        """Test bow-tie polygons are rejected as self-intersecting."""
        with pytest.raises(InvalidGeometryError) as exc_info:
            validator.validate(bowtie)
        assert exc_info.value.details["reason"] == "self_intersection"

    @pytest.mark.parametrize(
        "geojson, reason",
        [
            ({"type": "Point", "coordinates": [0, 0]}, "unsupported_type"),
            ({"type": "Polygon", "coordinates": []}, "missing_coordinates"),
            ({"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [0, 0]]]}, "degenerate_ring"),
            (
                {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1]]]},
                "unclosed_ring",
            ),
            (
                {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 100], [0, 0]]]},
                "coordinate_out_of_range",
            ),
            (
                {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, "x"], [0, 0]]]},
                "non_numeric_coordinate",
            ),
            (
                {
                    "type": "Polygon",
                    "coordinates": [[[0, 0], [1, 0], [1, float("nan")], [0, 0]]],
                },
                "non_finite_coordinate",
            ),
            ({"type": "Feature", "geometry": None}, "missing_geometry"),
            ("not geojson", "not_a_mapping"),
        ],
    )
    def test_rejections(self, validator: GeometryValidator, geojson: Any, reason: str) -> None:
        """Test malformed input is rejected with a specific reason."""
        with pytest.raises(InvalidGeometryError) as exc_info:
            validator.validate(geojson)

        assert exc_info.value.details["reason"] == reason
        assert exc_info.value.error_code == "INVALID_GEOMETRY"

    def test_collinear_ring(self, validator: GeometryValidator) -> None:
        """Test zero-area rings are rejected."""
        collinear = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [2, 0], [0, 0]]]}
        with pytest.raises(InvalidGeometryError):
            validator.validate(collinear)
