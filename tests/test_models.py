"""
Tests for data models.
"""

import numpy as np
import pytest
from pydantic import ValidationError
from shapely.geometry import Polygon

from agriterra.models import (
    AspectFractions,
    ElevationDataSource,
    ElevationFailure,
    ElevationPoint,
    ElevationRange,
    PointGrid,
    RasterGrid,
    SamplePoint,
    SuitabilityClass,
    TINTriangle,
    ValidatedArea,
)


class TestElevationModels:
    """Tests for provider result models."""

    def test_point_defaults(self) -> None:
        """Test an elevation point without a source reports Unknown."""
        point = ElevationPoint(longitude=30.0, latitude=10.0, elevation=123.4)

        assert point.data_source == ElevationDataSource.UNKNOWN
        assert point.to_dict() == {
            "longitude": 30.0,
            "latitude": 10.0,
            "elevation": 123.4,
            "data_source": "Unknown",
        }

    def test_point_coordinate_range(self) -> None:
        """Test out-of-range coordinates are rejected."""
        with pytest.raises(ValidationError):
            ElevationPoint(longitude=200.0, latitude=10.0, elevation=0.0)
        with pytest.raises(ValidationError):
            ElevationPoint(longitude=30.0, latitude=-95.0, elevation=0.0)

    def test_point_is_frozen(self) -> None:
        """Test elevation points are immutable."""
        point = ElevationPoint(longitude=30.0, latitude=10.0, elevation=1.0)
        with pytest.raises(ValidationError):
            point.elevation = 2.0  # type: ignore[misc]

    def test_failure(self) -> None:
        """Test failure defaults."""
        failure = ElevationFailure(longitude=30.0, latitude=10.0)
        assert failure.reason == "unknown"
        assert failure.status_code is None


class TestSamplingModels:
    """Tests for sample points and grids."""

    def test_with_elevation_returns_copy(self) -> None:
        """Test attaching an elevation leaves the original untouched."""
        point = SamplePoint(lon=30.0, lat=10.0)
        enriched = point.with_elevation(42.0)

        assert point.elevation is None
        assert enriched.elevation == 42.0
        assert enriched.coordinates == (30.0, 10.0)

    def test_point_grid(self) -> None:
        """Test grid length, coordinates and summary."""
        grid = PointGrid(
            points=(SamplePoint(1.0, 2.0), SamplePoint(3.0, 4.0)),
            spacing_meters=10.0,
        )

        assert len(grid) == 2
        assert grid.coordinates() == ((1.0, 2.0), (3.0, 4.0))
        assert grid.to_dict() == {
            "point_count": 2,
            "spacing_meters": 10.0,
            "chunk_count": 1,
            "centroid_added": False,
        }


class TestGeometryModels:
    """Tests for the validated area."""

    def test_validated_area_properties(self) -> None:
        """Test bounds, centroid and hectares."""
        area = ValidatedArea(
            geometry=Polygon([(0, 0), (2, 0), (2, 2), (0, 2)]),
            area_sqm=25_000.0,
            geometry_type="Polygon",
        )

        assert area.bounds == (0.0, 0.0, 2.0, 2.0)
        assert area.centroid == pytest.approx((1.0, 1.0))
        assert area.area_hectares == 2.5
        assert area.to_dict()["geometry"]["type"] == "Polygon"


class TestSurfaceModels:
    """Tests for TIN and raster records."""

    def test_triangle_area_and_centroid(self) -> None:
        """Test planar triangle helpers."""
        tri = TINTriangle(
            vertices=((0.0, 0.0), (3.0, 0.0), (0.0, 3.0)),
            elevations=(1.0, 2.0, 3.0),
        )

        assert tri.planar_area == pytest.approx(4.5)
        assert tri.centroid == pytest.approx((1.0, 1.0))

    def test_raster_must_be_square(self) -> None:
        """Test non-square rasters are rejected."""
        with pytest.raises(ValueError):
            RasterGrid(
                elevations=np.zeros((3, 4)),
                bounds=(0.0, 0.0, 1.0, 1.0),
                cell_width_m=1.0,
                cell_height_m=1.0,
            )

    def test_raster_properties(self) -> None:
        """Test size and cell measures."""
        raster = RasterGrid(
            elevations=np.zeros((5, 5)),
            bounds=(0.0, 0.0, 1.0, 1.0),
            cell_width_m=2.0,
            cell_height_m=4.0,
        )

        assert raster.size == 5
        assert raster.cell_count == 25
        assert raster.cell_size_m == 3.0


class TestReportModels:
    """Tests for terrain and suitability records."""

    def test_dominant_aspect(self) -> None:
        """Test the dominant quadrant and its tie order."""
        assert AspectFractions(0.1, 0.2, 0.6, 0.1).dominant == "south"
        assert AspectFractions(0.25, 0.25, 0.25, 0.25).dominant == "north"

    def test_elevation_range_relief(self) -> None:
        """Test relief is max minus min."""
        summary = ElevationRange(min=100.0, max=140.0, mean=120.0, median=119.0)
        assert summary.relief == 40.0
        assert summary.to_dict()["median"] == 119.0

    def test_suitability_class_values(self) -> None:
        """Test FAO class codes."""
        assert [c.value for c in SuitabilityClass] == ["S1", "S2", "S3", "N1", "N2"]
