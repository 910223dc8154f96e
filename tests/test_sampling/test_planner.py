"""
Tests for the sampling planner.
"""

from typing import Any, Dict

import pytest
import shapely

from agriterra.core.config import AnalysisConfig
from agriterra.core.geometry.validator import validate_geometry
from agriterra.core.sampling.planner import SamplingPlanner, plan_samples
from conftest import circle_polygon, square_polygon


class TestRegularSampling:
    """Tests for lattice sampling of ordinary polygons."""

    def test_points_inside_polygon(self, square: Dict[str, Any]) -> None:
        """Test every sample lies strictly inside the polygon."""
        area = validate_geometry(square)
        grid = plan_samples(area)

        xs = [p.lon for p in grid.points]
        ys = [p.lat for p in grid.points]
        assert all(shapely.contains_xy(area.geometry, xs, ys))
        assert grid.centroid_added is False
        assert grid.chunk_count == 1

    def test_point_count_matches_spacing(self, square: Dict[str, Any]) -> None:
        """Test a 100 m square at 10 m spacing yields roughly a 9 x 9 lattice."""
        grid = plan_samples(validate_geometry(square))

        assert 64 <= len(grid) <= 121
        assert grid.spacing_meters == 10.0

    def test_scan_order(self, square: Dict[str, Any]) -> None:
        """Test points run west to east within rows, rows south to north."""
        grid = plan_samples(validate_geometry(square))
        keys = [(p.lat, p.lon) for p in grid.points]
        assert keys == sorted(keys)

    def test_deterministic(self, cone_polygon: Dict[str, Any]) -> None:
        """Test repeated planning gives identical grids."""
        area = validate_geometry(cone_polygon)
        assert plan_samples(area).points == plan_samples(area).points

    def test_chunked_matches_unchunked(self, square: Dict[str, Any]) -> None:
        """Test quadrant chunking selects the same lattice points."""
        area = validate_geometry(square)
        whole = SamplingPlanner(AnalysisConfig()).plan(area)
        chunked = SamplingPlanner(AnalysisConfig(chunk_area_threshold_m2=2000)).plan(area)

        assert chunked.chunk_count > 1
        assert set(chunked.coordinates()) == set(whole.coordinates())

    def test_chunk_depth_limit(self, square: Dict[str, Any]) -> None:
        """Test recursion stops at the configured depth."""
        area = validate_geometry(square)
        planner = SamplingPlanner(AnalysisConfig(chunk_area_threshold_m2=1), max_depth=1)

        assert planner.plan(area).chunk_count == 4

    def test_per_chunk_cap(self, square: Dict[str, Any]) -> None:
        """Test a chunk never contributes more than the configured cap."""
        grid = plan_samples(validate_geometry(square), AnalysisConfig(max_points_per_chunk=10))
        assert len(grid) == 10


class TestSparseSampling:
    """Tests for polygons smaller than the lattice spacing."""

    def test_tiny_square_is_resampled(self) -> None:
        """Test a 5 m square gets a finer lattice and an interior anchor."""
        area = validate_geometry(square_polygon(5.0))
        grid = plan_samples(area)

        assert grid.centroid_added is True
        assert len(grid) >= 3
        assert grid.spacing_meters == pytest.approx(1.25)

    def test_sparse_points_are_interior(self) -> None:
        """Test the resampled points and anchor lie inside the polygon."""
        area = validate_geometry(circle_polygon(radius_m=3.0))
        grid = plan_samples(area)

        xs = [p.lon for p in grid.points]
        ys = [p.lat for p in grid.points]
        assert grid.centroid_added is True
        assert all(shapely.contains_xy(area.geometry, xs, ys))
