"""
Tests for TIN construction.
"""

from typing import List

import pytest

from agriterra.core.errors import DegenerateSurfaceError
from agriterra.core.surface.tin import build_tin
from agriterra.models.sampling import SamplePoint


def lattice(n: int, step: float = 1e-4) -> List[SamplePoint]:
    """n x n points with elevation equal to the column index."""
    return [
        SamplePoint(lon=30.0 + col * step, lat=10.0 + row * step, elevation=float(col))
        for row in range(n)
        for col in range(n)
    ]


class TestBuildTIN:
    """Tests for build_tin."""

    def test_square_gives_two_triangles(self) -> None:
        """Test four corners triangulate into two triangles."""
        tin = build_tin(lattice(2))

        assert len(tin.triangles) == 2
        assert tin.kept.all()
        assert len(tin.vertices) == 4

    def test_triangle_count_for_lattice(self) -> None:
        """Test an n x n lattice gives 2 (n - 1)^2 triangles."""
        tin = build_tin(lattice(5))
        assert len(tin.triangles) == 32

    def test_elevations_follow_vertices(self) -> None:
        """Test each triangle's elevations match its vertex order."""
        tin = build_tin(lattice(4))
        step = 1e-4

        for triangle in tin.triangles:
            for (lon, _lat), elevation in zip(triangle.vertices, triangle.elevations):
                assert elevation == pytest.approx((lon - 30.0) / step)

    def test_deterministic(self) -> None:
        """Test identical input yields identical triangles."""
        points = lattice(4)
        assert build_tin(points).triangles == build_tin(points).triangles

    def test_bounds_and_to_dict(self) -> None:
        """Test TIN bounds and summary."""
        tin = build_tin(lattice(3))

        assert tin.bounds == pytest.approx((30.0, 10.0, 30.0002, 10.0002))
        assert tin.to_dict()["triangle_count"] == len(tin.triangles)

    def test_too_few_points(self) -> None:
        """Test fewer than three points cannot form a surface."""
        with pytest.raises(DegenerateSurfaceError) as exc_info:
            build_tin(lattice(2)[:2])
        assert exc_info.value.details["point_count"] == 2

    def test_collinear_points(self) -> None:
        """Test collinear points are rejected."""
        points = [SamplePoint(lon=30.0 + i * 1e-4, lat=10.0, elevation=1.0) for i in range(5)]

        with pytest.raises(DegenerateSurfaceError):
            build_tin(points)
