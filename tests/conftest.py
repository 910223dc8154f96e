"""
Shared fixtures: GeoJSON polygon builders, deterministic elevation providers
and terrain record builders.
"""

import math
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

import numpy as np
import pytest

from agriterra.core.config import AnalysisConfig
from agriterra.core.elevation.provider import ElevationProvider
from agriterra.core.geometry.geodesy import EARTH_RADIUS, haversine_distance
from agriterra.core.terrain.analyzer import classify_erosion
from agriterra.core.terrain.aspect import classify_solar_exposure
from agriterra.core.terrain.slope import slope_distribution
from agriterra.models.elevation import (
    ElevationDataSource,
    ElevationFailure,
    ElevationPoint,
    ElevationResult,
)
from agriterra.models.sampling import SamplePoint
from agriterra.models.terrain import (
    AspectFractions,
    ConfidenceInterval,
    DrainageAnalysis,
    DrainagePattern,
    ErosionRisk,
    SlopeStats,
    SolarExposure,
    TerrainAnalysis,
    TerrainComplexity,
    WaterRetention,
)

Coordinate = Tuple[float, float]

ORIGIN_LON = 30.0
ORIGIN_LAT = 10.0


def meters_north(meters: float) -> float:
    """Latitude step in degrees for a distance in meters."""
    return math.degrees(meters / EARTH_RADIUS)


def meters_east(meters: float, latitude: float) -> float:
    """Longitude step in degrees for a distance in meters at a latitude."""
    return meters_north(meters) / math.cos(math.radians(latitude))


def square_polygon(
    size_m: float = 100.0,
    lon: float = ORIGIN_LON,
    lat: float = ORIGIN_LAT,
) -> Dict[str, Any]:
    """Counter-clockwise GeoJSON square with its south-west corner at (lon, lat)."""
    dlat = meters_north(size_m)
    dlon = meters_east(size_m, lat + dlat / 2.0)
    ring = [
        [lon, lat],
        [lon + dlon, lat],
        [lon + dlon, lat + dlat],
        [lon, lat + dlat],
        [lon, lat],
    ]
    return {"type": "Polygon", "coordinates": [ring]}


def circle_polygon(
    radius_m: float = 50.0,
    lon: float = ORIGIN_LON,
    lat: float = ORIGIN_LAT,
    segments: int = 64,
) -> Dict[str, Any]:
    """GeoJSON polygon approximating a circle around (lon, lat)."""
    ring = []
    for i in range(segments):
        angle = 2.0 * math.pi * i / segments
        ring.append(
            [
                lon + meters_east(radius_m * math.cos(angle), lat),
                lat + meters_north(radius_m * math.sin(angle)),
            ]
        )
    ring.append(ring[0])
    return {"type": "Polygon", "coordinates": [ring]}


class SyntheticProvider(ElevationProvider):
    """Provider computing elevations from a function, recording every call."""

    name = "synthetic"

    def __init__(self) -> None:
        self.calls: List[List[Coordinate]] = []

    def elevation_at(self, lon: float, lat: float) -> float:
        raise NotImplementedError

    def result_for(self, lon: float, lat: float) -> ElevationResult:
        return ElevationPoint(
            longitude=lon,
            latitude=lat,
            elevation=self.elevation_at(lon, lat),
            data_source=ElevationDataSource.SYNTHETIC,
        )

    async def fetch(self, points: Sequence[Coordinate]) -> List[ElevationResult]:
        self.calls.append(list(points))
        return [self.result_for(lon, lat) for lon, lat in points]

    @property
    def requested(self) -> int:
        return sum(len(call) for call in self.calls)


class FlatProvider(SyntheticProvider):
    """Constant elevation everywhere."""

    def __init__(self, elevation: float = 500.0) -> None:
        super().__init__()
        self.elevation = elevation

    def elevation_at(self, lon: float, lat: float) -> float:
        return self.elevation


class TiltedPlaneProvider(SyntheticProvider):
    """Elevation rising eastward by ``rise_per_meter`` from ``base`` at the origin."""

    def __init__(
        self,
        rise_per_meter: float = 0.1,
        base: float = 100.0,
        origin: Coordinate = (ORIGIN_LON, ORIGIN_LAT),
    ) -> None:
        super().__init__()
        self.rise_per_meter = rise_per_meter
        self.base = base
        self.origin = origin

    def elevation_at(self, lon: float, lat: float) -> float:
        east_m = (
            math.radians(lon - self.origin[0])
            * EARTH_RADIUS
            * math.cos(math.radians(self.origin[1]))
        )
        return self.base + self.rise_per_meter * east_m


class ConeProvider(SyntheticProvider):
    """Single peak of ``height`` meters falling to 0 at ``radius`` meters."""

    def __init__(
        self,
        height: float = 40.0,
        radius: float = 50.0,
        center: Coordinate = (ORIGIN_LON, ORIGIN_LAT),
    ) -> None:
        super().__init__()
        self.height = height
        self.radius = radius
        self.center = center

    def elevation_at(self, lon: float, lat: float) -> float:
        r = haversine_distance(self.center[0], self.center[1], lon, lat)
        return max(0.0, self.height - self.height / self.radius * r)


class DeadPointProvider(FlatProvider):
    """Flat provider that never resolves the first ``dead`` coordinates it sees."""

    def __init__(self, dead: int = 1, elevation: float = 500.0) -> None:
        super().__init__(elevation)
        self.dead_count = dead
        self.dead: Set[Coordinate] = set()

    def result_for(self, lon: float, lat: float) -> ElevationResult:
        if len(self.dead) < self.dead_count and (lon, lat) not in self.dead:
            self.dead.add((lon, lat))
        if (lon, lat) in self.dead:
            return ElevationFailure(longitude=lon, latitude=lat, reason="no data")
        return super().result_for(lon, lat)


class FlakyProvider(FlatProvider):
    """Fails every coordinate on its first request, succeeds afterwards."""

    def __init__(self, elevation: float = 500.0) -> None:
        super().__init__(elevation)
        self.seen: Set[Coordinate] = set()

    def result_for(self, lon: float, lat: float) -> ElevationResult:
        if (lon, lat) not in self.seen:
            self.seen.add((lon, lat))
            return ElevationFailure(longitude=lon, latitude=lat, reason="timeout")
        return super().result_for(lon, lat)


class RaisingProvider(SyntheticProvider):
    """Raises on every fetch."""

    name = "raising"

    def __init__(self, exc: Optional[Exception] = None) -> None:
        super().__init__()
        self.exc = exc or ConnectionError("service unavailable")

    async def fetch(self, points: Sequence[Coordinate]) -> List[ElevationResult]:
        self.calls.append(list(points))
        raise self.exc


class ShortProvider(FlatProvider):
    """Returns one result fewer than requested."""

    async def fetch(self, points: Sequence[Coordinate]) -> List[ElevationResult]:
        results = await super().fetch(points)
        return results[:-1]


class ValueProvider(SyntheticProvider):
    """Returns the given raw elevation values in order, cycling."""

    def __init__(self, values: Sequence[Any]) -> None:
        super().__init__()
        self.values = list(values)
        self._index = 0

    def result_for(self, lon: float, lat: float) -> ElevationResult:
        value = self.values[self._index % len(self.values)]
        self._index += 1
        return ElevationPoint(longitude=lon, latitude=lat, elevation=value)


@pytest.fixture
def fast_config() -> AnalysisConfig:
    """Default analysis options without inter-batch delays."""
    return AnalysisConfig(request_delay_ms=0)


@pytest.fixture
def square() -> Dict[str, Any]:
    """100 m x 100 m square polygon."""
    return square_polygon()


@pytest.fixture
def cone_polygon() -> Dict[str, Any]:
    """Circular polygon of radius 50 m around the origin."""
    return circle_polygon()


@pytest.fixture
def bowtie() -> Dict[str, Any]:
    """Self-intersecting polygon."""
    return {
        "type": "Polygon",
        "coordinates": [[[0.0, 0.0], [0.001, 0.001], [0.001, 0.0], [0.0, 0.001], [0.0, 0.0]]],
    }


def plane_points(
    n: int = 5,
    step_m: float = 10.0,
    east_grade: float = 0.0,
    north_grade: float = 0.0,
    base: float = 100.0,
) -> List[SamplePoint]:
    """n x n lattice of enriched points on a plane with the given grades (m/m)."""
    points = []
    for row in range(n):
        for col in range(n):
            points.append(
                SamplePoint(
                    lon=ORIGIN_LON + meters_east(col * step_m, ORIGIN_LAT),
                    lat=ORIGIN_LAT + meters_north(row * step_m),
                    elevation=base + east_grade * col * step_m + north_grade * row * step_m,
                )
            )
    return points


def make_slope_stats(mean: float = 0.1, std_dev: float = 0.0) -> SlopeStats:
    """Slope statistics for terrain whose triangles all share the mean slope."""
    return SlopeStats(
        mean=mean,
        median=mean,
        std_dev=std_dev,
        confidence=ConfidenceInterval(mean, mean, mean, 0.95, 0.0),
        distribution=slope_distribution(np.array([mean]), 10_000.0),
        aspects=AspectFractions(north=1.0, east=0.0, south=0.0, west=0.0),
        count=1,
        minimum=mean,
        maximum=mean,
    )


def make_terrain(
    waterlogging: float = 0.0,
    erosion: float = 0.0,
    solar: float = 0.4,
) -> TerrainAnalysis:
    """Terrain analysis with the given risk indicators."""
    aspects = AspectFractions(north=1.0, east=0.0, south=0.0, west=0.0)
    return TerrainAnalysis(
        drainage=DrainageAnalysis(
            pattern=DrainagePattern.PARALLEL,
            density=0.0,
            waterlogging_risk=waterlogging,
            high_flow_ratio=0.0,
            medium_flow_ratio=0.0,
            low_flow_ratio=1.0,
            max_accumulation=1,
            fill_passes=0,
        ),
        erosion_risk=ErosionRisk(
            score=erosion,
            category=classify_erosion(erosion),
            slope_factor=erosion,
            variability_factor=1.0,
        ),
        water_retention=WaterRetention(
            capacity_mm=100.0, efficiency=100.0, slope_factor=1.0, distribution_factor=1.0
        ),
        solar_exposure=SolarExposure(
            score=solar,
            category=classify_solar_exposure(solar),
            hemisphere="north",
            aspects=aspects,
        ),
        complexity=TerrainComplexity(score=0.0, variability=0.0),
    )
