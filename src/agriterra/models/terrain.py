"""
Terrain analysis data models.

Slope statistics over TIN triangles and the derived drainage, erosion,
water retention, solar exposure and complexity records.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class SlopeClass(str, Enum):
    """Agricultural slope classes (FAO guidelines)."""

    OPTIMAL = "OPTIMAL"
    MODERATE = "MODERATE"
    STEEP = "STEEP"
    VERY_STEEP = "VERY_STEEP"
    EXTREME = "EXTREME"


class DrainagePattern(str, Enum):
    """Drainage pattern classification from flow accumulation."""

    DENDRITIC = "Dendritic"
    TRELLIS = "Trellis"
    PARALLEL = "Parallel"
    RECTANGULAR = "Rectangular"


@dataclass(frozen=True)
class SlopeClassSummary:
    """
    Share of the analysed area falling in one slope class.

    Attributes:
        percentage: Percent of triangles in the class (0-100)
        area: Proportional polygon area in square meters
        description: Agronomic meaning of the class
    """

    percentage: float
    area: float
    description: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "percentage": self.percentage,
            "area": self.area,
            "description": self.description,
        }


@dataclass(frozen=True)
class ConfidenceInterval:
    """Confidence interval around a sample mean."""

    mean: float
    lower: float
    upper: float
    level: float
    margin_of_error: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mean": self.mean,
            "lower": self.lower,
            "upper": self.upper,
            "level": self.level,
            "margin_of_error": self.margin_of_error,
        }


@dataclass(frozen=True)
class AspectFractions:
    """Fraction of triangles facing each compass quadrant."""

    north: float
    east: float
    south: float
    west: float

    @property
    def dominant(self) -> str:
        """Name of the quadrant with the largest fraction (ties: N, E, S, W)."""
        values = {"north": self.north, "east": self.east, "south": self.south, "west": self.west}
        return max(values, key=lambda k: values[k])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "north": self.north,
            "east": self.east,
            "south": self.south,
            "west": self.west,
            "dominant": self.dominant,
        }


@dataclass(frozen=True)
class SlopeStats:
    """
    Aggregated slope and aspect statistics over TIN triangles.

    Attributes:
        mean: Mean slope in degrees
        median: Median slope in degrees
        std_dev: Population standard deviation in degrees
        confidence: 95% confidence interval of the mean
        distribution: Slope class summaries in class order
        aspects: Aspect quadrant fractions
        count: Number of triangles measured
    """

    mean: float
    median: float
    std_dev: float
    confidence: ConfidenceInterval
    distribution: Dict[SlopeClass, SlopeClassSummary]
    aspects: AspectFractions
    count: int
    minimum: float = 0.0
    maximum: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mean": self.mean,
            "median": self.median,
            "std_dev": self.std_dev,
            "min": self.minimum,
            "max": self.maximum,
            "count": self.count,
            "confidence": self.confidence.to_dict(),
            "distribution": {
                slope_class.value: summary.to_dict()
                for slope_class, summary in self.distribution.items()
            },
            "aspects": self.aspects.to_dict(),
        }


@dataclass(frozen=True)
class DrainageAnalysis:
    """
    D8 drainage summary.

    Attributes:
        pattern: Drainage pattern classification
        density: Drainage density in km/km²
        waterlogging_risk: Waterlogging risk in [0, 1]
        high_flow_ratio: Fraction of cells with accumulation > 100
        medium_flow_ratio: Fraction of cells with accumulation in (50, 100]
        low_flow_ratio: Fraction of cells with accumulation <= 50
        max_accumulation: Largest accumulation in the grid
        fill_passes: Depression filling passes until stable
    """

    pattern: DrainagePattern
    density: float
    waterlogging_risk: float
    high_flow_ratio: float
    medium_flow_ratio: float
    low_flow_ratio: float
    max_accumulation: int
    fill_passes: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "pattern": self.pattern.value,
            "density": self.density,
            "waterlogging_risk": self.waterlogging_risk,
            "flow_ratios": {
                "high": self.high_flow_ratio,
                "medium": self.medium_flow_ratio,
                "low": self.low_flow_ratio,
            },
            "max_accumulation": self.max_accumulation,
            "fill_passes": self.fill_passes,
        }


@dataclass(frozen=True)
class ErosionRisk:
    """RUSLE-inspired erosion risk."""

    score: float
    category: str
    slope_factor: float
    variability_factor: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "category": self.category,
            "factors": {
                "slope_factor": self.slope_factor,
                "variability_factor": self.variability_factor,
            },
        }


@dataclass(frozen=True)
class WaterRetention:
    """SCS-CN-inspired water retention capacity."""

    capacity_mm: float
    efficiency: float
    slope_factor: float
    distribution_factor: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "capacity": self.capacity_mm,
            "efficiency": self.efficiency,
            "factors": {
                "slope_factor": self.slope_factor,
                "distribution_factor": self.distribution_factor,
            },
        }


@dataclass(frozen=True)
class SolarExposure:
    """Aspect-weighted solar exposure."""

    score: float
    category: str
    hemisphere: str
    aspects: AspectFractions

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "category": self.category,
            "hemisphere": self.hemisphere,
            "aspects": self.aspects.to_dict(),
        }


@dataclass(frozen=True)
class TerrainComplexity:
    """Slope variability summary."""

    score: float
    variability: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"score": self.score, "variability": self.variability}


@dataclass(frozen=True)
class TerrainAnalysis:
    """All terrain sub-analyses for one polygon."""

    drainage: DrainageAnalysis
    erosion_risk: ErosionRisk
    water_retention: WaterRetention
    solar_exposure: SolarExposure
    complexity: TerrainComplexity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "drainage": self.drainage.to_dict(),
            "erosion_risk": self.erosion_risk.to_dict(),
            "water_retention": self.water_retention.to_dict(),
            "solar_exposure": self.solar_exposure.to_dict(),
            "complexity": self.complexity.to_dict(),
        }
