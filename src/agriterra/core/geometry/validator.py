"""
GeoJSON polygon validation.

Rejects malformed or degenerate input before any sampling or provider call,
normalizes ring orientation and caches the spherical area of the polygon.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, List, Sequence, Tuple, Union

from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.polygon import orient
from shapely.validation import explain_validity

from agriterra.core.errors import InvalidGeometryError
from agriterra.core.geometry.geodesy import spherical_area
from agriterra.models.geometry import ValidatedArea

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = ("Polygon", "MultiPolygon")
MIN_RING_POSITIONS = 4

Position = Tuple[float, float]


class GeometryValidator:
    """
    Validator for GeoJSON Polygon and MultiPolygon input.

    A GeoJSON ``Feature`` wrapping one of these is unwrapped first; its
    properties are ignored.
    """

    def validate(self, geojson: Any) -> ValidatedArea:
        """
        Validate a GeoJSON geometry and normalize its orientation.

        Args:
            geojson: GeoJSON mapping with ``type`` and ``coordinates``

        Returns:
            ValidatedArea with counter-clockwise exteriors and spherical area

        Raises:
            InvalidGeometryError: If the geometry is malformed, invalid or empty
        """
        geometry_dict = self._unwrap(geojson)
        geometry_type = geometry_dict.get("type")

        if geometry_type not in SUPPORTED_TYPES:
            raise InvalidGeometryError(
                f"Unsupported geometry type: {geometry_type!r}",
                geometry_type=str(geometry_type),
                reason="unsupported_type",
            )

        coordinates = geometry_dict.get("coordinates")
        if not isinstance(coordinates, Sequence) or isinstance(coordinates, str) or not coordinates:
            raise InvalidGeometryError(
                "Geometry has no coordinates",
                geometry_type=geometry_type,
                reason="missing_coordinates",
            )

        if geometry_type == "Polygon":
            geometry: Union[Polygon, MultiPolygon] = self._build_polygon(coordinates, geometry_type)
        else:
            parts = []
            for index, polygon_coords in enumerate(coordinates):
                if not isinstance(polygon_coords, Sequence) or not polygon_coords:
                    raise InvalidGeometryError(
                        f"MultiPolygon member {index} has no rings",
                        geometry_type=geometry_type,
                        reason="missing_rings",
                    )
                parts.append(self._build_polygon(polygon_coords, geometry_type))
            geometry = MultiPolygon(parts)

        self._check_validity(geometry, geometry_type)

        geometry = self._normalize_orientation(geometry)
        area_sqm = spherical_area(geometry)

        if geometry.area <= 0 or not area_sqm > 0:
            raise InvalidGeometryError(
                "Polygon has zero area",
                geometry_type=geometry_type,
                reason="zero_area",
            )

        logger.debug(
            f"Validated {geometry_type} with area {area_sqm:.1f} m² "
            f"and bounds {geometry.bounds}"
        )

        return ValidatedArea(geometry=geometry, area_sqm=area_sqm, geometry_type=geometry_type)

    def _unwrap(self, geojson: Any) -> Mapping:
        """Return the geometry mapping, unwrapping a Feature if needed."""
        if not isinstance(geojson, Mapping):
            raise InvalidGeometryError(
                f"Expected a GeoJSON object, got {type(geojson).__name__}",
                reason="not_a_mapping",
            )

        if geojson.get("type") == "Feature":
            geometry = geojson.get("geometry")
            if not isinstance(geometry, Mapping):
                raise InvalidGeometryError(
                    "Feature has no geometry",
                    geometry_type="Feature",
                    reason="missing_geometry",
                )
            return geometry

        return geojson

    def _build_polygon(self, rings: Any, geometry_type: str) -> Polygon:
        """Build a shapely Polygon from a list of GeoJSON rings."""
        if not isinstance(rings, Sequence) or isinstance(rings, str) or not rings:
            raise InvalidGeometryError(
                "Polygon has no rings",
                geometry_type=geometry_type,
                reason="missing_rings",
            )

        parsed = [self._parse_ring(ring, geometry_type) for ring in rings]
        return Polygon(parsed[0], parsed[1:])

    def _parse_ring(self, ring: Any, geometry_type: str) -> List[Position]:
        """Parse and check a single linear ring."""
        if not isinstance(ring, Sequence) or isinstance(ring, str):
            raise InvalidGeometryError(
                "Ring is not a list of positions",
                geometry_type=geometry_type,
                reason="malformed_ring",
            )

        if len(ring) < MIN_RING_POSITIONS:
            raise InvalidGeometryError(
                f"Ring has {len(ring)} positions, at least {MIN_RING_POSITIONS} are required",
                geometry_type=geometry_type,
                reason="degenerate_ring",
                details={"position_count": len(ring)},
            )

        positions = [self._parse_position(position, geometry_type) for position in ring]

        if positions[0] != positions[-1]:
            raise InvalidGeometryError(
                "Ring is not closed (first and last positions differ)",
                geometry_type=geometry_type,
                reason="unclosed_ring",
            )

        return positions

    def _parse_position(self, position: Any, geometry_type: str) -> Position:
        """Parse a [lon, lat] position, rejecting non-finite or out-of-range values."""
        if not isinstance(position, Sequence) or isinstance(position, str) or len(position) < 2:
            raise InvalidGeometryError(
                f"Malformed position: {position!r}",
                geometry_type=geometry_type,
                reason="malformed_position",
            )

        lon, lat = position[0], position[1]
        for value in (lon, lat):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidGeometryError(
                    f"Non-numeric coordinate: {value!r}",
                    geometry_type=geometry_type,
                    reason="non_numeric_coordinate",
                )
            if not math.isfinite(value):
                raise InvalidGeometryError(
                    f"Non-finite coordinate: {value!r}",
                    geometry_type=geometry_type,
                    reason="non_finite_coordinate",
                )

        if not (-180 <= lon <= 180) or not (-90 <= lat <= 90):
            raise InvalidGeometryError(
                f"Coordinate out of range: [{lon}, {lat}]",
                geometry_type=geometry_type,
                reason="coordinate_out_of_range",
            )

        return (float(lon), float(lat))

    def _check_validity(self, geometry: Union[Polygon, MultiPolygon], geometry_type: str) -> None:
        """Raise if shapely considers the geometry invalid."""
        if geometry.is_valid:
            return

        explanation = explain_validity(geometry)
        logger.warning(f"Invalid geometry: {explanation}")

        if "self-intersection" in explanation.lower():
            reason = "self_intersection"
        elif "too few points" in explanation.lower():
            reason = "degenerate_ring"
        else:
            reason = "invalid_geometry"

        raise InvalidGeometryError(
            f"Invalid polygon: {explanation}",
            geometry_type=geometry_type,
            reason=reason,
            details={"explanation": explanation},
        )

    def _normalize_orientation(
        self, geometry: Union[Polygon, MultiPolygon]
    ) -> Union[Polygon, MultiPolygon]:
        """Orient exteriors counter-clockwise and holes clockwise."""
        if isinstance(geometry, MultiPolygon):
            return MultiPolygon([orient(part, sign=1.0) for part in geometry.geoms])
        return orient(geometry, sign=1.0)


def validate_geometry(geojson: Any) -> ValidatedArea:
    """
    Convenience function to validate a GeoJSON polygon.

    Args:
        geojson: GeoJSON Polygon, MultiPolygon or Feature

    Returns:
        ValidatedArea

    Raises:
        InvalidGeometryError: If the input is rejected
    """
    return GeometryValidator().validate(geojson)
