"""
Custom exception hierarchy for the Agriterra analysis engine.

Every pipeline stage aborts with one of these typed errors. The engine never
converts them into degraded reports; they surface to the caller unchanged.
"""

from typing import Any, Dict, List, Optional


class AgriterraException(Exception):
    """
    Base exception for all Agriterra-specific errors.

    Attributes:
        error_code: String identifier for the error type
        message: User-friendly error message
        details: Technical details for logging/debugging
        suggestions: Optional list of resolution suggestions
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize AgriterraException.

        Args:
            message: User-friendly error message
            error_code: String identifier for the error type
            details: Technical details for logging
            suggestions: List of suggestions for resolution
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestions = suggestions or []

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "suggestions": self.suggestions,
        }

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        """Detailed string representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"error_code='{self.error_code}', "
            f"message='{self.message}')"
        )


class InvalidGeometryError(AgriterraException):
    """
    Raised when the input polygon is rejected by the geometry validator.

    Covers wrong GeoJSON types, missing or degenerate rings, non-finite
    coordinates, self-intersections and zero-area polygons.
    """

    def __init__(
        self,
        message: str,
        geometry_type: Optional[str] = None,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize InvalidGeometryError.

        Args:
            message: User-friendly error message
            geometry_type: GeoJSON type of the rejected input
            reason: Machine-readable reason (e.g. 'self_intersection')
            details: Technical details about the geometry error
            suggestions: List of suggestions for fixing the geometry
        """
        error_details = details or {}
        if geometry_type:
            error_details["geometry_type"] = geometry_type
        if reason:
            error_details["reason"] = reason

        default_suggestions = [
            "Check for self-intersecting polygons",
            "Ensure every ring has at least four positions and is closed",
            "Use [longitude, latitude] coordinate order in WGS84",
        ]

        super().__init__(
            message=message,
            error_code="INVALID_GEOMETRY",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )


class InsufficientDataError(AgriterraException):
    """Raised when too few sample points survive elevation enrichment."""

    def __init__(
        self,
        message: str,
        survived: Optional[int] = None,
        required: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize InsufficientDataError.

        Args:
            message: User-friendly error message
            survived: Number of points that were enriched successfully
            required: Minimum number of points needed
            details: Technical details
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if survived is not None:
            error_details["survived"] = survived
        if required is not None:
            error_details["required"] = required

        default_suggestions = [
            "Reduce the grid spacing to sample more points",
            "Check that the elevation provider covers this region",
        ]

        super().__init__(
            message=message,
            error_code="INSUFFICIENT_DATA",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )


class DegenerateSurfaceError(AgriterraException):
    """Raised when no non-degenerate triangle can be formed from the samples."""

    def __init__(
        self,
        message: str,
        point_count: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize DegenerateSurfaceError.

        Args:
            message: User-friendly error message
            point_count: Number of points offered to the triangulation
            details: Technical details
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if point_count is not None:
            error_details["point_count"] = point_count

        super().__init__(
            message=message,
            error_code="DEGENERATE_SURFACE",
            details=error_details,
            suggestions=suggestions
            or ["Provide a polygon wide enough to hold three non-collinear samples"],
        )


class ProviderError(AgriterraException):
    """
    Raised when the elevation provider fails a whole batch.

    Isolated per-point failures never raise; they drop the affected point.
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        batch_index: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ProviderError.

        Args:
            message: User-friendly error message
            provider_name: Name of the failing provider
            batch_index: Index of the batch that exhausted its retries
            details: Technical details about the provider failure
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if provider_name:
            error_details["provider_name"] = provider_name
        if batch_index is not None:
            error_details["batch_index"] = batch_index

        default_suggestions = [
            "Try again in a few moments",
            "Switch to another elevation provider",
        ]

        super().__init__(
            message=message,
            error_code="PROVIDER_ERROR",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )


class AnalysisCancelledError(AgriterraException):
    """Raised when a caller-supplied cancellation signal is observed."""

    def __init__(
        self,
        message: str = "Analysis was cancelled",
        stage: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize AnalysisCancelledError.

        Args:
            message: User-friendly error message
            stage: Pipeline stage at which cancellation was observed
            details: Technical details
        """
        error_details = details or {}
        if stage:
            error_details["stage"] = stage

        super().__init__(
            message=message,
            error_code="CANCELLED",
            details=error_details,
        )


class InternalInvariantError(AgriterraException):
    """Raised when a post-condition is violated. Should be unreachable."""

    def __init__(
        self,
        message: str,
        invariant: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize InternalInvariantError.

        Args:
            message: User-friendly error message
            invariant: Short name of the violated invariant
            details: Technical details
        """
        error_details = details or {}
        if invariant:
            error_details["invariant"] = invariant

        super().__init__(
            message=message,
            error_code="INTERNAL_INVARIANT",
            details=error_details,
            suggestions=["Report this issue together with the input polygon"],
        )


class ConfigurationError(AgriterraException):
    """
    Raised when analysis or application configuration is invalid.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: User-friendly error message
            config_key: Configuration key that is invalid
            details: Technical details about the configuration error
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if config_key:
            error_details["config_key"] = config_key

        default_suggestions = [
            "Check environment variables are set correctly",
            "Verify the analysis options are within their allowed ranges",
        ]

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )
