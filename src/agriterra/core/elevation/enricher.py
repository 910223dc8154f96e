"""
Elevation enrichment of sample points.

Points are sent to the provider in strictly sequential batches. Within a
batch, points whose result is a failure or an implausible elevation are
re-requested with exponential backoff and dropped if they never resolve.
A batch in which no point ever resolves aborts the analysis, whether the
provider raised or answered every point with a failure.
"""

import asyncio
import logging
import math
import numbers
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from agriterra.core.cancellation import CancelSignal, check_cancelled
from agriterra.core.config import AnalysisConfig
from agriterra.core.elevation.provider import ElevationProvider
from agriterra.core.errors import InsufficientDataError, ProviderError
from agriterra.core.retry import exponential_backoff
from agriterra.models.elevation import (
    MAX_ELEVATION,
    MIN_ELEVATION,
    ElevationFailure,
    ElevationResult,
)
from agriterra.models.sampling import PointGrid, SamplePoint

logger = logging.getLogger(__name__)

# A TIN needs three points; two survivors are let through with a warning
MIN_SURVIVORS = 2

# Batches target roughly a tenth of the points
BATCH_DIVISOR = 10

MAX_BACKOFF_SECONDS = 60.0


@dataclass
class EnrichmentStats:
    """Counters describing one enrichment run."""

    requested: int = 0
    enriched: int = 0
    dropped: int = 0
    batches: int = 0
    batch_size: int = 0
    retries: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "requested": self.requested,
            "enriched": self.enriched,
            "dropped": self.dropped,
            "batches": self.batches,
            "batch_size": self.batch_size,
            "retries": self.retries,
        }


def batch_size_for(total: int, max_batch_size: int) -> int:
    """
    Batch size for a given number of points.

    Args:
        total: Number of points to enrich
        max_batch_size: Configured upper bound

    Returns:
        ``min(max_batch_size, ceil(total / 10))`` bounded to [1, max_batch_size]
    """
    size = min(max_batch_size, math.ceil(total / BATCH_DIVISOR))
    return max(1, min(size, max_batch_size))


def validate_elevation(result: ElevationResult) -> Optional[float]:
    """
    Extract a plausible elevation from a provider result.

    Args:
        result: Provider result for one point

    Returns:
        Elevation in meters, or None if the result counts as a failure
    """
    if isinstance(result, ElevationFailure):
        return None

    value = getattr(result, "elevation", None)
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None

    value = float(value)
    if not math.isfinite(value) or not (MIN_ELEVATION <= value <= MAX_ELEVATION):
        return None

    return value


def failure_reason(result: ElevationResult) -> str:
    """Short description of why a result carries no usable elevation."""
    if isinstance(result, ElevationFailure):
        return result.reason
    return f"implausible elevation {getattr(result, 'elevation', None)!r}"


class ElevationEnricher:
    """
    Attaches elevations to a point grid through an ElevationProvider.

    Attributes:
        provider: Elevation provider
        config: Analysis configuration (batching, delays, retries)
        stats: Counters of the most recent enrich() call
    """

    def __init__(self, provider: ElevationProvider, config: Optional[AnalysisConfig] = None) -> None:
        self.provider = provider
        self.config = config or AnalysisConfig()
        self.stats = EnrichmentStats()

    @property
    def _delay_seconds(self) -> float:
        return self.config.request_delay_ms / 1000.0

    async def enrich(
        self,
        grid: PointGrid,
        cancel: Optional[CancelSignal] = None,
    ) -> Tuple[SamplePoint, ...]:
        """
        Resolve elevations for every grid point.

        Args:
            grid: Sample points in planner order
            cancel: Optional cancellation signal, checked before each batch

        Returns:
            Enriched points in planner order; failed points are omitted

        Raises:
            ProviderError: If no point of a batch resolves on any attempt or
                the provider breaks its result-count contract
            InsufficientDataError: If fewer than two points survive
            AnalysisCancelledError: If cancellation is observed
        """
        points = grid.points
        total = len(points)
        batch_size = batch_size_for(total, self.config.max_batch_size)
        elevations: List[Optional[float]] = [None] * total

        self.stats = EnrichmentStats(requested=total, batch_size=batch_size)

        for batch_index, start in enumerate(range(0, total, batch_size)):
            check_cancelled(cancel, "elevation enrichment")

            if batch_index > 0 and self._delay_seconds > 0:
                await asyncio.sleep(self._delay_seconds)

            indices = list(range(start, min(start + batch_size, total)))
            await self._enrich_batch(batch_index, indices, points, elevations)
            self.stats.batches += 1

        enriched = tuple(
            point.with_elevation(elevation)
            for point, elevation in zip(points, elevations)
            if elevation is not None
        )

        self.stats.enriched = len(enriched)
        self.stats.dropped = total - len(enriched)

        if self.stats.dropped:
            logger.warning(
                f"Dropped {self.stats.dropped} of {total} points after "
                f"{self.config.max_retries} retries"
            )

        if len(enriched) < MIN_SURVIVORS:
            raise InsufficientDataError(
                f"Only {len(enriched)} of {total} points could be enriched",
                survived=len(enriched),
                required=MIN_SURVIVORS,
            )

        if len(enriched) == MIN_SURVIVORS:
            logger.warning(
                "Only two points were enriched; a surface needs at least three"
            )

        logger.info(
            f"Enriched {len(enriched)}/{total} points in {self.stats.batches} "
            f"batches of up to {batch_size}"
        )

        return enriched

    async def _enrich_batch(
        self,
        batch_index: int,
        indices: Sequence[int],
        points: Sequence[SamplePoint],
        elevations: List[Optional[float]],
    ) -> None:
        """
        Enrich one batch, retrying failed points.

        Args:
            batch_index: Position of the batch, for logging and errors
            indices: Point indices in this batch
            points: All sample points
            elevations: Output slots, filled in place
        """
        pending = list(indices)
        fetch_succeeded = False
        last_error: Optional[Exception] = None
        last_reason: Optional[str] = None

        for attempt in range(self.config.max_retries + 1):
            if attempt > 0:
                delay = exponential_backoff(
                    attempt - 1,
                    base_delay=self._delay_seconds,
                    max_delay=MAX_BACKOFF_SECONDS,
                )
                self.stats.retries += 1
                logger.debug(
                    f"Batch {batch_index}: retry {attempt}/{self.config.max_retries} "
                    f"for {len(pending)} points after {delay:.2f}s"
                )
                if delay > 0:
                    await asyncio.sleep(delay)

            coordinates = [points[i].coordinates for i in pending]
            try:
                results = await self.provider.fetch(coordinates)
            except Exception as e:
                last_error = e
                logger.warning(
                    f"Batch {batch_index}: provider {self.provider.name} failed "
                    f"(attempt {attempt + 1}): {type(e).__name__}: {e}"
                )
                continue

            if len(results) != len(pending):
                raise ProviderError(
                    f"Provider returned {len(results)} results for {len(pending)} points",
                    provider_name=self.provider.name,
                    batch_index=batch_index,
                    details={"expected": len(pending), "received": len(results)},
                )

            fetch_succeeded = True
            still_pending = []
            for index, result in zip(pending, results):
                elevation = validate_elevation(result)
                if elevation is None:
                    still_pending.append(index)
                    last_reason = failure_reason(result)
                else:
                    elevations[index] = elevation

            pending = still_pending
            if not pending:
                return

        attempts = self.config.max_retries + 1
        if not fetch_succeeded:
            raise ProviderError(
                f"Provider failed batch {batch_index} on all {attempts} attempts: {last_error}",
                provider_name=self.provider.name,
                batch_index=batch_index,
                details={"last_error": repr(last_error)},
            ) from last_error

        if len(pending) == len(indices):
            raise ProviderError(
                f"Provider resolved none of the {len(indices)} points of batch "
                f"{batch_index} in {attempts} attempts",
                provider_name=self.provider.name,
                batch_index=batch_index,
                details={"failed_points": len(indices), "last_reason": last_reason},
            )

        logger.debug(f"Batch {batch_index}: {len(pending)} points unresolved, dropping")
