"""
GMRT (Global Multi-Resolution Topography) point server client.

One coordinate per request:

    GET {base}/services/PointServer?longitude=-73.5&latitude=40.1&format=json
    -> {"elevation": "-52"}

GMRT covers bathymetry as well as land, so it is a useful fallback for
coastal parcels.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from pydantic import BaseModel, Field

from agriterra.core.config import settings
from agriterra.core.elevation.provider import ElevationProvider
from agriterra.core.retry import async_retry
from agriterra.integrations.rate_limit import RateLimiter
from agriterra.models.elevation import (
    ElevationDataSource,
    ElevationFailure,
    ElevationPoint,
    ElevationResult,
)
from agriterra.utils.logging import log_async_performance

logger = logging.getLogger(__name__)

RETRYABLE_EXCEPTIONS = (httpx.TransportError, httpx.HTTPStatusError)


class GMRTClientConfig(BaseModel):
    """Configuration for the GMRT point server client."""

    base_url: str = Field(
        default_factory=lambda: settings.gmrt_base_url,
        description="Base URL of the GMRT web services",
    )
    timeout: float = Field(
        default_factory=lambda: settings.provider_timeout,
        description="Request timeout in seconds",
        gt=0.0,
        le=60.0,
    )
    max_retries: int = Field(default=2, description="Retries after the first attempt", ge=0, le=10)
    retry_backoff_factor: float = Field(
        default=0.5, description="Exponential backoff base delay in seconds", ge=0.0, le=10.0
    )
    rate_limit_calls: int = Field(default=20, description="Max calls per time window", ge=1)
    rate_limit_period: float = Field(default=1.0, description="Rate limit window in seconds", gt=0.0)


class GMRTElevationClient(ElevationProvider):
    """ElevationProvider backed by the GMRT PointServer, one request per point."""

    name = "gmrt"

    def __init__(
        self,
        config: Optional[GMRTClientConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration
            client: Existing httpx client to reuse; created when omitted
        """
        self.config = config or GMRTClientConfig()
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout),
            follow_redirects=True,
        )
        self.rate_limiter = RateLimiter(
            self.config.rate_limit_calls,
            self.config.rate_limit_period,
        )
        self._request = async_retry(
            max_attempts=self.config.max_retries + 1,
            base_delay=self.config.retry_backoff_factor,
            retryable_exceptions=RETRYABLE_EXCEPTIONS,
        )(self._make_request)

        logger.info(f"GMRT client initialized with base URL: {self.config.base_url}")

    async def __aenter__(self) -> "GMRTElevationClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/services/PointServer"

    async def _make_request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        await self.rate_limiter.wait()
        logger.debug(f"Making request to {self.endpoint} with params: {params}")
        response = await self.client.get(self.endpoint, params=params)
        response.raise_for_status()
        return response.json()

    async def query_point(self, longitude: float, latitude: float) -> ElevationResult:
        """
        Elevation of a single coordinate.

        Args:
            longitude: Longitude (WGS84)
            latitude: Latitude (WGS84)

        Returns:
            ElevationPoint, or ElevationFailure if the request or payload fails
        """
        params = {"longitude": longitude, "latitude": latitude, "format": "json"}

        try:
            data = await self._request(params)
        except httpx.HTTPStatusError as e:
            logger.error(
                f"GMRT request for ({longitude}, {latitude}) failed with "
                f"status {e.response.status_code}"
            )
            return ElevationFailure(
                longitude=longitude,
                latitude=latitude,
                reason=f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"GMRT request for ({longitude}, {latitude}) failed: {e}")
            return ElevationFailure(longitude=longitude, latitude=latitude, reason=str(e))

        raw = data.get("elevation") if isinstance(data, dict) else None
        try:
            elevation = float(raw)
        except (TypeError, ValueError):
            logger.warning(f"No elevation in GMRT response for ({longitude}, {latitude}): {data}")
            return ElevationFailure(longitude=longitude, latitude=latitude, reason="missing elevation")

        return ElevationPoint(
            longitude=longitude,
            latitude=latitude,
            elevation=elevation,
            data_source=ElevationDataSource.GMRT,
        )

    @log_async_performance()
    async def fetch(self, points: Sequence[Tuple[float, float]]) -> List[ElevationResult]:
        """
        Elevations for a batch of (lon, lat) coordinates, requested concurrently.

        Args:
            points: Coordinates to resolve

        Returns:
            One ElevationPoint or ElevationFailure per coordinate, in input order
        """
        tasks = [self.query_point(lon, lat) for lon, lat in points]
        return list(await asyncio.gather(*tasks))
