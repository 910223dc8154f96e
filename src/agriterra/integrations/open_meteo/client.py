"""
Open-Meteo elevation API client.

The API answers up to 100 coordinates per request:

    GET {base}/v1/elevation?latitude=52.52,48.85&longitude=13.41,2.35
    -> {"elevation": [38.0, 43.0]}
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

# Coordinates accepted by a single Open-Meteo request
MAX_COORDINATES_PER_REQUEST = 100

RETRYABLE_EXCEPTIONS = (httpx.TransportError, httpx.HTTPStatusError)


class OpenMeteoClientConfig(BaseModel):
    """Configuration for the Open-Meteo elevation client."""

    base_url: str = Field(
        default_factory=lambda: settings.open_meteo_base_url,
        description="Base URL of the Open-Meteo API",
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
    rate_limit_calls: int = Field(default=10, description="Max calls per time window", ge=1)
    rate_limit_period: float = Field(default=1.0, description="Rate limit window in seconds", gt=0.0)
    chunk_size: int = Field(
        default=MAX_COORDINATES_PER_REQUEST,
        description="Coordinates per request",
        ge=1,
        le=MAX_COORDINATES_PER_REQUEST,
    )


class OpenMeteoElevationClient(ElevationProvider):
    """
    ElevationProvider backed by the Open-Meteo elevation API.

    A batch is split into chunks of at most 100 coordinates which are
    requested concurrently. A chunk that fails after retries yields an
    ElevationFailure for each of its coordinates.
    """

    name = "open-meteo"

    def __init__(
        self,
        config: Optional[OpenMeteoClientConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration
            client: Existing httpx client to reuse; created when omitted
        """
        self.config = config or OpenMeteoClientConfig()
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

        logger.info(f"Open-Meteo client initialized with base URL: {self.config.base_url}")

    async def __aenter__(self) -> "OpenMeteoElevationClient":
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
        return f"{self.config.base_url.rstrip('/')}/v1/elevation"

    async def _make_request(self, params: Dict[str, str]) -> Dict[str, Any]:
        """
        Rate-limited GET returning the decoded JSON body.

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx status
        """
        await self.rate_limiter.wait()
        logger.debug(f"Making request to {self.endpoint} with params: {params}")
        response = await self.client.get(self.endpoint, params=params)
        response.raise_for_status()
        return response.json()

    async def _fetch_chunk(self, chunk: Sequence[Tuple[float, float]]) -> List[ElevationResult]:
        params = {
            "latitude": ",".join(f"{lat:.6f}" for _lon, lat in chunk),
            "longitude": ",".join(f"{lon:.6f}" for lon, _lat in chunk),
        }

        try:
            data = await self._request(params)
        except httpx.HTTPStatusError as e:
            logger.error(f"Open-Meteo request failed with status {e.response.status_code}")
            return [
                ElevationFailure(
                    longitude=lon,
                    latitude=lat,
                    reason=f"HTTP {e.response.status_code}",
                    status_code=e.response.status_code,
                )
                for lon, lat in chunk
            ]
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Open-Meteo request failed: {e}")
            return [ElevationFailure(longitude=lon, latitude=lat, reason=str(e)) for lon, lat in chunk]

        values = data.get("elevation") if isinstance(data, dict) else None
        if not isinstance(values, list) or len(values) != len(chunk):
            logger.warning(
                f"Unexpected Open-Meteo payload for {len(chunk)} coordinates: {str(data)[:200]}"
            )
            return [
                ElevationFailure(longitude=lon, latitude=lat, reason="malformed response")
                for lon, lat in chunk
            ]

        return [
            ElevationPoint(
                longitude=lon,
                latitude=lat,
                elevation=value,
                data_source=ElevationDataSource.OPEN_METEO,
            )
            for (lon, lat), value in zip(chunk, values)
        ]

    @log_async_performance()
    async def fetch(self, points: Sequence[Tuple[float, float]]) -> List[ElevationResult]:
        """
        Elevations for a batch of (lon, lat) coordinates, in input order.

        Args:
            points: Coordinates to resolve

        Returns:
            One ElevationPoint or ElevationFailure per coordinate
        """
        size = self.config.chunk_size
        chunks = [points[i : i + size] for i in range(0, len(points), size)]
        chunk_results = await asyncio.gather(*(self._fetch_chunk(c) for c in chunks))

        results: List[ElevationResult] = []
        for chunk_result in chunk_results:
            results.extend(chunk_result)
        return results
