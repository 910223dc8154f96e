"""
Tests for the Open-Meteo elevation client.

Tests cover:
- Request parameters and chunking
- Response parsing
- Retries and per-chunk failures
"""

import logging
from typing import List

import httpx
import pytest
import respx

from agriterra.integrations.open_meteo import (
    MAX_COORDINATES_PER_REQUEST,
    OpenMeteoClientConfig,
    OpenMeteoElevationClient,
)
from agriterra.models.elevation import ElevationDataSource, ElevationFailure, ElevationPoint

BASE_URL = "https://open-meteo.test"
ENDPOINT = f"{BASE_URL}/v1/elevation"


def make_client(**overrides: object) -> OpenMeteoElevationClient:
    """Client against the test base URL without backoff delays."""
    options = {"base_url": BASE_URL, "retry_backoff_factor": 0.0, "rate_limit_calls": 1000}
    options.update(overrides)
    return OpenMeteoElevationClient(config=OpenMeteoClientConfig(**options))


def echo_latitudes(request: httpx.Request) -> httpx.Response:
    """Answer with each requested latitude as its elevation."""
    latitudes = [float(v) for v in request.url.params["latitude"].split(",")]
    return httpx.Response(200, json={"elevation": latitudes})


class TestOpenMeteoConfig:
    """Tests for client configuration."""

    def test_defaults(self) -> None:
        """Test configuration defaults."""
        config = OpenMeteoClientConfig()
        assert config.base_url.startswith("https://")
        assert config.max_retries == 2
        assert config.chunk_size == MAX_COORDINATES_PER_REQUEST

    def test_chunk_size_limit(self) -> None:
        """Test chunks cannot exceed the API limit."""
        with pytest.raises(ValueError):
            OpenMeteoClientConfig(chunk_size=MAX_COORDINATES_PER_REQUEST + 1)


@pytest.mark.asyncio
class TestOpenMeteoClient:
    """Tests for OpenMeteoElevationClient."""

    async def test_context_manager(self) -> None:
        """Test the client closes its HTTP client on exit."""
        async with make_client() as client:
            assert client.name == "open-meteo"
        assert client.client.is_closed

    @respx.mock
    async def test_fetch_success(self) -> None:
        """Test a batch resolves to points in request order."""
        route = respx.get(ENDPOINT).mock(
            return_value=httpx.Response(200, json={"elevation": [38.0, 43.0]})
        )

        async with make_client() as client:
            results = await client.fetch([(13.41, 52.52), (2.35, 48.85)])

        assert route.call_count == 1
        params = route.calls.last.request.url.params
        assert params["latitude"] == "52.520000,48.850000"
        assert params["longitude"] == "13.410000,2.350000"

        assert all(isinstance(r, ElevationPoint) for r in results)
        assert [r.elevation for r in results] == [38.0, 43.0]
        assert results[0].data_source == ElevationDataSource.OPEN_METEO

    @respx.mock
    async def test_fetch_is_timed(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test each fetch logs its duration."""
        respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json={"elevation": [1.0]}))

        with caplog.at_level(logging.DEBUG, logger="agriterra.utils.logging"):
            async with make_client() as client:
                await client.fetch([(1.0, 2.0)])

        assert any("OpenMeteoElevationClient.fetch executed in" in r.message for r in caplog.records)

    @respx.mock
    async def test_large_batches_are_chunked(self) -> None:
        """Test batches above the chunk size are split and reassembled in order."""
        route = respx.get(ENDPOINT).mock(side_effect=echo_latitudes)
        points = [(10.0, 40.0 + i * 0.001) for i in range(250)]

        async with make_client() as client:
            results = await client.fetch(points)

        assert route.call_count == 3
        assert len(results) == 250
        assert [r.elevation for r in results] == pytest.approx([lat for _lon, lat in points])

    @respx.mock
    async def test_http_error_is_retried_then_reported(self) -> None:
        """Test a persistent 5xx yields a failure per coordinate after retries."""
        route = respx.get(ENDPOINT).mock(return_value=httpx.Response(503))

        async with make_client(max_retries=2) as client:
            results = await client.fetch([(1.0, 2.0), (3.0, 4.0)])

        assert route.call_count == 3
        assert all(isinstance(r, ElevationFailure) for r in results)
        assert results[0].status_code == 503

    @respx.mock
    async def test_client_error_is_not_retried(self) -> None:
        """Test a 400 response fails the chunk without another attempt."""
        route = respx.get(ENDPOINT).mock(return_value=httpx.Response(400, json={"reason": "bad"}))

        async with make_client(max_retries=2) as client:
            results = await client.fetch([(1.0, 2.0)])

        assert route.call_count == 1
        assert isinstance(results[0], ElevationFailure)
        assert results[0].status_code == 400

    @respx.mock
    async def test_throttling_is_retried(self) -> None:
        """Test a 429 response is retried."""
        route = respx.get(ENDPOINT)
        route.side_effect = [
            httpx.Response(429),
            httpx.Response(200, json={"elevation": [7.0]}),
        ]

        async with make_client() as client:
            results = await client.fetch([(1.0, 2.0)])

        assert route.call_count == 2
        assert results[0].elevation == 7.0

    @respx.mock
    async def test_transient_error_recovers(self) -> None:
        """Test a single transport error is retried transparently."""
        route = respx.get(ENDPOINT)
        route.side_effect = [
            httpx.ConnectError("refused"),
            httpx.Response(200, json={"elevation": [12.5]}),
        ]

        async with make_client() as client:
            results = await client.fetch([(1.0, 2.0)])

        assert route.call_count == 2
        assert isinstance(results[0], ElevationPoint)
        assert results[0].elevation == 12.5

    @respx.mock
    async def test_malformed_payload(self) -> None:
        """Test a count mismatch marks the whole chunk as failed."""
        respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json={"elevation": [1.0]}))

        async with make_client() as client:
            results: List = await client.fetch([(1.0, 2.0), (3.0, 4.0)])

        assert [r.reason for r in results] == ["malformed response", "malformed response"]

    @respx.mock
    async def test_null_values_pass_through(self) -> None:
        """Test null elevations are returned for the enricher to reject."""
        respx.get(ENDPOINT).mock(return_value=httpx.Response(200, json={"elevation": [None]}))

        async with make_client() as client:
            results = await client.fetch([(1.0, 2.0)])

        assert isinstance(results[0], ElevationPoint)
        assert results[0].elevation is None
