from __future__ import annotations

import httpx
from django.conf import settings
from pydantic import ValidationError

from freight_router.exceptions import ResponseSchemaError
from freight_router.schemas import ElevationResponse
from freight_router.services.http import request_json
from freight_router.services.types import GeoPoint


class ElevationClient:
    """Looks up elevation samples from an Open-Elevation compatible endpoint."""

    def __init__(
        self,
        base_url: str = "https://api.open-elevation.com",
        *,
        batch_size: int = 100,
        timeout: float = 12.0,
        retry_count: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.batch_size = max(2, batch_size)
        self.timeout = timeout
        self.retry_count = retry_count
        self.transport = transport

    @classmethod
    def from_settings(cls) -> ElevationClient:
        return cls(
            settings.ELEVATION_BASE_URL,
            batch_size=settings.ELEVATION_BATCH_SIZE,
            timeout=settings.ELEVATION_TIMEOUT_SECONDS,
            retry_count=settings.ELEVATION_RETRY_COUNT,
        )

    async def elevations(self, points: list[GeoPoint]) -> list[float]:
        """Return elevations for an evenly spaced sample of at most ``batch_size`` points."""
        sampled = sample_points(points, self.batch_size)
        if not sampled:
            return []

        payload = await request_json(
            "POST",
            f"{self.base_url}/api/v1/lookup",
            service="Elevation",
            timeout=self.timeout,
            retry_count=self.retry_count,
            transport=self.transport,
            json={
                "locations": [
                    {"latitude": point.latitude, "longitude": point.longitude}
                    for point in sampled
                ]
            },
        )
        try:
            response = ElevationResponse.model_validate(payload)
        except ValidationError as exc:
            raise ResponseSchemaError("Invalid elevation response") from exc
        return [result.elevation for result in response.results]


def sample_points(points: list[GeoPoint], max_points: int) -> list[GeoPoint]:
    if len(points) <= max_points:
        return list(points)

    step = (len(points) - 1) / (max_points - 1)
    return [points[round(index * step)] for index in range(max_points)]
