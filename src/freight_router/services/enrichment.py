from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from freight_router.exceptions import FreightRouterError, PolylineDecodeError
from freight_router.services.completions import CompletionClient
from freight_router.services.elevation import ElevationClient
from freight_router.services.polyline import decode_polylines
from freight_router.services.types import GeoPoint, Location, RouteCandidate, RouteOption, StageResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

ELEVATION_CONDITION = "Significant elevation changes along route"
NO_CONDITIONS_REPLY = "NONE"


def derive_adverse_conditions(
    weather_text: str,
    elevations: list[float],
    elevation_threshold: float = 500.0,
) -> list[str]:
    conditions: list[str] = []
    if weather_text:
        conditions.append(weather_text)
    if has_significant_elevation_change(elevations, elevation_threshold):
        conditions.append(ELEVATION_CONDITION)
    return conditions


def has_significant_elevation_change(elevations: list[float], threshold: float) -> bool:
    return any(abs(current - previous) > threshold for previous, current in zip(elevations, elevations[1:]))


def weather_prompt(
    origin: Location, destination: Location, option: RouteOption
) -> list[dict[str, str]]:
    when = " ".join(part for part in (origin.date, origin.time) if part) or "the next available day"
    return [
        {
            "role": "system",
            "content": (
                "You assess weather and road hazards for commercial truck routes. "
                "Answer in one or two sentences."
            ),
        },
        {
            "role": "user",
            "content": (
                f"Origin: {origin.city}, {origin.state} {origin.postal_code}\n"
                f"Destination: {destination.city}, {destination.state} {destination.postal_code}\n"
                f"Departure: {when}\n"
                f"Route: {option.miles:.0f} miles, about {option.duration_hours:.1f} hours of driving\n\n"
                "Describe any adverse weather or hazardous road conditions a truck driver should "
                f"expect on this trip. If there are none, reply with exactly {NO_CONDITIONS_REPLY}."
            ),
        },
    ]


class RouteEnricher:
    """Attaches elevation and weather derived conditions to route options.

    Elevation and weather lookups are best-effort: a failure or timeout degrades the
    candidate to a partial result. A polyline that cannot be decoded fails the candidate.
    """

    def __init__(
        self,
        elevation_client: ElevationClient,
        completion_client: CompletionClient,
        *,
        elevation_threshold: float = 500.0,
        call_timeout: float = 20.0,
        weather_temperature: float = 0.3,
    ) -> None:
        self.elevation_client = elevation_client
        self.completion_client = completion_client
        self.elevation_threshold = elevation_threshold
        self.call_timeout = call_timeout
        self.weather_temperature = weather_temperature

    async def enrich_all(
        self,
        options: list[RouteOption],
        origin: Location,
        destination: Location,
    ) -> list[StageResult[RouteCandidate]]:
        return list(
            await asyncio.gather(
                *(
                    self.enrich(index, option, origin, destination)
                    for index, option in enumerate(options)
                )
            )
        )

    async def enrich(
        self,
        index: int,
        option: RouteOption,
        origin: Location,
        destination: Location,
    ) -> StageResult[RouteCandidate]:
        try:
            if option.geometry_error:
                raise PolylineDecodeError(option.geometry_error)
            waypoints = decode_polylines(option.polylines)
        except PolylineDecodeError as exc:
            logger.warning("Excluding route candidate %d: %s", index, exc)
            return StageResult.failed(f"Route geometry could not be decoded: {exc}")

        errors: list[str] = []
        elevations, weather_text = await asyncio.gather(
            self._recoverable(self._elevations(waypoints), [], "elevation", index, errors),
            self._recoverable(self._weather(origin, destination, option), "", "weather", index, errors),
        )

        candidate = RouteCandidate(
            toll_cost=option.toll_cost or 0.0,
            fuel_cost=option.fuel_cost or 0.0,
            miles=option.miles or 0.0,
            duration_hours=option.duration_hours or 0.0,
            adverse_conditions=derive_adverse_conditions(
                weather_text, elevations, self.elevation_threshold
            ),
        )
        if errors:
            return StageResult.partial(candidate, errors)
        return StageResult.ok(candidate)

    async def _elevations(self, waypoints: list[GeoPoint]) -> list[float]:
        return await self.elevation_client.elevations(waypoints)

    async def _weather(self, origin: Location, destination: Location, option: RouteOption) -> str:
        text = await self.completion_client.complete(
            weather_prompt(origin, destination, option), temperature=self.weather_temperature
        )
        if text.strip().upper().rstrip(".") == NO_CONDITIONS_REPLY:
            return ""
        return text

    async def _recoverable(
        self,
        call: Awaitable[T],
        default: T,
        name: str,
        index: int,
        errors: list[str],
    ) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.call_timeout)
        except asyncio.TimeoutError:
            logger.warning("%s lookup timed out for route candidate %d", name, index)
            errors.append(f"{name} lookup timed out")
        except FreightRouterError as exc:
            logger.warning("%s lookup failed for route candidate %d: %s", name, index, exc)
            errors.append(f"{name} lookup failed: {exc}")
        return default
