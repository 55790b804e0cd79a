from __future__ import annotations

import asyncio
import logging

from django.conf import settings

from freight_router.exceptions import NoRouteFoundError
from freight_router.schemas import (
    ExcludedRouteResponse,
    LocationResponse,
    RankedRouteResponse,
    RoutePlanRequest,
    RoutePlanResponse,
    StopRequest,
)
from freight_router.services.completions import CompletionClient
from freight_router.services.elevation import ElevationClient
from freight_router.services.enrichment import RouteEnricher
from freight_router.services.here import HereClient
from freight_router.services.ranking import rank_candidates
from freight_router.services.scoring import DEFAULT_SCORING, ScoringConfig
from freight_router.services.types import Location, ResolvedAddress, RouteCandidate, StageStatus

logger = logging.getLogger(__name__)


class RoutePlannerService:
    def __init__(
        self,
        here_client: HereClient,
        enricher: RouteEnricher,
        scoring: ScoringConfig = DEFAULT_SCORING,
    ) -> None:
        self.here_client = here_client
        self.enricher = enricher
        self.scoring = scoring

    @classmethod
    def from_settings(cls) -> RoutePlannerService:
        return cls(
            here_client=HereClient.from_settings(),
            enricher=RouteEnricher(
                ElevationClient.from_settings(),
                CompletionClient.from_settings(),
                elevation_threshold=float(settings.ELEVATION_CHANGE_THRESHOLD),
                call_timeout=float(settings.ENRICHMENT_TIMEOUT_SECONDS),
                weather_temperature=float(settings.OPENAI_TEMPERATURE),
            ),
            scoring=ScoringConfig.from_settings(),
        )

    async def plan(self, request: RoutePlanRequest) -> RoutePlanResponse:
        pickup_address, delivery_address = await asyncio.gather(
            self.here_client.resolve_address(request.pickup.location),
            self.here_client.resolve_address(request.delivery.location),
        )
        pickup = _location(pickup_address, request.pickup)
        delivery = _location(delivery_address, request.delivery)

        options = await self.here_client.query_routes(
            pickup_address.point,
            delivery_address.point,
            transport_mode=request.transport_mode,
        )
        if not options:
            raise NoRouteFoundError("Could not compute route")

        results = await self.enricher.enrich_all(options, pickup, delivery)

        candidates: list[RouteCandidate] = []
        statuses: dict[int, StageStatus] = {}
        excluded: list[ExcludedRouteResponse] = []
        for index, result in enumerate(results):
            if not result.usable or result.value is None:
                excluded.append(ExcludedRouteResponse(index=index, reason="; ".join(result.errors)))
                continue
            statuses[id(result.value)] = result.status
            candidates.append(result.value)

        if not candidates:
            raise NoRouteFoundError("No route candidate could be evaluated")

        ranked = rank_candidates(candidates, self.scoring)
        logger.info(
            "Ranked %d route candidates from %s, %s to %s, %s (%d excluded)",
            len(ranked),
            pickup.city,
            pickup.state,
            delivery.city,
            delivery.state,
            len(excluded),
        )

        return RoutePlanResponse(
            pickup=_location_response(pickup),
            delivery=_location_response(delivery),
            contact=request.contact,
            cargo=request.cargo,
            routes=[
                RankedRouteResponse(
                    rank=candidate.rank or 0,
                    score=round(candidate.score or 0.0, 4),
                    toll_cost=round(candidate.toll_cost, 2),
                    fuel_cost=round(candidate.fuel_cost, 2),
                    miles=round(candidate.miles, 3),
                    duration_hours=round(candidate.duration_hours, 3),
                    adverse_conditions=list(candidate.adverse_conditions),
                    enrichment_status=statuses[id(candidate)].value,
                )
                for candidate in ranked
            ],
            excluded_routes=excluded,
        )


def _location(resolved: ResolvedAddress, stop: StopRequest) -> Location:
    return Location(
        address=resolved.address,
        city=resolved.city,
        state=resolved.state,
        postal_code=resolved.postal_code,
        date=stop.date or "",
        time=stop.time or "",
    )


def _location_response(location: Location) -> LocationResponse:
    return LocationResponse(
        address=location.address,
        city=location.city,
        state=location.state,
        postal_code=location.postal_code,
        date=location.date,
        time=location.time,
    )
