from __future__ import annotations

import hashlib
from typing import Any

import flexpolyline
import httpx
from django.conf import settings
from django.core.cache import cache
from pydantic import ValidationError

from freight_router.exceptions import (
    InvalidLocationError,
    NoRouteFoundError,
    PolylineDecodeError,
    ResponseSchemaError,
)
from freight_router.schemas import HereGeocodeResponse, HereRoute, HereRoutesResponse
from freight_router.services.http import request_json
from freight_router.services.polyline import encode_polyline
from freight_router.services.types import GeoPoint, ResolvedAddress, RouteOption

METERS_TO_MILES = 0.000621371
SECONDS_PER_HOUR = 3600.0


class HereClient:
    """Address resolution and route queries against the HERE v8 APIs."""

    def __init__(
        self,
        api_key: str,
        *,
        geocode_url: str = "https://geocode.search.hereapi.com/v1/geocode",
        router_url: str = "https://router.hereapi.com/v8/routes",
        timeout: float = 12.0,
        retry_count: int = 2,
        alternatives: int = 3,
        fuel_price_per_unit: float = 0.0,
        geocode_cache_ttl: int = 86400,
        route_cache_ttl: int = 600,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.geocode_url = geocode_url
        self.router_url = router_url
        self.timeout = timeout
        self.retry_count = retry_count
        self.alternatives = alternatives
        self.fuel_price_per_unit = fuel_price_per_unit
        self.geocode_cache_ttl = geocode_cache_ttl
        self.route_cache_ttl = route_cache_ttl
        self.transport = transport

    @classmethod
    def from_settings(cls) -> HereClient:
        return cls(
            settings.HERE_API_KEY,
            geocode_url=settings.HERE_GEOCODE_URL,
            router_url=settings.HERE_ROUTER_URL,
            timeout=settings.HERE_TIMEOUT_SECONDS,
            retry_count=settings.HERE_RETRY_COUNT,
            alternatives=settings.HERE_ROUTE_ALTERNATIVES,
            fuel_price_per_unit=settings.FUEL_PRICE_PER_UNIT,
            geocode_cache_ttl=settings.GEOCODE_CACHE_TTL_SECONDS,
            route_cache_ttl=settings.ROUTE_CACHE_TTL_SECONDS,
        )

    async def resolve_address(self, query: str) -> ResolvedAddress:
        cache_key = self._cache_key("geocode", query.lower())
        cached = await cache.aget(cache_key)
        if cached:
            return ResolvedAddress(
                address=cached["address"],
                city=cached["city"],
                state=cached["state"],
                postal_code=cached["postal_code"],
                point=GeoPoint(latitude=cached["latitude"], longitude=cached["longitude"]),
            )

        payload = await request_json(
            "GET",
            self.geocode_url,
            service="HERE geocoding",
            timeout=self.timeout,
            retry_count=self.retry_count,
            transport=self.transport,
            params={"q": query, "limit": 1, "apiKey": self.api_key},
            headers={"Accept": "application/json"},
        )
        result = self._parse_geocode(payload)
        await cache.aset(
            cache_key,
            {
                "address": result.address,
                "city": result.city,
                "state": result.state,
                "postal_code": result.postal_code,
                "latitude": result.point.latitude,
                "longitude": result.point.longitude,
            },
            timeout=self.geocode_cache_ttl,
        )
        return result

    async def query_routes(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        *,
        transport_mode: str = "truck",
    ) -> list[RouteOption]:
        cache_key = self._cache_key(
            "route",
            f"{transport_mode}|{origin.latitude:.5f}:{origin.longitude:.5f}"
            f"|{destination.latitude:.5f}:{destination.longitude:.5f}",
        )
        cached = await cache.aget(cache_key)
        if cached:
            return [RouteOption(**option) for option in cached]

        payload = await request_json(
            "GET",
            self.router_url,
            service="HERE routing",
            timeout=self.timeout,
            retry_count=self.retry_count,
            transport=self.transport,
            params={
                "origin": f"{origin.latitude},{origin.longitude}",
                "destination": f"{destination.latitude},{destination.longitude}",
                "transportMode": transport_mode,
                "alternatives": self.alternatives,
                "return": "polyline,summary,tolls",
                "apiKey": self.api_key,
            },
        )
        options = self._parse_routes(payload)
        await cache.aset(
            cache_key,
            [
                {
                    "polylines": option.polylines,
                    "toll_cost": option.toll_cost,
                    "fuel_cost": option.fuel_cost,
                    "miles": option.miles,
                    "duration_hours": option.duration_hours,
                    "geometry_error": option.geometry_error,
                }
                for option in options
            ],
            timeout=self.route_cache_ttl,
        )
        return options

    @staticmethod
    def _cache_key(prefix: str, value: str) -> str:
        digest = hashlib.sha256(value.encode()).hexdigest()
        return f"here:{prefix}:{digest}"

    @staticmethod
    def _parse_geocode(payload: Any) -> ResolvedAddress:
        try:
            response = HereGeocodeResponse.model_validate(payload)
        except ValidationError as exc:
            raise ResponseSchemaError("Invalid geocoding response") from exc

        if not response.items:
            raise InvalidLocationError("Location could not be resolved")

        first = response.items[0]
        street = " ".join(part for part in (first.address.house_number, first.address.street) if part)
        return ResolvedAddress(
            address=street or first.address.label,
            city=first.address.city,
            state=first.address.state_code or first.address.state,
            postal_code=first.address.postal_code,
            point=GeoPoint(latitude=first.position.lat, longitude=first.position.lng),
        )

    def _parse_routes(self, payload: Any) -> list[RouteOption]:
        try:
            response = HereRoutesResponse.model_validate(payload)
        except ValidationError as exc:
            raise ResponseSchemaError("Invalid routing response") from exc

        options = [self._route_option(route) for route in response.routes if route.sections]
        if not options:
            raise NoRouteFoundError("Could not compute route")
        return options

    def _route_option(self, route: HereRoute) -> RouteOption:
        length_meters = sum(section.summary.length for section in route.sections)
        duration_seconds = sum(section.summary.duration for section in route.sections)
        consumption = sum(section.summary.consumption for section in route.sections)
        toll_cost = sum(
            toll.fares[0].price.value
            for section in route.sections
            for toll in section.tolls
            if toll.fares
        )
        geometry_error = None
        try:
            polylines = [reencode_flexible_polyline(section.polyline) for section in route.sections]
        except PolylineDecodeError as exc:
            polylines = []
            geometry_error = str(exc)

        return RouteOption(
            polylines=polylines,
            toll_cost=toll_cost,
            fuel_cost=consumption * self.fuel_price_per_unit,
            miles=length_meters * METERS_TO_MILES,
            duration_hours=duration_seconds / SECONDS_PER_HOUR,
            geometry_error=geometry_error,
        )


def reencode_flexible_polyline(flexible: str) -> str:
    """Convert a HERE flexible polyline section into an encoded polyline at 1e-5 precision.

    HERE v8 returns geometry in its own header-prefixed base64url format. Re-encoding keeps
    one polyline format downstream of the client.
    """
    if not flexible:
        return ""
    try:
        coordinates = flexpolyline.decode(flexible)
    except (ValueError, IndexError) as exc:
        raise PolylineDecodeError(f"Invalid flexible polyline: {exc}") from exc
    return encode_polyline(
        [GeoPoint(latitude=coordinate[0], longitude=coordinate[1]) for coordinate in coordinates]
    )
