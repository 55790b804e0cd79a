from __future__ import annotations

import pytest
from django.core.cache import cache
from django.test import Client

from freight_router.services.types import Location, RouteOption


@pytest.fixture
def api_client() -> Client:
    return Client()


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def chicago() -> Location:
    return Location(
        address="233 S Wacker Dr",
        city="Chicago",
        state="IL",
        postal_code="60606",
        date="2025-03-04",
        time="08:00",
    )


@pytest.fixture
def dallas() -> Location:
    return Location(
        address="500 Main St",
        city="Dallas",
        state="TX",
        postal_code="75202",
        date="2025-03-05",
        time="17:00",
    )


GOOGLE_SAMPLE_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


@pytest.fixture
def make_route_option():
    def _make(miles: float, hours: float, polylines: list[str] | None = None) -> RouteOption:
        return RouteOption(
            polylines=polylines if polylines is not None else [GOOGLE_SAMPLE_POLYLINE],
            toll_cost=12.5,
            fuel_cost=80.0,
            miles=miles,
            duration_hours=hours,
        )

    return _make
