from __future__ import annotations

import httpx
import pytest

from freight_router.exceptions import ExternalServiceError, InvalidLocationError, NoRouteFoundError
from freight_router.schemas import RoutePlanRequest
from freight_router.services.enrichment import RouteEnricher
from freight_router.services.here import HereClient
from freight_router.services.planner import RoutePlannerService
from freight_router.services.types import GeoPoint, ResolvedAddress

ADDRESSES = {
    "Chicago, IL": ResolvedAddress(
        address="", city="Chicago", state="IL", postal_code="60602", point=GeoPoint(41.8781, -87.6298)
    ),
    "Dallas, TX": ResolvedAddress(
        address="", city="Dallas", state="TX", postal_code="75201", point=GeoPoint(32.7767, -96.797)
    ),
}


def _request(**overrides) -> RoutePlanRequest:
    payload = {
        "pickup": {"location": "Chicago, IL", "date": "2025-03-04", "time": "08:00"},
        "delivery": {"location": "Dallas, TX"},
        "contact": {"name": "A", "email": "a@x.com", "phone": "555"},
    }
    payload.update(overrides)
    return RoutePlanRequest.model_validate(payload)


def _planner(mocker, options, *, weather="NONE", elevations=None) -> RoutePlannerService:
    here_client = mocker.Mock()

    async def resolve(query: str) -> ResolvedAddress:
        if query not in ADDRESSES:
            raise InvalidLocationError("Location could not be resolved")
        return ADDRESSES[query]

    here_client.resolve_address = mocker.AsyncMock(side_effect=resolve)
    here_client.query_routes = mocker.AsyncMock(return_value=options)

    elevation_client = mocker.Mock()
    elevation_client.elevations = mocker.AsyncMock(return_value=elevations or [200.0, 220.0])
    completion_client = mocker.Mock()
    if callable(weather):
        completion_client.complete = mocker.AsyncMock(side_effect=weather)
    else:
        completion_client.complete = mocker.AsyncMock(return_value=weather)

    return RoutePlannerService(here_client, RouteEnricher(elevation_client, completion_client))


@pytest.mark.asyncio
async def test_shorter_faster_route_ranks_first(mocker, make_route_option) -> None:
    planner = _planner(mocker, [make_route_option(900.0, 14.0), make_route_option(300.0, 5.0)])

    response = await planner.plan(_request())

    assert [route.rank for route in response.routes] == [1, 2]
    assert response.routes[0].miles == 300.0
    assert response.routes[0].duration_hours == 5.0
    assert response.routes[1].miles == 900.0
    assert response.routes[0].score > response.routes[1].score
    assert response.routes[1].score == pytest.approx(0.3)
    assert all(route.adverse_conditions == [] for route in response.routes)
    assert response.excluded_routes == []


@pytest.mark.asyncio
async def test_response_echoes_order_details(mocker, make_route_option) -> None:
    planner = _planner(mocker, [make_route_option(300.0, 5.0)])

    response = await planner.plan(_request(cargo={"cargo_type": "Dry van"}))

    assert response.pickup.city == "Chicago"
    assert response.pickup.date == "2025-03-04"
    assert response.pickup.time == "08:00"
    assert response.delivery.state == "TX"
    assert response.delivery.date == ""
    assert response.contact.email == "a@x.com"
    assert response.cargo.cargo_type == "Dry van"
    planner.here_client.query_routes.assert_awaited_once_with(
        ADDRESSES["Chicago, IL"].point,
        ADDRESSES["Dallas, TX"].point,
        transport_mode="truck",
    )


@pytest.mark.asyncio
async def test_weather_failure_for_one_candidate_keeps_all_candidates(mocker, make_route_option) -> None:
    async def weather(messages, **_):
        if "450 miles" in messages[1]["content"]:
            raise ExternalServiceError("Completion request failed")
        return "Strong crosswinds expected"

    options = [
        make_route_option(300.0, 5.0),
        make_route_option(450.0, 7.0),
        make_route_option(600.0, 9.0),
    ]
    planner = _planner(mocker, options, weather=weather)

    response = await planner.plan(_request())

    assert len(response.routes) == 3
    assert [route.rank for route in response.routes] == [1, 2, 3]
    by_miles = {route.miles: route for route in response.routes}
    assert by_miles[450.0].adverse_conditions == []
    assert by_miles[450.0].enrichment_status == "partial"
    assert by_miles[300.0].adverse_conditions == ["Strong crosswinds expected"]
    assert by_miles[300.0].enrichment_status == "ok"


@pytest.mark.asyncio
async def test_undecodable_candidate_is_excluded(mocker, make_route_option) -> None:
    options = [make_route_option(300.0, 5.0, polylines=["_p~i"]), make_route_option(500.0, 8.0)]
    planner = _planner(mocker, options)

    response = await planner.plan(_request())

    assert len(response.routes) == 1
    assert response.routes[0].miles == 500.0
    assert response.routes[0].rank == 1
    assert response.excluded_routes[0].index == 0


@pytest.mark.asyncio
async def test_all_candidates_excluded_is_fatal(mocker, make_route_option) -> None:
    planner = _planner(mocker, [make_route_option(300.0, 5.0, polylines=["_p~iF"])])

    with pytest.raises(NoRouteFoundError):
        await planner.plan(_request())


@pytest.mark.asyncio
async def test_empty_route_query_is_fatal(mocker) -> None:
    planner = _planner(mocker, [])

    with pytest.raises(NoRouteFoundError):
        await planner.plan(_request())


@pytest.mark.asyncio
async def test_unresolvable_address_is_fatal(mocker, make_route_option) -> None:
    planner = _planner(mocker, [make_route_option(300.0, 5.0)])

    with pytest.raises(InvalidLocationError):
        await planner.plan(_request(delivery={"location": "Nowhere Land"}))

    planner.here_client.query_routes.assert_not_awaited()


@pytest.mark.asyncio
async def test_plan_ranks_routes_from_here_flexible_polylines(mocker) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if "geocode" in request.url.host:
            position = {"lat": 41.8781, "lng": -87.6298}
            if request.url.params["q"].startswith("Dallas"):
                position = {"lat": 32.7767, "lng": -96.797}
            return httpx.Response(200, json={"items": [{"address": {}, "position": position}]})
        section = {
            "polyline": "BFoz5xJ67i1B1B7PzIhaxL7Y",
            "summary": {"length": 482803.2, "duration": 18000},
        }
        return httpx.Response(200, json={"routes": [{"sections": [section]}]})

    here_client = HereClient("key", transport=httpx.MockTransport(handler))
    elevation_client = mocker.Mock()
    elevation_client.elevations = mocker.AsyncMock(return_value=[200.0, 220.0])
    completion_client = mocker.Mock()
    completion_client.complete = mocker.AsyncMock(return_value="NONE")
    planner = RoutePlannerService(here_client, RouteEnricher(elevation_client, completion_client))

    response = await planner.plan(_request())

    assert response.excluded_routes == []
    assert [route.rank for route in response.routes] == [1]
    assert response.routes[0].miles == pytest.approx(300.0, rel=1e-4)
    sent_points = elevation_client.elevations.await_args.args[0]
    assert len(sent_points) == 4
    assert sent_points[0].latitude == pytest.approx(50.10228)
