from __future__ import annotations

import json
import logging
from typing import Any

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST
from pydantic import BaseModel, ValidationError

from freight_router.exceptions import (
    ExternalServiceError,
    InvalidLocationError,
    NoRouteFoundError,
    OfferGenerationError,
    OrderParsingError,
)
from freight_router.models import RoutePlan
from freight_router.schemas import EmailParseRequest, OfferEmailRequest, RoutePlanRequest
from freight_router.services.completions import CompletionClient
from freight_router.services.email_parser import EmailParser
from freight_router.services.offer_email import generate_offer_email
from freight_router.services.planner import RoutePlannerService

logger = logging.getLogger(__name__)

_planner_service: RoutePlannerService | None = None
_email_parser: EmailParser | None = None


def get_route_planner() -> RoutePlannerService:
    global _planner_service
    if _planner_service is None:
        _planner_service = RoutePlannerService.from_settings()
    return _planner_service


def get_email_parser() -> EmailParser:
    global _email_parser
    if _email_parser is None:
        _email_parser = EmailParser(
            CompletionClient.from_settings(), temperature=float(settings.OPENAI_TEMPERATURE)
        )
    return _email_parser


@require_GET
async def health_view(_: HttpRequest) -> HttpResponse:
    total_plans = await RoutePlan.objects.acount()
    return JsonResponse({"status": "ok", "route_plans": {"total": total_plans}})


@csrf_exempt
@require_POST
async def route_plan_view(request: HttpRequest) -> HttpResponse:
    route_request = _validated(request, RoutePlanRequest)
    if isinstance(route_request, JsonResponse):
        return route_request

    planner = get_route_planner()
    try:
        response = await planner.plan(route_request)
    except InvalidLocationError as exc:
        return _error_response("invalid_location", str(exc), status=400)
    except NoRouteFoundError as exc:
        return _error_response("no_route", str(exc), status=502)
    except ExternalServiceError as exc:
        logger.error("Route planning failed upstream: %s", exc)
        return _error_response("upstream_error", str(exc), status=502)

    record = RoutePlan.from_response(response)
    await record.asave()
    response.plan_id = record.pk
    return JsonResponse(response.model_dump(mode="json"), status=200)


@csrf_exempt
@require_POST
async def email_parse_view(request: HttpRequest) -> HttpResponse:
    parse_request = _validated(request, EmailParseRequest)
    if isinstance(parse_request, JsonResponse):
        return parse_request

    parser = get_email_parser()
    try:
        details = await parser.parse(parse_request.subject, parse_request.body)
    except OrderParsingError as exc:
        return _error_response("order_parsing_error", str(exc), status=422)
    except ExternalServiceError as exc:
        logger.error("Email parsing failed upstream: %s", exc)
        return _error_response("upstream_error", str(exc), status=502)

    return JsonResponse(details.model_dump(mode="json", by_alias=True), status=200)


@csrf_exempt
@require_POST
def offer_email_view(request: HttpRequest) -> HttpResponse:
    offer_request = _validated(request, OfferEmailRequest)
    if isinstance(offer_request, JsonResponse):
        return offer_request

    try:
        email = generate_offer_email(
            offer_request.details,
            offer_request.email_id,
            offer_request.subject_prefix,
        )
    except OfferGenerationError as exc:
        return _error_response("offer_generation_error", str(exc), status=422)

    return JsonResponse(email.model_dump(mode="json"), status=200)


def _validated(request: HttpRequest, schema: type[BaseModel]) -> Any:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        return JsonResponse(
            {
                "error": {
                    "code": "validation_error",
                    "message": "Invalid request payload",
                    "details": exc.errors(include_url=False, include_context=False),
                }
            },
            status=400,
        )


def _parse_json_payload(request: HttpRequest) -> dict[str, Any] | JsonResponse:
    if not request.body:
        return {}

    try:
        payload = json.loads(request.body)
    except json.JSONDecodeError:
        return _error_response("invalid_json", "Request body must be valid JSON", status=400)

    if not isinstance(payload, dict):
        return _error_response("invalid_json", "JSON body must be an object", status=400)

    return payload


def _error_response(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)
