from __future__ import annotations

import json

import pytest

from freight_router.exceptions import OfferGenerationError, OrderParsingError
from freight_router.schemas import OfferDetails
from freight_router.services.email_parser import EmailParser, parse_order_details
from freight_router.services.offer_email import format_short_date, generate_offer_email, offer_total

ORDER_JSON = {
    "pickup": {"date": "2025-03-04", "time": "08:00"},
    "delivery": {"date": "2025-03-05", "time": None},
    "contact": {"name": "Dana Reyes", "email": "dana@acme.test", "phone": "555-0100", "company": "Acme"},
    "cargo": {"cargoType": "Reefer", "specialRequirements": ["Keep at 34F"]},
    "recommendedPricePerMile": 2.75,
}


def _offer_details(**overrides) -> OfferDetails:
    payload = {
        "pickup": {"city": "Chicago", "state": "IL", "date": "2025-03-04", "postalCode": "60606"},
        "delivery": {"city": "Dallas", "state": "TX"},
        "contact": {"name": "Dana Reyes"},
        "cargo": {"cargoType": "Dry Van"},
        "tollInfo": {"driverCost": 1.85, "fuelCost": 0.65},
        "miles": 925,
    }
    payload.update(overrides)
    return OfferDetails.model_validate(payload)


def test_parse_order_details_accepts_complete_json() -> None:
    details = parse_order_details(json.dumps(ORDER_JSON))

    assert details.contact.name == "Dana Reyes"
    assert details.cargo.cargo_type == "Reefer"
    assert details.cargo.special_requirements == ["Keep at 34F"]
    assert details.recommended_price_per_mile == 2.75
    assert details.model_dump(by_alias=True)["cargo"]["cargoType"] == "Reefer"


def test_parse_order_details_strips_code_fence() -> None:
    content = "```json\n" + json.dumps(ORDER_JSON) + "\n```"

    assert parse_order_details(content).pickup.date == "2025-03-04"


@pytest.mark.parametrize("missing", ["name", "email", "phone"])
def test_missing_contact_field_is_rejected(missing: str) -> None:
    order = json.loads(json.dumps(ORDER_JSON))
    order["contact"][missing] = None

    with pytest.raises(OrderParsingError, match=missing):
        parse_order_details(json.dumps(order))


@pytest.mark.parametrize("content", ["not json at all", "[1, 2, 3]", '{"contact": "Dana"}'])
def test_unusable_completion_is_rejected(content: str) -> None:
    with pytest.raises(OrderParsingError):
        parse_order_details(content)


@pytest.mark.asyncio
async def test_email_parser_prompts_with_subject_and_body(mocker) -> None:
    completion_client = mocker.Mock()
    completion_client.complete = mocker.AsyncMock(return_value=json.dumps(ORDER_JSON))
    parser = EmailParser(completion_client, temperature=0.3)

    details = await parser.parse("Load CHI to DAL", "Need a reefer picked up Tuesday 8am.")

    assert details.contact.email == "dana@acme.test"
    messages = completion_client.complete.call_args.args[0]
    assert messages[0]["role"] == "system"
    assert "Subject: Load CHI to DAL" in messages[1]["content"]
    assert "Body: Need a reefer picked up Tuesday 8am." in messages[1]["content"]
    assert '"recommendedPricePerMile": number' in messages[1]["content"]
    assert completion_client.complete.call_args.kwargs["temperature"] == 0.3


def test_offer_email_uses_template() -> None:
    email = generate_offer_email(_offer_details(), "<msg-123@mail.test>", "RE:")

    assert email.subject == "RE: <msg-123@mail.test>"
    assert email.body == (
        "Hi Dana Reyes,\n"
        "\n"
        "We can have a truck in Chicago, IL picking up on 3/4/25\n"
        "for $2313.\n"
        "\n"
        "Rate: $2313\n"
        "Origin: Chicago, IL\n"
        "Destination: Dallas, TX\n"
        "Equipment: Dry Van\n"
        "\n"
        "Please confirm to get this booked.\n"
        "Thanks!"
    )


def test_offer_total_defaults_missing_costs_to_zero() -> None:
    assert offer_total(_offer_details(tollInfo=None)) == 0
    assert offer_total(_offer_details(tollInfo={"driverCost": 2.0}, miles=100)) == 200
    assert offer_total(_offer_details(miles=None)) == 0


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2025-03-04", "3/4/25"),
        ("2025-11-21T09:30:00", "11/21/25"),
        ("12/01/2026", "12/1/26"),
        ("March 9, 2025", "3/9/25"),
    ],
)
def test_pickup_date_formats(value: str, expected: str) -> None:
    assert format_short_date(value) == expected


def test_unparsable_pickup_date_is_rejected() -> None:
    with pytest.raises(OfferGenerationError):
        generate_offer_email(_offer_details(pickup={"city": "Chicago", "state": "IL", "date": "soon"}), "id")
