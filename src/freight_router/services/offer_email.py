from __future__ import annotations

import math
from datetime import date, datetime

from freight_router.exceptions import OfferGenerationError
from freight_router.schemas import OfferDetails, OfferEmail

DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%B %d, %Y", "%b %d, %Y")


def generate_offer_email(details: OfferDetails, email_id: str, subject_prefix: str = "RE:") -> OfferEmail:
    total_cost = offer_total(details)
    pickup_date = format_short_date(details.pickup.date)

    body = (
        f"Hi {details.contact.name},\n"
        "\n"
        f"We can have a truck in {details.pickup.city}, {details.pickup.state} "
        f"picking up on {pickup_date}\n"
        f"for ${total_cost}.\n"
        "\n"
        f"Rate: ${total_cost}\n"
        f"Origin: {details.pickup.city}, {details.pickup.state}\n"
        f"Destination: {details.delivery.city}, {details.delivery.state}\n"
        f"Equipment: {details.cargo.cargo_type or ''}\n"
        "\n"
        "Please confirm to get this booked.\n"
        "Thanks!"
    )
    return OfferEmail(subject=f"{subject_prefix} {email_id}".strip(), body=body)


def offer_total(details: OfferDetails) -> int:
    toll_info = details.toll_info
    cost_per_mile = 0.0
    if toll_info is not None:
        cost_per_mile = (toll_info.driver_cost or 0.0) + (toll_info.fuel_cost or 0.0)
    return math.floor(cost_per_mile * (details.miles or 0.0) + 0.5)


def format_short_date(value: str) -> str:
    """Render a pickup date as M/D/YY."""
    parsed = _parse_date(value)
    return f"{parsed.month}/{parsed.day}/{parsed.strftime('%y')}"


def _parse_date(value: str) -> date:
    text = (value or "").strip()
    if not text:
        raise OfferGenerationError("Pickup date is required")

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise OfferGenerationError(f"Unrecognized pickup date: {value}")
