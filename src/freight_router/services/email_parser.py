from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from freight_router.exceptions import OrderParsingError
from freight_router.schemas import OrderDetails
from freight_router.services.completions import CompletionClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that extracts shipping order details from emails. "
    "Always return valid JSON."
)

ORDER_SCHEMA = """{
    "pickup": {
        "date": string | null,
        "time": string | null
    },
    "delivery": {
        "date": string | null,
        "time": string | null
    },
    "contact": {
        "name": string,
        "email": string,
        "phone": string,
        "company": string | null
    },
    "cargo": {
        "cargoType": string | null,
        "specialRequirements": string[] | null
    },
    "recommendedPricePerMile": number
}"""

REQUIRED_CONTACT_FIELDS = ("name", "email", "phone")


class EmailParser:
    def __init__(self, completion_client: CompletionClient, *, temperature: float = 0.3) -> None:
        self.completion_client = completion_client
        self.temperature = temperature

    async def parse(self, subject: str, body: str) -> OrderDetails:
        content = await self.completion_client.complete(
            self._messages(subject, body), temperature=self.temperature
        )
        return parse_order_details(content)

    @staticmethod
    def _messages(subject: str, body: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    "Extract shipping order details from this email:\n"
                    f"Subject: {subject}\n"
                    f"Body: {body}\n\n"
                    "Please extract and return ONLY a JSON object with this exact structure "
                    "(use null for missing values):\n"
                    f"{ORDER_SCHEMA}"
                ),
            },
        ]


def parse_order_details(content: str) -> OrderDetails:
    """Validate a completion against the order schema and required contact fields."""
    try:
        raw = json.loads(_strip_code_fence(content))
    except json.JSONDecodeError as exc:
        raise OrderParsingError("Completion is not valid JSON") from exc

    if not isinstance(raw, dict):
        raise OrderParsingError("Completion JSON must be an object")

    try:
        details = OrderDetails.model_validate(raw)
    except ValidationError as exc:
        raise OrderParsingError(f"Order details do not match the expected structure: {exc}") from exc

    missing = [field for field in REQUIRED_CONTACT_FIELDS if not getattr(details.contact, field)]
    if missing:
        logger.warning("Parsed order is missing contact fields: %s", ", ".join(missing))
        raise OrderParsingError(
            "Missing required contact information in the parsed data: " + ", ".join(missing)
        )
    return details


def _strip_code_fence(content: str) -> str:
    text = content.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()
