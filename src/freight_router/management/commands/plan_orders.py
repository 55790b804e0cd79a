from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import polars as pl
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError
from pydantic import ValidationError

from freight_router.exceptions import FreightRouterError, ItemProcessingError
from freight_router.models import RoutePlan
from freight_router.schemas import RoutePlanRequest, RoutePlanResponse
from freight_router.services.planner import RoutePlannerService

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    "pickup_location",
    "delivery_location",
    "contact_name",
    "contact_email",
    "contact_phone",
}
OPTIONAL_COLUMNS = (
    "pickup_date",
    "pickup_time",
    "delivery_date",
    "delivery_time",
    "contact_company",
    "cargo_type",
)


@dataclass(slots=True)
class RowOutcome:
    index: int
    response: RoutePlanResponse | None = None
    error: ItemProcessingError | None = None


class Command(BaseCommand):
    help = "Plan and rank truck routes for every order in a CSV file."

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument("--csv-path", type=str, required=True, help="Path to the orders CSV")
        parser.add_argument(
            "--concurrency",
            type=int,
            default=settings.PLAN_ORDERS_CONCURRENCY,
            help="Max orders planned at the same time",
        )
        parser.add_argument(
            "--output",
            type=str,
            default="",
            help="Optional JSON lines file receiving one result per order",
        )

    def handle(self, *_: Any, **options: Any) -> None:
        csv_path = Path(options["csv_path"])
        if not csv_path.exists():
            raise CommandError(f"CSV file does not exist: {csv_path}")

        rows = load_orders(csv_path).to_dicts()
        if not rows:
            self.stdout.write(self.style.WARNING("No orders to plan"))
            return

        planner = RoutePlannerService.from_settings()
        outcomes = asyncio.run(plan_rows(planner, rows, max(1, options["concurrency"])))

        for outcome in outcomes:
            if outcome.error is not None:
                self.stderr.write(self.style.ERROR(str(outcome.error)))

        if options["output"]:
            write_outcomes(Path(options["output"]), outcomes)

        succeeded = sum(1 for outcome in outcomes if outcome.error is None)
        self.stdout.write(
            self.style.SUCCESS(
                f"Planned orders: {succeeded} succeeded, {len(outcomes) - succeeded} failed"
            )
        )


def load_orders(csv_path: Path) -> pl.DataFrame:
    frame = pl.read_csv(csv_path, infer_schema_length=0)
    missing_columns = REQUIRED_COLUMNS.difference(frame.columns)
    if missing_columns:
        raise CommandError(f"Missing expected columns: {sorted(missing_columns)}")

    present = [column for column in (*sorted(REQUIRED_COLUMNS), *OPTIONAL_COLUMNS) if column in frame.columns]
    normalized = frame.select(
        [pl.col(column).cast(pl.Utf8, strict=False).str.strip_chars().alias(column) for column in present]
    )
    return normalized.with_columns(
        [pl.lit(None, dtype=pl.Utf8).alias(column) for column in OPTIONAL_COLUMNS if column not in present]
    )


def order_request(row: dict[str, Any]) -> RoutePlanRequest:
    return RoutePlanRequest.model_validate(
        {
            "pickup": {
                "location": row.get("pickup_location") or "",
                "date": row.get("pickup_date") or None,
                "time": row.get("pickup_time") or None,
            },
            "delivery": {
                "location": row.get("delivery_location") or "",
                "date": row.get("delivery_date") or None,
                "time": row.get("delivery_time") or None,
            },
            "contact": {
                "name": row.get("contact_name") or "",
                "email": row.get("contact_email") or "",
                "phone": row.get("contact_phone") or "",
                "company": row.get("contact_company") or None,
            },
            "cargo": {"cargo_type": row.get("cargo_type") or None},
        }
    )


async def plan_rows(
    planner: RoutePlannerService,
    rows: list[dict[str, Any]],
    concurrency: int,
) -> list[RowOutcome]:
    """Plan every row; a failing row is reported without aborting its siblings."""
    semaphore = asyncio.Semaphore(concurrency)

    async def plan_row(index: int, row: dict[str, Any]) -> RowOutcome:
        async with semaphore:
            try:
                response = await planner.plan(order_request(row))
                record = RoutePlan.from_response(response)
                await record.asave()
            except (FreightRouterError, ValidationError, DatabaseError) as exc:
                logger.warning("Order row %d failed: %s", index, exc)
                return RowOutcome(index=index, error=ItemProcessingError(index, exc))

        response.plan_id = record.pk
        return RowOutcome(index=index, response=response)

    return list(await asyncio.gather(*(plan_row(index, row) for index, row in enumerate(rows))))


def write_outcomes(path: Path, outcomes: list[RowOutcome]) -> None:
    with path.open("w", encoding="utf-8") as handle:
        for outcome in outcomes:
            if outcome.error is not None:
                record = {"row": outcome.index, "status": "failed", "error": str(outcome.error.cause)}
            else:
                record = {
                    "row": outcome.index,
                    "status": "ok",
                    "plan": outcome.response.model_dump(mode="json") if outcome.response else None,
                }
            handle.write(json.dumps(record) + "\n")
