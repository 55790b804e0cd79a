from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from freight_router.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


async def request_json(
    method: str,
    url: str,
    *,
    service: str,
    timeout: float,
    retry_count: int,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: Any,
) -> Any:
    """Send one JSON request with a bounded timeout, retrying transport and HTTP errors."""
    for attempt in range(retry_count + 1):
        try:
            async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            if attempt >= retry_count:
                raise ExternalServiceError(f"{service} request failed") from exc
            logger.warning(
                "%s request failed (attempt %d of %d): %s",
                service,
                attempt + 1,
                retry_count + 1,
                exc,
            )
            await asyncio.sleep(0.3 * (attempt + 1))

    raise ExternalServiceError(f"{service} request failed")
