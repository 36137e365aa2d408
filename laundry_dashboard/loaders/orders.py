"""
Loader for laundry orders and the collections they reference.

The four collections are requested as one concurrent batch. Only the
orders request is allowed to fail the batch; services, pickup slots and
camps degrade to empty lists so the join still runs.
"""

import asyncio
import logging
from typing import Any

from ..config import (
    CAMP_COLLECTION,
    ORDER_COLLECTION,
    PICKUP_SLOT_COLLECTION,
    SERVICE_COLLECTION,
    UPDATE_STATUS_ENDPOINT,
)
from ..errors import DashboardError
from ..models import NormalizedOrder
from ..transforms import build_normalized_orders
from .client import ApiClient

logger = logging.getLogger(__name__)


async def fetch_optional(client: ApiClient, collection: str) -> Any:
    """Fetch an auxiliary collection, returning [] on any dashboard failure."""
    try:
        return await client.get_collection(collection)
    except DashboardError as exc:
        logger.warning("Could not fetch %s: %s", collection, exc)
        return []


async def fetch_collections(client: ApiClient) -> tuple[Any, Any, Any, Any]:
    """Return (orders, services, pickup_slots, camps) raw payloads.

    All four requests are in flight together and the call returns once
    every one has settled. An orders failure is re-raised after the batch
    completes.
    """
    results = await asyncio.gather(
        client.get_collection(ORDER_COLLECTION),
        fetch_optional(client, SERVICE_COLLECTION),
        fetch_optional(client, PICKUP_SLOT_COLLECTION),
        fetch_optional(client, CAMP_COLLECTION),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    orders, services, slots, camps = results
    return orders, services, slots, camps


async def fetch_laundry_orders(client: ApiClient) -> list[NormalizedOrder]:
    """Fetch and join every laundry order into NormalizedOrder records."""
    orders, services, slots, camps = await fetch_collections(client)
    return build_normalized_orders(orders, services, slots, camps)


async def update_order_status(client: ApiClient, order_id: Any, status: str) -> Any:
    """Persist a new status for one order via the custom action endpoint."""
    result = await client.request(
        UPDATE_STATUS_ENDPOINT,
        "POST",
        {"order_id": order_id, "order_status": status},
    )
    logger.info("Order %s status updated to %s", order_id, status)
    return result
