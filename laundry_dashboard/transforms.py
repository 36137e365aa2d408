"""
Order join: resolve the id references on raw laundry orders against the
service, pickup-slot and camp collections and emit NormalizedOrder records.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .config import (
    DEFAULT_TOTAL_PRICE,
    PLACEHOLDER,
    STATUS_PENDING,
    UNKNOWN_CAMP,
)
from .models import NormalizedOrder, OrderService, PickupSlot, parse_reference
from .utils import acf_fields, rendered_title, wp_records

logger = logging.getLogger(__name__)


def _key(record_id: Any) -> str:
    # ACF relation fields come back as ints or numeric strings depending on
    # the field configuration; compare them as text.
    return str(record_id)


@dataclass
class Lookups:
    """Per-pass indices over the auxiliary collections."""

    services: dict[str, OrderService] = field(default_factory=dict)
    slots: dict[str, PickupSlot] = field(default_factory=dict)
    camps: dict[str, str] = field(default_factory=dict)


def build_service(record: dict) -> OrderService:
    acf = acf_fields(record)
    return OrderService(
        id=record["id"],
        name=rendered_title(record),
        slug=acf.get("slug") or "",
        price=acf.get("price") or "",
    )


def build_pickup_slot(record: dict) -> PickupSlot:
    acf = acf_fields(record)
    return PickupSlot(
        id=record["id"],
        time=acf.get("time") or "",
        title=rendered_title(record),
        is_active=bool(acf.get("is_active", True)),
    )


def build_lookups(services: Any, slots: Any, camps: Any) -> Lookups:
    """Index the auxiliary collections by id.

    Each collection is walked once. Anything that is not a list of records
    yields an empty index, so every reference against it is unresolved.
    """
    lookups = Lookups(
        services={_key(r["id"]): build_service(r) for r in wp_records(services)},
        slots={_key(r["id"]): build_pickup_slot(r) for r in wp_records(slots)},
        camps={_key(r["id"]): rendered_title(r, UNKNOWN_CAMP) for r in wp_records(camps)},
    )
    logger.debug(
        "Built lookups: %d services, %d slots, %d camps",
        len(lookups.services), len(lookups.slots), len(lookups.camps),
    )
    return lookups


def resolve_services(value: Any, lookups: Lookups) -> tuple[OrderService, ...]:
    """Map a service_id field through the service index, dropping misses."""
    resolved = []
    for service_id in parse_reference(value).ids():
        service = lookups.services.get(_key(service_id))
        if service is not None:
            resolved.append(service)
    return tuple(resolved)


def resolve_camp_name(value: Any, lookups: Lookups) -> str:
    """Look up the first referenced camp; placeholder when absent or unknown."""
    ids = parse_reference(value).ids()
    if not ids:
        return PLACEHOLDER
    return lookups.camps.get(_key(ids[0])) or PLACEHOLDER


def resolve_pickup_slot(value: Any, lookups: Lookups) -> PickupSlot | None:
    ids = parse_reference(value).ids()
    if not ids:
        return None
    return lookups.slots.get(_key(ids[0]))


def _text(value: Any) -> str:
    # ACF stores unset fields as "", null, false or 0
    if not value:
        return PLACEHOLDER
    return str(value)


def normalize_order(raw: dict, lookups: Lookups) -> NormalizedOrder:
    """Build one NormalizedOrder from a raw laundry_order record."""
    acf = acf_fields(raw)
    return NormalizedOrder(
        id=raw.get("id"),
        title=rendered_title(raw),
        customer_name=_text(acf.get("customer_name")),
        room_number=_text(acf.get("room_number")),
        pickup_method=_text(acf.get("pickup_method")),
        payment_confirmed=bool(acf.get("payment_confirmed") or False),
        total_price=str(acf.get("total_price") or DEFAULT_TOTAL_PRICE),
        special_instructions=_text(acf.get("Special_Instructions")),
        order_status=acf.get("order_status") or STATUS_PENDING,
        order_timestamp=_text(acf.get("order_timestamp")),
        camp_name=resolve_camp_name(acf.get("camp_name"), lookups),
        services=resolve_services(acf.get("service_id"), lookups),
        pickup_slot=resolve_pickup_slot(acf.get("slot_id"), lookups),
    )


def build_normalized_orders(
    raw_orders: Any,
    services: Any,
    slots: Any,
    camps: Any,
) -> list[NormalizedOrder]:
    """Join raw orders with their collections, preserving order sequence.

    A raw_orders payload that is not a list (an error object, for
    instance) yields an empty result.
    """
    if not isinstance(raw_orders, list):
        logger.error("Fetched orders data is not a list: %.200r", raw_orders)
        return []

    lookups = build_lookups(services, slots, camps)
    orders = [normalize_order(raw, lookups) for raw in raw_orders if isinstance(raw, dict)]
    logger.info("Normalized %d orders", len(orders))
    return orders
