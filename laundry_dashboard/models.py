"""Domain models for the laundry admin dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Single:
    """A reference field holding one backend id."""

    id: Any

    def ids(self) -> list:
        return [self.id]


@dataclass(frozen=True)
class Multiple:
    """A reference field holding a list of backend ids."""

    values: tuple = ()

    def ids(self) -> list:
        return list(self.values)


Reference = Single | Multiple


def parse_reference(value: Any) -> Reference:
    """Turn a raw ACF relation field into a Single or Multiple reference.

    Lists become Multiple; falsy scalars (None, 0, "") become an empty
    Multiple so that callers never have to branch on the raw type.
    """
    if isinstance(value, (list, tuple)):
        return Multiple(tuple(value))
    if not value:
        return Multiple()
    return Single(value)


@dataclass(frozen=True)
class OrderService:
    """A service line resolved onto an order."""

    id: Any
    name: str
    slug: str = ""
    price: Any = ""


@dataclass(frozen=True)
class PickupSlot:
    """A bookable pickup time slot."""

    id: Any
    time: str = ""
    title: str = ""
    is_active: bool = True


@dataclass(frozen=True)
class NormalizedOrder:
    """Display-ready order with all foreign references resolved."""

    id: Any
    title: str
    customer_name: str
    room_number: str
    pickup_method: str
    payment_confirmed: bool
    total_price: str
    special_instructions: str
    order_status: str
    order_timestamp: str
    camp_name: str
    services: tuple[OrderService, ...] = field(default_factory=tuple)
    pickup_slot: PickupSlot | None = None
