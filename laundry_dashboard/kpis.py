"""
Order statistics: pure functions over a list of NormalizedOrder.

Provides timestamp parsing, today / this-month windows, status
partitions, revenue sums, average order value, service popularity and
the filter logic behind the orders table. Nothing is cached; callers
recompute on every render, passing the reference `now` explicitly.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from .config import (
    NO_DATA,
    PLACEHOLDER,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
)
from .models import NormalizedOrder
from .utils import safe_decimal

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Timestamp parsing
# ---------------------------------------------------------------------------
def _parse_locale_timestamp(value: str) -> datetime:
    # "17/09/2025, 3:23:27 am" -> 2025-09-17T03:23:27
    date_part, time_part = value.split(", ", 1)
    day, month, year = date_part.split("/")

    time_parts = time_part.split(":")
    hours = int(time_parts[0])
    minutes = time_parts[1]
    seconds = time_parts[2].split(" ")[0]
    ampm = "am" if "am" in time_part.lower() else "pm"

    if ampm == "pm" and hours < 12:
        hours += 12
    if ampm == "am" and hours == 12:
        hours = 0

    iso = f"{year}-{month.zfill(2)}-{day.zfill(2)}T{hours:02d}:{minutes}:{seconds}"
    return datetime.fromisoformat(iso)


def parse_order_timestamp(value: str | None) -> datetime | None:
    """Parse an order timestamp into a naive local datetime.

    Two shapes are accepted:
    - "DD/MM/YYYY, H:MM:SS am|pm" (the booking form's locale format)
    - anything containing both "T" and "-", read as ISO-8601

    Returns None for every other shape, including the placeholder dash.
    Offset-aware ISO values are converted to local time.
    """
    if not value or value == PLACEHOLDER:
        return None

    try:
        if "/" in value and "," in value:
            return _parse_locale_timestamp(value)

        if "T" in value and "-" in value:
            parsed = datetime.fromisoformat(value)
            if parsed.tzinfo is not None:
                parsed = parsed.astimezone().replace(tzinfo=None)
            return parsed
    except (ValueError, IndexError):
        logger.warning("Failed to parse date: %s", value)
        return None

    logger.warning("Unknown date format: %s", value)
    return None


def format_day(now: datetime) -> str:
    """DD/MM/YYYY, as the booking form writes dates."""
    return f"{now.day:02d}/{now.month:02d}/{now.year}"


def format_month(now: datetime) -> str:
    """/MM/YYYY, the month-level substring of the booking form's dates."""
    return f"/{now.month:02d}/{now.year}"


def _has_timestamp(order: NormalizedOrder) -> bool:
    return bool(order.order_timestamp) and order.order_timestamp != PLACEHOLDER


def is_today(order: NormalizedOrder, now: datetime) -> bool:
    """True when the order was placed on now's calendar day.

    Falls back to a substring match on DD/MM/YYYY when the timestamp
    cannot be parsed.
    """
    if not _has_timestamp(order):
        return False
    parsed = parse_order_timestamp(order.order_timestamp)
    if parsed is not None:
        return parsed.date() == now.date()
    return format_day(now) in order.order_timestamp


def is_this_month(order: NormalizedOrder, now: datetime) -> bool:
    """True when the order was placed in now's month and year."""
    if not _has_timestamp(order):
        return False
    parsed = parse_order_timestamp(order.order_timestamp)
    if parsed is not None:
        return parsed.month == now.month and parsed.year == now.year
    return format_month(now) in order.order_timestamp


def orders_today(orders: Iterable[NormalizedOrder], now: datetime) -> list[NormalizedOrder]:
    return [o for o in orders if is_today(o, now)]


def orders_this_month(orders: Iterable[NormalizedOrder], now: datetime) -> list[NormalizedOrder]:
    return [o for o in orders if is_this_month(o, now)]


# ---------------------------------------------------------------------------
# Status partitions
# ---------------------------------------------------------------------------
def is_pending(order: NormalizedOrder) -> bool:
    """Anything neither completed nor cancelled counts as pending."""
    return order.order_status not in (STATUS_COMPLETED, STATUS_CANCELLED)


def is_completed(order: NormalizedOrder) -> bool:
    return order.order_status == STATUS_COMPLETED


def is_cancelled(order: NormalizedOrder) -> bool:
    return order.order_status == STATUS_CANCELLED


@dataclass(frozen=True)
class StatusCounts:
    total: int
    pending: int
    completed: int
    cancelled: int


def count_by_status(orders: Iterable[NormalizedOrder]) -> StatusCounts:
    orders = list(orders)
    return StatusCounts(
        total=len(orders),
        pending=sum(1 for o in orders if is_pending(o)),
        completed=sum(1 for o in orders if is_completed(o)),
        cancelled=sum(1 for o in orders if is_cancelled(o)),
    )


# ---------------------------------------------------------------------------
# Revenue
# ---------------------------------------------------------------------------
def parse_price(value) -> Decimal:
    """Order total as Decimal; missing or junk values count as zero."""
    return safe_decimal(value)


def revenue(orders: Iterable[NormalizedOrder]) -> Decimal:
    """Sum of total_price over non-cancelled orders."""
    return sum(
        (parse_price(o.total_price) for o in orders if not is_cancelled(o)),
        Decimal(0),
    )


def completed_revenue(orders: Iterable[NormalizedOrder]) -> Decimal:
    """Sum of total_price over completed orders only."""
    return sum(
        (parse_price(o.total_price) for o in orders if is_completed(o)),
        Decimal(0),
    )


def average_order_value(orders: Iterable[NormalizedOrder]) -> Decimal:
    """Mean total_price of non-cancelled orders, 0 when there are none."""
    active = [o for o in orders if not is_cancelled(o)]
    if not active:
        return Decimal(0)
    return revenue(active) / len(active)


# ---------------------------------------------------------------------------
# Services and customers
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ServicePopularity:
    name: str
    count: int


def service_counts(orders: Iterable[NormalizedOrder]) -> dict[str, int]:
    """Occurrences of each service name across non-cancelled orders.

    Keys keep first-encountered order.
    """
    counts: dict[str, int] = {}
    for order in orders:
        if is_cancelled(order):
            continue
        for service in order.services:
            if service.name:
                counts[service.name] = counts.get(service.name, 0) + 1
    return counts


def service_popularity(orders: Iterable[NormalizedOrder]) -> ServicePopularity:
    """Most frequently booked service; ties go to the first one seen."""
    counts = service_counts(orders)
    if not counts:
        return ServicePopularity(NO_DATA, 0)
    # max() keeps the first maximal key in iteration order
    name = max(counts, key=counts.get)
    return ServicePopularity(name, counts[name])


def unique_customers(orders: Iterable[NormalizedOrder]) -> int:
    """Number of distinct named customers, ignoring the placeholder."""
    return len({o.customer_name for o in orders if o.customer_name and o.customer_name != PLACEHOLDER})


# ---------------------------------------------------------------------------
# Orders table filters
# ---------------------------------------------------------------------------
ALL = "all"


def filter_by_view_mode(orders: Iterable[NormalizedOrder], mode: str) -> list[NormalizedOrder]:
    """Filter by status tab: all, pending, completed or cancelled."""
    if mode == STATUS_COMPLETED:
        return [o for o in orders if is_completed(o)]
    if mode == "pending":
        return [o for o in orders if is_pending(o)]
    if mode == STATUS_CANCELLED:
        return [o for o in orders if is_cancelled(o)]
    return list(orders)


@dataclass(frozen=True)
class OrderFilters:
    """Filter panel state. "all" (or empty for prices) disables a filter."""

    customer_name: str = ALL
    camp_name: str = ALL
    room_number: str = ALL
    service: str = ALL
    payment_status: str = ALL  # "confirmed" / "unconfirmed"
    pickup_method: str = ALL
    min_price: str = ""
    max_price: str = ""


def apply_order_filters(
    orders: Iterable[NormalizedOrder],
    filters: OrderFilters,
    mode: str = ALL,
) -> list[NormalizedOrder]:
    """Apply the filter panel, then the status tab."""
    result = list(orders)

    if filters.customer_name != ALL:
        result = [o for o in result if o.customer_name == filters.customer_name]
    if filters.camp_name != ALL:
        result = [o for o in result if o.camp_name == filters.camp_name]
    if filters.room_number != ALL:
        result = [o for o in result if str(o.room_number) == filters.room_number]
    if filters.service != ALL:
        result = [o for o in result if any(s.name == filters.service for s in o.services)]
    if filters.payment_status != ALL:
        confirmed = filters.payment_status == "confirmed"
        result = [o for o in result if o.payment_confirmed == confirmed]
    if filters.pickup_method != ALL:
        result = [o for o in result if o.pickup_method == filters.pickup_method]
    if filters.min_price:
        low = parse_price(filters.min_price)
        result = [o for o in result if parse_price(o.total_price) >= low]
    if filters.max_price:
        high = parse_price(filters.max_price)
        result = [o for o in result if parse_price(o.total_price) <= high]

    return filter_by_view_mode(result, mode)


def _distinct(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


def filter_options(orders: Iterable[NormalizedOrder]) -> dict[str, list[str]]:
    """Distinct values for each filter dropdown, in first-seen order."""
    orders = list(orders)
    return {
        "customer_name": _distinct(o.customer_name for o in orders),
        "camp_name": _distinct(o.camp_name for o in orders),
        "room_number": _distinct(str(o.room_number) for o in orders),
        "service": _distinct(s.name for o in orders for s in o.services),
        "pickup_method": _distinct(o.pickup_method for o in orders),
    }
