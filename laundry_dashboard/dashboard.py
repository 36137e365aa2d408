"""
Dashboard-ready output functions.

These are the entry points for the Streamlit front end. The summary
functions return plain dicts suitable for rendering cards; the frame
helpers return DataFrames for tables and charts. OrderBook holds one
view's copy of the order list, with manual refresh and optimistic
status edits.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

import pandas as pd

from .config import PLACEHOLDER, STATUS_CANCELLED
from .errors import DashboardError
from .kpis import (
    average_order_value,
    completed_revenue,
    count_by_status,
    filter_by_view_mode,
    is_completed,
    orders_this_month,
    orders_today,
    parse_order_timestamp,
    parse_price,
    revenue,
    service_popularity,
    unique_customers,
)
from .loaders.client import ApiClient
from .loaders.orders import fetch_laundry_orders, update_order_status
from .models import NormalizedOrder

logger = logging.getLogger(__name__)


def get_dashboard_summary(orders: list[NormalizedOrder], now: datetime | None = None) -> dict:
    """Cards for the home screen: today's activity.

    Returns
    -------
    Dict with structure:
    {
        "todays_orders": 4,
        "outstanding_orders": 9,      # all time, not completed
        "completed_today": 2,
        "estimated_revenue_today": Decimal("31.50"),  # completed today
        "active_customers_today": 3,
    }
    """
    now = now or datetime.now()
    today = orders_today(orders, now)
    completed_today = [o for o in today if is_completed(o)]

    return {
        "todays_orders": len(today),
        # Home screen counts cancelled orders as outstanding too
        "outstanding_orders": sum(1 for o in orders if not is_completed(o)),
        "completed_today": len(completed_today),
        "estimated_revenue_today": completed_revenue(completed_today),
        "active_customers_today": unique_customers(today),
    }


def get_statistics_summary(orders: list[NormalizedOrder], now: datetime | None = None) -> dict:
    """Figures for the statistics screen.

    Returns
    -------
    Dict with structure:
    {
        "total_orders": 120,
        "completed_orders": 80,
        "pending_orders": 30,
        "cancelled_orders": 10,
        "revenue_this_month": Decimal(...),
        "total_revenue": Decimal(...),
        "orders_this_month": 25,
        "average_order_value": Decimal(...),
        "most_popular_service": "Wash & Fold",
        "most_popular_service_count": 42,
        "cancelled_this_month": 2,
    }
    """
    now = now or datetime.now()
    counts = count_by_status(orders)
    this_month = orders_this_month(orders, now)
    popular = service_popularity(orders)

    summary = {
        "total_orders": counts.total,
        "completed_orders": counts.completed,
        "pending_orders": counts.pending,
        "cancelled_orders": counts.cancelled,
        "revenue_this_month": revenue(this_month),
        "total_revenue": revenue(orders),
        "orders_this_month": len(this_month),
        "average_order_value": average_order_value(orders),
        "most_popular_service": popular.name,
        "most_popular_service_count": popular.count,
        "cancelled_this_month": count_by_status(this_month).cancelled,
    }
    logger.debug("Statistics summary: %s", summary)
    return summary


# ---------------------------------------------------------------------------
# Frames for tables and charts
# ---------------------------------------------------------------------------
_FRAME_COLUMNS = [
    "id", "customer_name", "room_number", "camp_name", "services",
    "pickup_method", "pickup_time", "total_price", "payment_confirmed",
    "order_status", "order_timestamp", "ordered_at",
]


def orders_to_frame(orders: list[NormalizedOrder]) -> pd.DataFrame:
    """One row per order, with services joined into a display string."""
    if not orders:
        return pd.DataFrame(columns=_FRAME_COLUMNS)

    rows = []
    for order in orders:
        rows.append({
            "id": order.id,
            "customer_name": order.customer_name,
            "room_number": order.room_number,
            "camp_name": order.camp_name,
            "services": ", ".join(s.name for s in order.services) or PLACEHOLDER,
            "pickup_method": order.pickup_method,
            "pickup_time": order.pickup_slot.time if order.pickup_slot else PLACEHOLDER,
            "total_price": float(parse_price(order.total_price)),
            "payment_confirmed": order.payment_confirmed,
            "order_status": order.order_status,
            "order_timestamp": order.order_timestamp,
            "ordered_at": parse_order_timestamp(order.order_timestamp),
        })

    df = pd.DataFrame(rows, columns=_FRAME_COLUMNS)
    df["ordered_at"] = pd.to_datetime(df["ordered_at"])
    return df


def daily_revenue(orders: list[NormalizedOrder]) -> pd.DataFrame:
    """Revenue and order count per calendar day, cancelled orders excluded.

    Orders whose timestamp cannot be parsed are left out.
    """
    df = orders_to_frame(orders)
    df = df[(df["order_status"] != STATUS_CANCELLED) & df["ordered_at"].notna()]
    if df.empty:
        return pd.DataFrame(columns=["date", "revenue", "orders"])

    df = df.assign(date=df["ordered_at"].dt.normalize())
    result = (
        df.groupby("date")
        .agg(revenue=("total_price", "sum"), orders=("id", "count"))
        .reset_index()
    )
    return result


# ---------------------------------------------------------------------------
# Optimistic status edits
# ---------------------------------------------------------------------------
def _find(orders: list[NormalizedOrder], order_id: Any) -> int:
    for idx, order in enumerate(orders):
        if order.id == order_id:
            return idx
    raise KeyError(order_id)


@dataclass
class StatusChange:
    """A tentative status edit on a locally held order list.

    apply() records the previous status and swaps in the new one;
    revert() restores the recorded status on the same record.
    """

    order_id: Any
    new_status: str
    previous_status: str | None = None

    def apply(self, orders: list[NormalizedOrder]) -> None:
        idx = _find(orders, self.order_id)
        self.previous_status = orders[idx].order_status
        orders[idx] = replace(orders[idx], order_status=self.new_status)

    def revert(self, orders: list[NormalizedOrder]) -> None:
        if self.previous_status is None:
            return
        idx = _find(orders, self.order_id)
        orders[idx] = replace(orders[idx], order_status=self.previous_status)


class OrderBook:
    """One view's copy of the order list.

    Views do not share an OrderBook; each refreshes on its own.
    """

    def __init__(self, client: ApiClient):
        self.client = client
        self.orders: list[NormalizedOrder] = []
        self.last_updated: datetime | None = None
        self.error: str | None = None

    async def refresh(self) -> list[NormalizedOrder]:
        """Refetch and rebuild the whole list.

        On failure the previous list is kept, `error` is set and the
        exception propagates.
        """
        try:
            orders = await fetch_laundry_orders(self.client)
        except DashboardError as exc:
            self.error = str(exc)
            logger.error("Failed to fetch orders: %s", exc)
            raise
        self.orders = orders
        self.error = None
        self.last_updated = datetime.now()
        return self.orders

    def view(self, mode: str = "all") -> list[NormalizedOrder]:
        return filter_by_view_mode(self.orders, mode)

    async def set_status(self, order_id: Any, status: str) -> None:
        """Show the new status immediately, then persist it.

        If the backend write fails the local record is restored and the
        error re-raised for the caller to report.
        """
        change = StatusChange(order_id, status)
        change.apply(self.orders)
        try:
            await update_order_status(self.client, order_id, status)
        except DashboardError as exc:
            change.revert(self.orders)
            self.error = "Failed to update order status. Please try again."
            logger.warning("Status update for order %s failed, reverted: %s", order_id, exc)
            raise

    async def cancel(self, order_id: Any) -> None:
        await self.set_status(order_id, STATUS_CANCELLED)
