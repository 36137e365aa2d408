"""
Laundry Booking — End-to-end order pipeline.

Fetches orders from the backend (or the simulator), joins them and prints
the dashboard and statistics summaries.

Usage:
    python main.py              # live backend, token from the token store
    python main.py --demo       # synthetic data, no network
    python main.py --login USER # prompt for a password and store a token
"""

import argparse
import asyncio
import getpass
import logging

from laundry_dashboard.auth import TokenStore, login_admin
from laundry_dashboard.dashboard import (
    daily_revenue,
    get_dashboard_summary,
    get_statistics_summary,
    orders_to_frame,
)
from laundry_dashboard.errors import DashboardError
from laundry_dashboard.loaders import ApiClient, fetch_laundry_orders
from laundry_dashboard.simulator import build_demo_transport, generate_raw_collections

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


async def load_orders(demo: bool) -> list:
    if demo:
        transport = build_demo_transport(generate_raw_collections())
        client = ApiClient(lambda: "demo-token", transport=transport)
    else:
        client = ApiClient(TokenStore())

    async with client:
        return await fetch_laundry_orders(client)


def main() -> int:
    """Run the pipeline and print smoke-test outputs."""
    parser = argparse.ArgumentParser(description="Laundry booking order pipeline")
    parser.add_argument("--demo", action="store_true", help="use simulated data")
    parser.add_argument("--login", metavar="USERNAME", help="log in and store a token")
    args = parser.parse_args()

    if args.login:
        password = getpass.getpass(f"Password for {args.login}: ")
        try:
            asyncio.run(login_admin(args.login, password, TokenStore()))
        except DashboardError as exc:
            logger.error("Login failed: %s", exc)
            return 1
        print("Logged in.")
        return 0

    print("=" * 70)
    print("  LAUNDRY BOOKING — Admin Dashboard")
    print("  Order Pipeline Smoke Test")
    print("=" * 70)

    # ------------------------------------------------------------------
    # 1. Fetch and join
    # ------------------------------------------------------------------
    print("\n[ 1 ] FETCHING ORDERS")
    print("-" * 40)
    try:
        orders = asyncio.run(load_orders(args.demo))
    except DashboardError as exc:
        logger.error("Could not load orders: %s", exc)
        return 1

    frame = orders_to_frame(orders)
    print(f"\nOrders: {len(frame)} rows")
    if not frame.empty:
        print(frame[["id", "customer_name", "camp_name", "services", "total_price", "order_status"]]
              .head(15).to_string(index=False))

    # ------------------------------------------------------------------
    # 2. Summaries
    # ------------------------------------------------------------------
    print("\n[ 2 ] DASHBOARD")
    print("-" * 40)
    for key, value in get_dashboard_summary(orders).items():
        print(f"  {key:28s} | {value}")

    print("\n[ 3 ] STATISTICS")
    print("-" * 40)
    for key, value in get_statistics_summary(orders).items():
        print(f"  {key:28s} | {value}")

    print("\n[ 4 ] DAILY REVENUE")
    print("-" * 40)
    revenue = daily_revenue(orders)
    if not revenue.empty:
        print(revenue.tail(10).to_string(index=False))

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
