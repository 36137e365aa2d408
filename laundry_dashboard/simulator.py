"""
Simulated backend payloads for the laundry admin dashboard.

Generates raw WordPress records shaped like the live API (including its
inconsistencies: scalar vs list relation fields, two timestamp formats,
dangling ids) so the pipeline can be demoed without a backend.
All values are synthetic.
"""

import json
from datetime import datetime, timedelta

import httpx
import numpy as np

from .config import STATUS_CANCELLED, STATUS_COMPLETED, STATUS_PENDING

_SERVICES = [
    (11, "Wash & Fold", "wash-fold", "12.50"),
    (12, "Ironing", "ironing", "8.00"),
    (13, "Dry Cleaning", "dry-cleaning", "18.00"),
    (14, "Bedding", "bedding", "15.00"),
]

_SLOTS = [(21, "07:00"), (22, "12:00"), (23, "17:30")]

_CAMPS = [(31, "Karratha Village"), (32, "Port Hedland Camp"), (33, "Newman Lodge")]

_PAYMENT_METHODS = [(41, "Card"), (42, "Cash")]

_CUSTOMERS = [
    "Liam Walker", "Olivia Smith", "Noah Brown", "Ava Taylor",
    "Jack Wilson", "Mia Martin", "Leo Anderson", "Chloe White",
]

_PICKUP_METHODS = ["Door pickup", "Drop-off point"]

# Ids that exist in no collection
_DANGLING_SERVICE = 99
_DANGLING_CAMP = 98


def _record(record_id: int, title: str, acf: dict) -> dict:
    return {"id": record_id, "title": {"rendered": title}, "acf": acf}


def format_locale_timestamp(ts: datetime) -> str:
    """Render as "DD/MM/YYYY, H:MM:SS am|pm", the booking form's format."""
    hour = ts.hour % 12 or 12
    ampm = "am" if ts.hour < 12 else "pm"
    return f"{ts.day:02d}/{ts.month:02d}/{ts.year}, {hour}:{ts.minute:02d}:{ts.second:02d} {ampm}"


def generate_raw_collections(
    n_orders: int = 40,
    now: datetime | None = None,
    seed: int = 42,
    days_back: int = 45,
) -> dict[str, list[dict]]:
    """Generate raw payloads for every collection the dashboard reads.

    Returns
    -------
    Dict keyed by collection name: laundry_order, service, pickup_slot,
    camp, payment_method.
    """
    rng = np.random.default_rng(seed)
    now = now or datetime.now()

    services = [
        _record(sid, name, {"slug": slug, "price": price, "image": None})
        for sid, name, slug, price in _SERVICES
    ]
    prices = {sid: float(price) for sid, _, _, price in _SERVICES}
    slots = [_record(sid, time, {"time": time, "is_active": True}) for sid, time in _SLOTS]
    camps = [_record(cid, name, {}) for cid, name in _CAMPS]
    methods = [
        _record(mid, name, {"provider_code": name.lower(), "is_active": True})
        for mid, name in _PAYMENT_METHODS
    ]

    service_ids = [sid for sid, *_ in _SERVICES] + [_DANGLING_SERVICE]
    camp_ids = [cid for cid, _ in _CAMPS] + [_DANGLING_CAMP]
    statuses = [STATUS_PENDING, STATUS_COMPLETED, STATUS_CANCELLED]

    orders = []
    for i in range(n_orders):
        order_id = 1000 + i
        placed = now - timedelta(seconds=int(rng.integers(0, days_back * 86400)))

        n_services = int(rng.integers(1, 4))
        chosen = [int(x) for x in rng.choice(service_ids, size=n_services)]
        total = sum(prices.get(sid, 0.0) for sid in chosen)
        service_field = chosen if n_services > 1 else chosen[0]

        camp = int(rng.choice(camp_ids))
        camp_field = [camp] if rng.random() < 0.5 else camp

        if rng.random() < 0.5:
            timestamp = format_locale_timestamp(placed)
        else:
            timestamp = placed.strftime("%Y-%m-%dT%H:%M:%S")

        status = str(rng.choice(statuses, p=[0.4, 0.5, 0.1]))

        orders.append(_record(order_id, f"Order #{order_id}", {
            "customer_name": str(rng.choice(_CUSTOMERS)),
            "room_number": str(int(rng.integers(100, 400))),
            "pickup_method": str(rng.choice(_PICKUP_METHODS)),
            "payment_confirmed": bool(rng.random() < 0.7),
            "total_price": f"{total:.2f}",
            "Special_Instructions": "" if rng.random() < 0.7 else "Cold wash only",
            "order_status": status,
            "order_timestamp": timestamp,
            "service_id": service_field,
            "slot_id": int(rng.choice([sid for sid, _ in _SLOTS])),
            "camp_name": camp_field,
        }))

    return {
        "laundry_order": orders,
        "service": services,
        "pickup_slot": slots,
        "camp": camps,
        "payment_method": methods,
    }


def build_demo_transport(collections: dict[str, list[dict]]) -> httpx.MockTransport:
    """An httpx transport that serves `collections` as the REST API would.

    GET <collection> returns the list; POST update_order_status patches the
    matching order in place. Everything else answers 404.
    """
    orders_by_id = {o["id"]: o for o in collections.get("laundry_order", [])}

    def handler(request: httpx.Request) -> httpx.Response:
        name = request.url.path.rstrip("/").rsplit("/", 1)[-1]
        if request.method == "GET" and name in collections:
            return httpx.Response(200, json=collections[name])
        if request.method == "POST" and name == "update_order_status":
            body = json.loads(request.content or b"{}")
            order = orders_by_id.get(body.get("order_id"))
            if order is None:
                return httpx.Response(404, json={"message": "Order not found"})
            order["acf"]["order_status"] = body.get("order_status")
            return httpx.Response(200, json={"success": True})
        return httpx.Response(404, json={"message": f"No route for {request.url.path}"})

    return httpx.MockTransport(handler)
