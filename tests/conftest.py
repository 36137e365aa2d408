import json

import httpx
import pytest

from laundry_dashboard.loaders import ApiClient
from laundry_dashboard.models import NormalizedOrder, OrderService

BASE_URL = "https://api.test/wp-json/wp/v2"


def raw_record(record_id, title="", **acf):
    return {"id": record_id, "title": {"rendered": title}, "acf": acf}


def raw_service(service_id, name, price="10.00", slug=""):
    return raw_record(service_id, name, price=price, slug=slug)


def raw_order(order_id, **acf):
    return raw_record(order_id, f"Order #{order_id}", **acf)


def order(
    order_id=1,
    status="pending",
    total_price="0.00",
    timestamp="—",
    customer="—",
    services=(),
):
    """A NormalizedOrder with only the fields statistics care about."""
    return NormalizedOrder(
        id=order_id,
        title=f"Order #{order_id}",
        customer_name=customer,
        room_number="101",
        pickup_method="Door pickup",
        payment_confirmed=False,
        total_price=total_price,
        special_instructions="—",
        order_status=status,
        order_timestamp=timestamp,
        camp_name="—",
        services=tuple(OrderService(id=i, name=name) for i, name in enumerate(services)),
    )


def collection_handler(collections, fail=(), status_result=200):
    """Serve GET <collection> from a dict; names in `fail` answer 500.

    POSTs to update_order_status answer `status_result` and are recorded
    on handler.calls.
    """
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        name = request.url.path.rstrip("/").rsplit("/", 1)[-1]
        calls.append((request.method, name, request))
        if name in fail:
            return httpx.Response(500, json={"message": f"{name} exploded"})
        if request.method == "GET" and name in collections:
            return httpx.Response(200, json=collections[name])
        if request.method == "POST" and name == "update_order_status":
            body = json.loads(request.content)
            return httpx.Response(status_result, json={"received": body})
        return httpx.Response(404, json={"message": "not found"})

    handler.calls = calls
    return handler


@pytest.fixture
def make_client():
    def _make(handler, token="test-token"):
        return ApiClient(lambda: token, base_url=BASE_URL, nonce=None, transport=httpx.MockTransport(handler))
    return _make
