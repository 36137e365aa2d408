import asyncio
import json

import httpx
import pytest

from laundry_dashboard.errors import ApiError, AuthenticationError, DashboardError
from laundry_dashboard.loaders import (
    ApiClient,
    create_camp,
    create_payment_method,
    create_pickup_slot,
    delete_camp,
    delete_payment_method,
    delete_pickup_slot,
    delete_service_image,
    fetch_camps,
    fetch_collections,
    fetch_laundry_orders,
    get_services,
    get_settings,
    update_camp,
    update_order_status,
    update_service_image,
    update_service_price,
)

from .conftest import collection_handler, raw_order, raw_record, raw_service

COLLECTIONS = {
    "laundry_order": [
        raw_order(1, service_id=11, camp_name=[31], slot_id=21),
        raw_order(2, service_id=[11, 12], camp_name=32),
    ],
    "service": [raw_service(11, "Wash & Fold", "12.50"), raw_service(12, "Ironing", "8.00")],
    "pickup_slot": [raw_record(21, "Morning", time="07:00")],
    "camp": [raw_record(31, "Karratha Village"), raw_record(32, "Newman Lodge")],
    "payment_method": [raw_record(41, "Card")],
}


def run(coro_fn, client):
    async def _go():
        async with client:
            return await coro_fn(client)
    return asyncio.run(_go())


# ---------------------------------------------------------------------------
# ApiClient
# ---------------------------------------------------------------------------
def test_request_sends_bearer_token_and_per_page(make_client):
    handler = collection_handler(COLLECTIONS)
    run(lambda c: c.get_collection("camp"), make_client(handler))
    _, name, request = handler.calls[0]
    assert name == "camp"
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.url.params["per_page"] == "100"
    assert request.url.path == "/wp-json/wp/v2/camp"


def test_missing_token_aborts_before_request(make_client):
    handler = collection_handler(COLLECTIONS)
    with pytest.raises(AuthenticationError):
        run(lambda c: c.get_collection("camp"), make_client(handler, token=None))
    assert handler.calls == []


def test_error_status_carries_backend_message(make_client):
    handler = collection_handler(COLLECTIONS, fail={"camp"})
    with pytest.raises(ApiError) as excinfo:
        run(lambda c: c.get_collection("camp"), make_client(handler))
    assert excinfo.value.message == "camp exploded"
    assert excinfo.value.status_code == 500


def test_error_status_without_message_is_generic(make_client):
    client = make_client(lambda request: httpx.Response(403, text="nope"))
    with pytest.raises(ApiError) as excinfo:
        run(lambda c: c.request("camp/3", "DELETE"), client)
    assert str(excinfo.value) == "Failed to DELETE camp/3 with status 403"


def test_malformed_json_raises(make_client):
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(ApiError, match="malformed"):
        run(lambda c: c.get_collection("camp"), client)


def test_empty_and_204_responses_are_success(make_client):
    assert run(lambda c: c.request("x"), make_client(lambda r: httpx.Response(204))) == {"success": True}
    assert run(lambda c: c.request("x"), make_client(lambda r: httpx.Response(200, text=""))) == {"success": True}


def test_transport_error_becomes_api_error(make_client):
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(ApiError):
        run(lambda c: c.get_collection("camp"), make_client(handler))


def test_nonce_header_is_sent_when_configured():
    handler = collection_handler(COLLECTIONS)
    client = ApiClient(lambda: "t", base_url="https://api.test/wp", nonce="abc",
                       transport=httpx.MockTransport(handler))
    run(lambda c: c.get_collection("camp"), client)
    assert handler.calls[0][2].headers["X-WP-Nonce"] == "abc"


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
def test_fetch_laundry_orders_joins_everything(make_client):
    orders = run(fetch_laundry_orders, make_client(collection_handler(COLLECTIONS)))
    assert [o.id for o in orders] == [1, 2]
    assert orders[0].camp_name == "Karratha Village"
    assert orders[0].pickup_slot.time == "07:00"
    assert [s.name for s in orders[1].services] == ["Wash & Fold", "Ironing"]
    assert orders[1].camp_name == "Newman Lodge"


def test_fetch_collections_issues_all_four_requests(make_client):
    handler = collection_handler(COLLECTIONS)
    run(fetch_collections, make_client(handler))
    assert sorted(name for _, name, _ in handler.calls) == ["camp", "laundry_order", "pickup_slot", "service"]


def test_failed_camp_fetch_only_blanks_camp_names(make_client):
    orders = run(fetch_laundry_orders, make_client(collection_handler(COLLECTIONS, fail={"camp"})))
    assert len(orders) == 2
    assert {o.camp_name for o in orders} == {"—"}
    assert orders[0].services[0].name == "Wash & Fold"


def test_failed_services_and_slots_degrade(make_client):
    handler = collection_handler(COLLECTIONS, fail={"service", "pickup_slot"})
    orders = run(fetch_laundry_orders, make_client(handler))
    assert all(o.services == () for o in orders)
    assert all(o.pickup_slot is None for o in orders)
    assert orders[0].camp_name == "Karratha Village"


def test_failed_orders_fetch_propagates(make_client):
    with pytest.raises(ApiError):
        run(fetch_laundry_orders, make_client(collection_handler(COLLECTIONS, fail={"laundry_order"})))


def test_orders_error_shape_yields_empty_list(make_client):
    collections = dict(COLLECTIONS, laundry_order={"code": "rest_no_route"})
    assert run(fetch_laundry_orders, make_client(collection_handler(collections))) == []


def test_update_order_status_posts_payload(make_client):
    handler = collection_handler(COLLECTIONS)
    result = run(lambda c: update_order_status(c, 7, "completed"), make_client(handler))
    method, name, request = handler.calls[0]
    assert (method, name) == ("POST", "update_order_status")
    assert json.loads(request.content) == {"order_id": 7, "order_status": "completed"}
    assert result == {"received": {"order_id": 7, "order_status": "completed"}}


def test_update_order_status_failure_raises(make_client):
    handler = collection_handler(COLLECTIONS, status_result=500)
    with pytest.raises(ApiError):
        run(lambda c: update_order_status(c, 7, "completed"), make_client(handler))


# ---------------------------------------------------------------------------
# Settings and camps
# ---------------------------------------------------------------------------
def test_get_settings(make_client):
    settings = run(get_settings, make_client(collection_handler(COLLECTIONS)))
    assert settings["prices"] == [
        {"id": 11, "name": "Wash & Fold", "price": "12.50"},
        {"id": 12, "name": "Ironing", "price": "8.00"},
    ]
    assert settings["pickup_slots"] == [{"id": 21, "time": "07:00"}]
    assert settings["payment_methods"] == [{"id": 41, "name": "Card"}]
    assert settings["daily_availability"] == {"is_available": True}


def test_get_settings_tolerates_missing_payment_methods(make_client):
    handler = collection_handler(COLLECTIONS, fail={"payment_method"})
    assert run(get_settings, make_client(handler))["payment_methods"] == []


def test_get_services_failure_has_friendly_message(make_client):
    with pytest.raises(ApiError, match="Failed to load services"):
        run(get_services, make_client(collection_handler(COLLECTIONS, fail={"service"})))


def _recording_handler(responses=None):
    seen = []

    def handler(request):
        body = json.loads(request.content) if request.headers.get("content-type") == "application/json" else None
        seen.append((request.method, request.url.path, body))
        for (method, suffix), response in (responses or {}).items():
            if request.method == method and request.url.path.endswith(suffix) and response:
                return response.pop(0)
        return httpx.Response(200, json={"id": 500, "source_url": "https://cdn.test/img.png"})

    handler.seen = seen
    return handler


def test_update_service_price_coerces_input(make_client):
    handler = _recording_handler()
    run(lambda c: update_service_price(c, 11, "abc"), make_client(handler))
    run(lambda c: update_service_price(c, 11, "14.5"), make_client(handler))
    assert handler.seen[0] == ("POST", "/wp-json/wp/v2/service/11", {"acf": {"price": 0.0}})
    assert handler.seen[1][2] == {"acf": {"price": 14.5}}


def test_update_service_image_falls_back_to_url(make_client):
    handler = _recording_handler({("POST", "service/11"): [httpx.Response(400, json={"message": "bad id"})]})
    result = run(lambda c: update_service_image(c, 11, "shirt.png", b"\x89PNG"), make_client(handler))
    assert result == {"id": 11, "image": "https://cdn.test/img.png"}
    assert [path for _, path, _ in handler.seen] == [
        "/wp-json/wp/v2/media",
        "/wp-json/wp/v2/service/11",
        "/wp-json/wp/v2/service/11",
    ]
    assert handler.seen[1][2] == {"acf": {"image": 500}}
    assert handler.seen[2][2] == {"acf": {"image": "https://cdn.test/img.png"}}


def test_update_service_image_rejects_non_image(make_client):
    handler = _recording_handler()
    with pytest.raises(DashboardError, match="valid image file"):
        run(lambda c: update_service_image(c, 11, "notes.txt", b"x", "text/plain"), make_client(handler))
    with pytest.raises(DashboardError, match="valid image file"):
        run(lambda c: update_service_image(c, 11, "notes.txt", b"x"), make_client(handler))
    assert handler.seen == []


def test_update_service_image_rejects_oversized_file(make_client):
    handler = _recording_handler()
    content = b"x" * (5 * 1024 * 1024 + 1)
    with pytest.raises(DashboardError, match="less than 5MB"):
        run(lambda c: update_service_image(c, 11, "big.png", content, "image/png"), make_client(handler))
    assert handler.seen == []


def test_delete_service_image_falls_back_to_empty_string(make_client):
    handler = _recording_handler({("POST", "service/11"): [httpx.Response(400, json={"message": "null rejected"})]})
    result = run(lambda c: delete_service_image(c, 11), make_client(handler))
    assert result == {"success": True}
    assert handler.seen == [
        ("POST", "/wp-json/wp/v2/service/11", {"acf": {"image": None}}),
        ("POST", "/wp-json/wp/v2/service/11", {"acf": {"image": ""}}),
    ]


def test_pickup_slot_and_payment_method_writes(make_client):
    handler = _recording_handler()
    run(lambda c: create_pickup_slot(c, "09:30"), make_client(handler))
    run(lambda c: delete_pickup_slot(c, 21), make_client(handler))
    run(lambda c: create_payment_method(c, "Apple Pay!"), make_client(handler))
    assert handler.seen[0][2] == {
        "title": "09:30", "status": "publish", "acf": {"time": "09:30", "is_active": True},
    }
    assert handler.seen[1] == ("DELETE", "/wp-json/wp/v2/pickup_slot/21", {"force": True})
    assert handler.seen[2][2]["acf"] == {"provider_code": "apple_pay_", "is_active": True}


def test_camp_crud(make_client):
    camps = run(fetch_camps, make_client(collection_handler(COLLECTIONS)))
    assert camps == [{"id": 31, "name": "Karratha Village"}, {"id": 32, "name": "Newman Lodge"}]

    handler = _recording_handler()
    run(lambda c: create_camp(c, "Roy Hill"), make_client(handler))
    run(lambda c: delete_camp(c, 31), make_client(handler))
    assert handler.seen[0] == ("POST", "/wp-json/wp/v2/camp", {"title": "Roy Hill", "status": "publish"})
    assert handler.seen[1] == ("DELETE", "/wp-json/wp/v2/camp/31", {"force": True})


def test_write_failures_propagate(make_client):
    client = make_client(lambda request: httpx.Response(500, json={"message": "db down"}))
    with pytest.raises(ApiError, match="db down"):
        run(lambda c: create_camp(c, "Roy Hill"), client)


def test_update_camp_and_delete_payment_method(make_client):
    handler = _recording_handler()
    run(lambda c: update_camp(c, 32, "Newman Lodge East"), make_client(handler))
    run(lambda c: delete_payment_method(c, 41), make_client(handler))
    assert handler.seen == [
        ("POST", "/wp-json/wp/v2/camp/32", {"title": "Newman Lodge East"}),
        ("DELETE", "/wp-json/wp/v2/payment_method/41", {"force": True}),
    ]


def test_error_object_payloads_yield_empty_lists(make_client):
    error = {"code": "rest_forbidden", "message": "Sorry"}
    collections = dict(COLLECTIONS, service=error, pickup_slot=error, camp=error, payment_method=error)
    settings = run(get_settings, make_client(collection_handler(collections)))
    assert settings["prices"] == []
    assert settings["pickup_slots"] == []
    assert settings["payment_methods"] == []
    assert run(get_services, make_client(collection_handler(collections))) == []
    assert run(fetch_camps, make_client(collection_handler(collections))) == []
