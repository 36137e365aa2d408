"""
Control-panel settings: service prices and images, pickup slots, payment
methods.

Write helpers propagate ApiError to the caller, who owns user messaging.
"""

import asyncio
import logging
import mimetypes
from typing import Any

from ..config import (
    MAX_IMAGE_BYTES,
    MEDIA_ENDPOINT,
    PAYMENT_METHOD_COLLECTION,
    PICKUP_SLOT_COLLECTION,
    SERVICE_COLLECTION,
)
from ..errors import ApiError, DashboardError
from ..utils import acf_fields, rendered_title, safe_decimal, to_provider_code, wp_records
from .client import ApiClient
from .orders import fetch_optional

logger = logging.getLogger(__name__)


async def get_settings(client: ApiClient) -> dict:
    """Load everything the control panel shows, in one concurrent batch.

    Returns
    -------
    Dict with structure:
    {
        "prices": [{"id": 1, "name": "Wash & Fold", "price": 12.5}, ...],
        "pickup_slots": [{"id": 7, "time": "09:00"}, ...],
        "payment_methods": [{"id": 3, "name": "Card"}, ...],
        "daily_availability": {"is_available": True},
    }

    Payment methods are optional: a failed fetch yields an empty list.
    There is no backend source for daily availability yet, so it is
    always reported as available.
    """
    services, slots, methods = await asyncio.gather(
        client.get_collection(SERVICE_COLLECTION),
        client.get_collection(PICKUP_SLOT_COLLECTION),
        fetch_optional(client, PAYMENT_METHOD_COLLECTION),
    )

    prices = [
        {"id": s["id"], "name": rendered_title(s), "price": acf_fields(s).get("price") or 0}
        for s in wp_records(services)
    ]
    pickup_slots = [{"id": s["id"], "time": acf_fields(s).get("time")} for s in wp_records(slots)]
    payment_methods = [{"id": m["id"], "name": rendered_title(m)} for m in wp_records(methods)]

    return {
        "prices": prices,
        "pickup_slots": pickup_slots,
        "payment_methods": payment_methods,
        "daily_availability": {"is_available": True},
    }


async def get_services(client: ApiClient) -> list[dict]:
    """Return services as {id, name, image}."""
    try:
        services = await client.get_collection(SERVICE_COLLECTION)
    except ApiError as exc:
        logger.error("Failed to fetch services: %s", exc)
        raise ApiError("Failed to load services. Please try again later.", exc.status_code) from exc
    return [
        {"id": s["id"], "name": rendered_title(s), "image": acf_fields(s).get("image")}
        for s in wp_records(services)
    ]


async def update_service_price(client: ApiClient, service_id: Any, price: Any) -> Any:
    """Set a service's price; unparseable input is stored as 0."""
    value = float(safe_decimal(price))
    return await client.request(
        f"{SERVICE_COLLECTION}/{service_id}", "POST", {"acf": {"price": value}}
    )


async def update_service_image(
    client: ApiClient,
    service_id: Any,
    filename: str,
    content: bytes,
    content_type: str | None = None,
) -> dict:
    """Upload an image to the media library and attach it to a service.

    Only image types up to MAX_IMAGE_BYTES are accepted; `content_type`
    is guessed from the filename when not given. The ACF image field is
    set to the media id first; if the backend rejects that, the media URL
    is stored instead.
    """
    content_type = content_type or mimetypes.guess_type(filename)[0] or ""
    if not content_type.startswith("image/"):
        raise DashboardError("Please select a valid image file (JPEG, PNG, GIF).")
    if len(content) > MAX_IMAGE_BYTES:
        raise DashboardError("Image size must be less than 5MB.")

    media = await client.request(
        MEDIA_ENDPOINT, "POST", files={"file": (filename, content, content_type)}
    )
    image_id = media.get("id")
    image_url = media.get("source_url")
    endpoint = f"{SERVICE_COLLECTION}/{service_id}"

    try:
        await client.request(endpoint, "POST", {"acf": {"image": image_id}})
    except ApiError as exc:
        logger.info("Setting image by id failed (%s), retrying with URL", exc)
        await client.request(endpoint, "POST", {"acf": {"image": image_url}})

    return {"id": service_id, "image": image_url}


async def delete_service_image(client: ApiClient, service_id: Any) -> dict:
    """Clear a service's image, trying null and then an empty string."""
    endpoint = f"{SERVICE_COLLECTION}/{service_id}"
    try:
        await client.request(endpoint, "POST", {"acf": {"image": None}})
    except ApiError as exc:
        logger.info("Clearing image with null failed (%s), retrying with empty string", exc)
        await client.request(endpoint, "POST", {"acf": {"image": ""}})
    return {"success": True}


async def create_pickup_slot(client: ApiClient, time: str) -> Any:
    return await client.request(
        PICKUP_SLOT_COLLECTION,
        "POST",
        {"title": time, "status": "publish", "acf": {"time": time, "is_active": True}},
    )


async def delete_pickup_slot(client: ApiClient, slot_id: Any) -> Any:
    return await client.request(f"{PICKUP_SLOT_COLLECTION}/{slot_id}", "DELETE", {"force": True})


async def create_payment_method(client: ApiClient, name: str) -> Any:
    return await client.request(
        PAYMENT_METHOD_COLLECTION,
        "POST",
        {
            "title": name,
            "status": "publish",
            "acf": {"provider_code": to_provider_code(name), "is_active": True},
        },
    )


async def delete_payment_method(client: ApiClient, method_id: Any) -> Any:
    return await client.request(
        f"{PAYMENT_METHOD_COLLECTION}/{method_id}", "DELETE", {"force": True}
    )
