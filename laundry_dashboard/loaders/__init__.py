"""Backend loaders for the laundry booking WordPress API."""

from .client import ApiClient
from .orders import fetch_collections, fetch_laundry_orders, update_order_status
from .camps import fetch_camps, create_camp, update_camp, delete_camp
from .settings import get_settings, get_services, update_service_price
from .settings import update_service_image, delete_service_image
from .settings import create_pickup_slot, delete_pickup_slot
from .settings import create_payment_method, delete_payment_method

__all__ = [
    "ApiClient",
    "fetch_collections",
    "fetch_laundry_orders",
    "update_order_status",
    "fetch_camps",
    "create_camp",
    "update_camp",
    "delete_camp",
    "get_settings",
    "get_services",
    "update_service_price",
    "update_service_image",
    "delete_service_image",
    "create_pickup_slot",
    "delete_pickup_slot",
    "create_payment_method",
    "delete_payment_method",
]
