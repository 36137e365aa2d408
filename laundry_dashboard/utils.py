"""
Shared helpers for reading WordPress records: rendered titles, ACF field
bags, numeric coercion.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)


def acf_fields(record: Any) -> dict:
    """Return the ACF custom-field bag of a record, or an empty dict.

    WordPress returns `acf: []` (an empty list) when no fields are set, so
    anything that is not a dict is treated as empty.
    """
    if not isinstance(record, dict):
        return {}
    acf = record.get("acf")
    return acf if isinstance(acf, dict) else {}


def wp_records(payload: Any) -> list[dict]:
    """Return the usable records of a collection payload.

    A payload that is not a list (an error object served with a 200, for
    instance) yields no records, and entries without an id are skipped.
    """
    if not isinstance(payload, list):
        logger.warning("Collection payload is not a list: %.200r", payload)
        return []
    return [r for r in payload if isinstance(r, dict) and "id" in r]


def rendered_title(record: Any, default: str = "") -> str:
    """Return `title.rendered` of a record, falling back to `default`."""
    if not isinstance(record, dict):
        return default
    title = record.get("title")
    if isinstance(title, dict):
        return title.get("rendered") or default
    if isinstance(title, str) and title:
        return title
    return default


def safe_decimal(val: Any) -> Decimal:
    """Coerce a price-like value to Decimal, returning 0 for junk.

    Leading numeric text is used the way a lenient float parser would:
    "12.50 AUD" -> 12.50, "abc" -> 0.
    """
    if val is None or isinstance(val, bool):
        return Decimal(0)
    if isinstance(val, (int, Decimal)):
        return Decimal(val)
    if isinstance(val, float):
        return Decimal(str(val))
    match = re.match(r"\s*([+-]?(\d+(\.\d*)?|\.\d+))", str(val))
    if not match:
        return Decimal(0)
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        logger.warning("Could not parse price value: %s", val)
        return Decimal(0)


def to_provider_code(name: str) -> str:
    """Slug-like payment provider code: lowercase, non-alphanumerics to '_'."""
    return re.sub(r"[^a-z0-9]+", "_", str(name).lower())
