"""Camp management: list, create, rename, delete."""

import logging
from typing import Any

from ..config import CAMP_COLLECTION
from ..utils import rendered_title, wp_records
from .client import ApiClient

logger = logging.getLogger(__name__)


async def fetch_camps(client: ApiClient) -> list[dict]:
    """Return every camp as {id, name}."""
    data = await client.get_collection(CAMP_COLLECTION)
    return [{"id": camp["id"], "name": rendered_title(camp)} for camp in wp_records(data)]


async def create_camp(client: ApiClient, name: str) -> Any:
    camp = await client.request(
        CAMP_COLLECTION, "POST", {"title": name, "status": "publish"}
    )
    logger.info("Created camp %r", name)
    return camp


async def update_camp(client: ApiClient, camp_id: Any, name: str) -> Any:
    # WordPress uses POST for updates
    return await client.request(f"{CAMP_COLLECTION}/{camp_id}", "POST", {"title": name})


async def delete_camp(client: ApiClient, camp_id: Any) -> Any:
    """Delete a camp permanently, bypassing the trash."""
    result = await client.request(f"{CAMP_COLLECTION}/{camp_id}", "DELETE", {"force": True})
    logger.info("Deleted camp %s", camp_id)
    return result
