"""
Thin async client for the WordPress REST API.

Every call attaches the bearer token obtained from the credential
provider. A missing token aborts the call before any request is sent.
"""

import json
import logging
from typing import Any, Callable

import httpx

from ..config import API_BASE, PER_PAGE, REQUEST_TIMEOUT, WP_NONCE
from ..errors import ApiError, AuthenticationError

logger = logging.getLogger(__name__)

CredentialProvider = Callable[[], str | None]


class ApiClient:
    """Authenticated JSON client bound to one API base URL.

    Use as an async context manager, or call aclose() when done.
    Pass `transport` to route requests somewhere other than the network.
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        base_url: str = API_BASE,
        nonce: str | None = WP_NONCE,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.credentials = credentials
        self.nonce = nonce
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        token = self.credentials()
        if not token:
            raise AuthenticationError("Authentication token not found.")
        headers = {"Authorization": f"Bearer {token}"}
        if self.nonce:
            headers["X-WP-Nonce"] = self.nonce
        return headers

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        params: dict | None = None,
        files: dict | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Empty and 204 responses decode to {"success": True}.
        """
        headers = self._headers()
        try:
            response = await self._http.request(
                method,
                endpoint,
                headers=headers,
                params=params,
                json=body if files is None else None,
                files=files,
            )
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, endpoint, exc)
            raise ApiError(f"Failed to {method} {endpoint}: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            if message is None:
                message = f"Failed to {method} {endpoint} with status {response.status_code}"
            logger.error("%s %s returned %d: %s", method, endpoint, response.status_code, message)
            raise ApiError(message, response.status_code)

        if response.status_code == 204 or not response.text:
            return {"success": True}

        try:
            return response.json()
        except json.JSONDecodeError as exc:
            logger.error("Invalid JSON from %s %s: %.200s", method, endpoint, response.text)
            raise ApiError("Server returned malformed data.", response.status_code) from exc

    async def get_collection(self, collection: str) -> Any:
        """GET <collection>?per_page=100."""
        return await self.request(collection, params={"per_page": PER_PAGE})


def _error_message(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return None
