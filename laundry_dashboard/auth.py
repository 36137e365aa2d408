"""
Bearer-token storage and the JWT login flow.

The API client never reads the token store directly; it is handed a
credential provider (any zero-argument callable returning the token or
None). TokenStore is callable, so a store instance can be passed as-is.
"""

import json
import logging
from pathlib import Path

import httpx

from .config import AUTH_URL, REQUEST_TIMEOUT, TOKEN_FILE, TOKEN_KEY
from .errors import AuthenticationError

logger = logging.getLogger(__name__)


class TokenStore:
    """Persist a single bearer token under a fixed key in a JSON file."""

    def __init__(self, path: Path | str = TOKEN_FILE, key: str = TOKEN_KEY):
        self.path = Path(path)
        self.key = key

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Token file %s is corrupt, ignoring it", self.path)
            return {}

    def get(self) -> str | None:
        token = self._read().get(self.key)
        if not token:
            logger.warning("JWT token not found. User may not be logged in.")
            return None
        return token

    def set(self, token: str) -> None:
        data = self._read()
        data[self.key] = token
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def clear(self) -> None:
        data = self._read()
        if data.pop(self.key, None) is not None:
            self.path.write_text(json.dumps(data), encoding="utf-8")

    def __call__(self) -> str | None:
        return self.get()


async def login_admin(
    username: str,
    password: str,
    store: TokenStore,
    client: httpx.AsyncClient | None = None,
) -> dict:
    """Exchange admin credentials for a JWT and store it.

    Returns the login payload (token plus user details). Raises
    AuthenticationError when the endpoint is unreachable or rejects the
    credentials.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=REQUEST_TIMEOUT)

    try:
        response = await client.post(AUTH_URL, json={"username": username, "password": password})
    except httpx.HTTPError as exc:
        logger.error("Login request failed: %s", exc)
        raise AuthenticationError(
            "Could not connect to the authentication server. Check network settings."
        ) from exc
    finally:
        if owns_client:
            await client.aclose()

    try:
        data = response.json()
    except ValueError:
        data = {}

    if response.is_error or not data.get("token"):
        raise AuthenticationError(data.get("message") or "Login failed. Check credentials.")

    store.set(data["token"])
    logger.info("Logged in as %s", username)
    return data


def logout_admin(store: TokenStore) -> None:
    """Forget the stored token."""
    store.clear()
    logger.info("Logged out successfully")
