"""
FoodTracker API client

Thin httpx wrapper that attaches the access token and refreshes the token
pair when a request comes back 401. Refreshing is single-flight per client:
threads that hit a 401 with the same stale token wait for one refresh and
then retry with the new token.
"""

import logging
import threading
from typing import Any, Dict, Optional

import httpx

from foodtracker.errors import AuthenticationError

logger = logging.getLogger(__name__)


class FoodTrackerClient:
    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        timeout: float = 10,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.http_client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)
        self.access_token = access_token
        self.refresh_token = refresh_token
        self._refresh_lock = threading.Lock()
        self.refresh_count = 0

    def _store_tokens(self, payload: Dict[str, Any]) -> None:
        self.access_token = payload["access_token"]
        self.refresh_token = payload["refresh_token"]

    def clear_tokens(self) -> None:
        self.access_token = None
        self.refresh_token = None

    def login(self, email: str, password: str) -> Dict[str, Any]:
        response = self.http_client.post("/api/auth/login", json={"email": email, "password": password})
        if response.status_code != 200:
            raise AuthenticationError("login failed", code="INVALID_CREDENTIALS")
        payload = response.json()
        self._store_tokens(payload)
        return payload

    def refresh_tokens(self, stale_token: Optional[str]) -> None:
        """
        Refresh once for ``stale_token``.

        When another thread already replaced the stale token by the time the
        lock is acquired, its result is reused and no request is made.
        """
        with self._refresh_lock:
            if self.access_token is not None and self.access_token != stale_token:
                return
            if not self.refresh_token:
                self.clear_tokens()
                raise AuthenticationError("session expired", code="SESSION_EXPIRED")

            try:
                response = self.http_client.post("/api/auth/refresh", json={"refresh_token": self.refresh_token})
            except httpx.HTTPError as e:
                self.clear_tokens()
                raise AuthenticationError(f"token refresh failed: {e}", code="SESSION_EXPIRED")
            if response.status_code != 200:
                logger.warning("Token refresh rejected with HTTP %s", response.status_code)
                self.clear_tokens()
                raise AuthenticationError("session expired", code="SESSION_EXPIRED")

            self._store_tokens(response.json())
            self.refresh_count += 1

    def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send a request, refreshing and retrying once on 401."""
        token = self.access_token
        response = self._send(method, path, token, **kwargs)
        if response.status_code != 401 or not self.refresh_token:
            return response

        self.refresh_tokens(token)
        return self._send(method, path, self.access_token, **kwargs)

    def _send(self, method: str, path: str, token: Optional[str], **kwargs) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return self.http_client.request(method, path, headers=headers, **kwargs)

    def get(self, path: str, **kwargs) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> httpx.Response:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self.http_client.close()
