"""Client for the downstream Zoho integration service (leads, accounts, health)."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class ZohoServiceError(Exception):
    """
    Raised when a Zoho service call fails.

    code is one of ZOHO_ERROR (non-2xx reply), TIMEOUT or NETWORK_ERROR.
    """

    def __init__(self, code: str, message: str, status_code: int | None = None) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ZohoClient:
    """
    Thin async wrapper around the Zoho service REST API.

    Created once per process and kept on app.state. Each call opens its own
    httpx.AsyncClient; transport is injectable for tests.
    """

    def __init__(
        self,
        base_url: str,
        forward_auth: bool = False,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.forward_auth = forward_auth
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> ZohoClient:
        return cls(
            base_url=settings.ZOHO_SERVICE_URL,
            forward_auth=settings.ZOHO_FORWARD_AUTH,
            timeout=settings.ZOHO_REQUEST_TIMEOUT_SEC,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport)

    async def _request(
        self,
        method: str,
        endpoint: str,
        auth_token: str | None = None,
        json_body: Any = None,
    ) -> Any:
        """Send one request; return decoded JSON or raise ZohoServiceError."""
        url = f"{self.base_url}{endpoint}"
        headers = {"Content-Type": "application/json"}
        if self.forward_auth and auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"
        try:
            async with self._client() as client:
                resp = await client.request(
                    method, url, headers=headers, json=json_body, timeout=self.timeout
                )
        except httpx.TimeoutException as e:
            logger.error("Zoho service request timeout", extra={"endpoint": endpoint})
            raise ZohoServiceError("TIMEOUT", "Request to Zoho service timed out") from e
        except httpx.HTTPError as e:
            logger.error(
                "Zoho service request error",
                extra={"endpoint": endpoint, "reason": str(e)[:200]},
            )
            raise ZohoServiceError("NETWORK_ERROR", "Failed to connect to Zoho service") from e

        if resp.status_code >= 400:
            logger.warning(
                "Zoho service request failed",
                extra={
                    "endpoint": endpoint,
                    "status_code": resp.status_code,
                    "reason": (resp.text or "")[:500],
                },
            )
            raise ZohoServiceError(
                "ZOHO_ERROR",
                f"Zoho service returned {resp.status_code}",
                resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise ZohoServiceError("ZOHO_ERROR", "Zoho service returned invalid JSON") from e

    async def get_leads(self, auth_token: str | None = None) -> Any:
        return await self._request("GET", "/leads", auth_token)

    async def get_accounts(self, auth_token: str | None = None) -> Any:
        return await self._request("GET", "/accounts", auth_token)

    async def create_lead(self, lead: dict[str, Any], auth_token: str | None = None) -> Any:
        return await self._request("POST", "/create-lead", auth_token, json_body=lead)

    async def ping(self, timeout: float) -> tuple[bool, int | None]:
        """
        Probe GET /health. Returns (reachable, latency_ms); latency is None when
        no response arrived. Never raises.
        """
        start = time.perf_counter()
        try:
            async with self._client() as client:
                resp = await client.get(f"{self.base_url}/health", timeout=timeout)
        except httpx.HTTPError as e:
            logger.warning("Zoho health check failed", extra={"reason": str(e)[:200]})
            return False, None
        latency = int((time.perf_counter() - start) * 1000)
        return resp.is_success, latency
