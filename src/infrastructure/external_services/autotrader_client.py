"""HTTP client for the AutoTrader Connect API."""

from typing import Any

import httpx
import structlog

from src.config import settings

logger = structlog.get_logger(__name__)


class AutoTraderClientError(Exception):
    """
    A failed AutoTrader call.

    ``status_code`` is None when the request never got a response.
    ``body`` is the raw response text, unmodified.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AutoTraderClient:
    """Thin HTTP wrapper around the AutoTrader stock, vehicle, image and auth endpoints."""

    def __init__(
        self,
        base_url: str = settings.autotrader_api_base_url,
        timeout: float = settings.autotrader_timeout_seconds,
        auth_timeout: float = settings.autotrader_auth_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._auth_timeout = auth_timeout
        self._transport = transport

    def _client(self, timeout: float | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout or self._timeout, transport=self._transport)

    @staticmethod
    def _auth_headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}", "Accept": "application/json"}

    async def _send(self, endpoint: str, request: httpx.Request, timeout: float | None = None) -> httpx.Response:
        async with self._client(timeout) as client:
            try:
                response = await client.send(request)
            except httpx.RequestError as exc:
                logger.error("autotrader_connection_failed", endpoint=endpoint, error=str(exc))
                raise AutoTraderClientError(f"Failed to reach AutoTrader {endpoint}: {exc}") from exc

        if response.is_success:
            return response

        logger.error(
            "autotrader_request_failed",
            endpoint=endpoint,
            status_code=response.status_code,
            response=response.text,
        )
        raise AutoTraderClientError(
            f"AutoTrader {endpoint} returned {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )

    async def authenticate(self, key: str, secret: str) -> dict[str, Any]:
        """
        POST /authenticate → {"access_token": "...", "expires_at": "..."}
        """
        request = httpx.Request(
            "POST",
            f"{self._base_url}/authenticate",
            json={"key": key, "secret": secret},
        )
        response = await self._send("authenticate", request, timeout=self._auth_timeout)
        return response.json()

    async def get_vehicle(self, advertiser_id: str, registration: str, token: str) -> dict[str, Any]:
        """
        GET /vehicles?registration=... → {"vehicle": {...}, "features": [...], ...}
        """
        params = {
            "advertiserId": advertiser_id,
            "registration": registration,
            "features": "true",
            "motTests": "true",
            "history": "true",
            "valuations": "true",
            "competitors": "true",
            "vehicleMetrics": "true",
        }
        request = httpx.Request(
            "GET", f"{self._base_url}/vehicles", params=params, headers=self._auth_headers(token)
        )
        response = await self._send("vehicles", request)
        return response.json()

    async def get_derivative(self, advertiser_id: str, derivative_id: str, token: str) -> dict[str, Any]:
        """
        GET /taxonomy/derivatives/{derivativeId} → derivative detail
        """
        request = httpx.Request(
            "GET",
            f"{self._base_url}/taxonomy/derivatives/{derivative_id}",
            params={"advertiserId": advertiser_id, "features": "true"},
            headers=self._auth_headers(token),
        )
        response = await self._send("taxonomy/derivatives", request)
        return response.json()

    async def fetch_source_image(self, url: str) -> tuple[bytes, str]:
        """Download a dealer image from storage; returns (content, content_type)."""
        try:
            request = httpx.Request("GET", url)
        except httpx.InvalidURL as exc:
            logger.error("invalid_image_source_url", url=url, error=str(exc))
            raise AutoTraderClientError(f"Invalid image source URL {url!r}: {exc}") from exc
        response = await self._send("image-source", request)
        content_type = response.headers.get("content-type", "application/octet-stream")
        return response.content, content_type

    async def upload_image(
        self,
        advertiser_id: str,
        token: str,
        *,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> dict[str, Any]:
        """
        POST /images (multipart, field "file") → {"imageId": "..."}
        """
        request = httpx.Request(
            "POST",
            f"{self._base_url}/images",
            params={"advertiserId": advertiser_id},
            headers=self._auth_headers(token),
            files={"file": (filename, content, content_type)},
        )
        response = await self._send("images", request)
        return response.json()

    async def create_stock(self, advertiser_id: str, token: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        POST /stock → created stock item
        """
        request = httpx.Request(
            "POST",
            f"{self._base_url}/stock",
            params={"advertiserId": advertiser_id},
            headers=self._auth_headers(token),
            json=payload,
        )
        response = await self._send("stock", request)
        if not response.content:
            return {}
        return response.json()
