"""Unit tests for the AutoTrader HTTP client against an in-memory transport."""
import json

import httpx
import pytest

from src.infrastructure.external_services.autotrader_client import (
    AutoTraderClient,
    AutoTraderClientError,
)

BASE_URL = "https://api-sandbox.example.test"


def _client(handler) -> AutoTraderClient:  # type: ignore[no-untyped-def]
    return AutoTraderClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestAutoTraderClient:
    @pytest.mark.asyncio
    async def test_authenticate_posts_credentials(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"access_token": "tok", "expires_in": 900})

        body = await _client(handler).authenticate("key", "secret")

        assert body["access_token"] == "tok"
        assert seen[0].url.path == "/authenticate"
        assert json.loads(seen[0].content) == {"key": "key", "secret": "secret"}

    @pytest.mark.asyncio
    async def test_get_vehicle_sends_token_and_flags(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"vehicle": {"make": "Audi"}})

        body = await _client(handler).get_vehicle("ADV-1", "KY24TKT", "tok")

        assert body == {"vehicle": {"make": "Audi"}}
        params = seen[0].url.params
        assert params["advertiserId"] == "ADV-1"
        assert params["registration"] == "KY24TKT"
        assert params["features"] == "true"
        assert seen[0].headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_get_derivative_path(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"name": "1.5 TSI"})

        await _client(handler).get_derivative("ADV-1", "d123", "tok")

        assert seen[0].url.path == "/taxonomy/derivatives/d123"

    @pytest.mark.asyncio
    async def test_upload_image_uses_file_field(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"imageId": "AT-1"})

        body = await _client(handler).upload_image(
            "ADV-1", "tok", filename="front.jpg", content=b"\xff\xd8", content_type="image/jpeg"
        )

        assert body == {"imageId": "AT-1"}
        content = seen[0].read()
        assert b'name="file"; filename="front.jpg"' in content
        assert seen[0].url.params["advertiserId"] == "ADV-1"

    @pytest.mark.asyncio
    async def test_fetch_source_image_returns_content_type(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"png-bytes", headers={"content-type": "image/png"})

        content, content_type = await _client(handler).fetch_source_image(
            "https://cdn.example.com/a.png"
        )

        assert content == b"png-bytes"
        assert content_type == "image/png"

    @pytest.mark.asyncio
    async def test_create_stock_with_empty_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201)

        assert await _client(handler).create_stock("ADV-1", "tok", {"vehicle": {}}) == {}

    @pytest.mark.asyncio
    async def test_error_response_keeps_raw_body(self) -> None:
        raw = '{"message": "Invalid engine data"}'

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, text=raw)

        with pytest.raises(AutoTraderClientError) as exc_info:
            await _client(handler).create_stock("ADV-1", "tok", {})

        assert exc_info.value.status_code == 422
        assert exc_info.value.body == raw

    @pytest.mark.asyncio
    async def test_connection_error_has_no_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AutoTraderClientError) as exc_info:
            await _client(handler).get_vehicle("ADV-1", "KY24TKT", "tok")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_malformed_source_url_is_client_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"jpeg", headers={"content-type": "image/jpeg"})

        with pytest.raises(AutoTraderClientError) as exc_info:
            await _client(handler).fetch_source_image("http://[::1/b.jpg")

        assert exc_info.value.status_code is None
        assert "Invalid image source URL" in str(exc_info.value)
