"""Unit tests for AutoTrader token acquisition and caching."""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.domain.enums.stock_enums import StockErrorKind
from src.domain.errors.stock_creation_error import StockCreationError
from src.infrastructure.external_services.autotrader_auth import (
    AutoTraderTokenProvider,
    CachedToken,
    TokenCache,
)
from src.infrastructure.external_services.autotrader_client import AutoTraderClientError

BASE_URL = "https://api-sandbox.example.test"


def _make_client(**authenticate_kwargs) -> MagicMock:  # type: ignore[no-untyped-def]
    client = MagicMock()
    client.authenticate = AsyncMock(**authenticate_kwargs)
    return client


def _make_store_configs(credentials: tuple[str, str] | None = ("store-key", "store-secret")) -> MagicMock:
    configs = MagicMock()
    configs.get_api_credentials = AsyncMock(return_value=credentials)
    return configs


def _provider(client, store_configs, cache=None, central=("central-key", "central-secret")):  # type: ignore[no-untyped-def]
    return AutoTraderTokenProvider(
        client,
        store_configs,
        cache or TokenCache(),
        base_url=BASE_URL,
        central_key=central[0],
        central_secret=central[1],
    )


class TestTokenCache:
    def test_expired_tokens_are_evicted(self) -> None:
        cache = TokenCache()
        expired = datetime.now(timezone.utc) + timedelta(seconds=30)
        cache.put("k", BASE_URL, CachedToken("old", expired))

        assert cache.get("k", BASE_URL) is None

    def test_valid_token_is_returned(self) -> None:
        cache = TokenCache()
        cache.put("k", BASE_URL, CachedToken("tok", datetime.now(timezone.utc) + timedelta(hours=1)))

        assert cache.get("k", BASE_URL).access_token == "tok"  # type: ignore[union-attr]
        assert cache.get("k", "https://other.example.test") is None


class TestAutoTraderTokenProvider:
    @pytest.mark.asyncio
    async def test_centralized_credentials_first(self) -> None:
        client = _make_client(return_value={"access_token": "central-tok", "expires_in": 900})
        store_configs = _make_store_configs()

        token = await _provider(client, store_configs).get_token("owner@example.com")

        assert token == "central-tok"
        client.authenticate.assert_awaited_once_with("central-key", "central-secret")
        store_configs.get_api_credentials.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_token_is_cached(self) -> None:
        client = _make_client(return_value={"access_token": "tok"})
        provider = _provider(client, _make_store_configs())

        await provider.get_token("owner@example.com")
        await provider.get_token("owner@example.com")

        assert client.authenticate.await_count == 1

    @pytest.mark.asyncio
    async def test_falls_back_to_store_credentials(self) -> None:
        client = _make_client(
            side_effect=[
                AutoTraderClientError("AutoTrader authenticate returned 401", status_code=401),
                {"access_token": "store-tok"},
            ]
        )

        token = await _provider(client, _make_store_configs()).get_token("owner@example.com")

        assert token == "store-tok"
        assert client.authenticate.await_args.args == ("store-key", "store-secret")

    @pytest.mark.asyncio
    async def test_no_central_and_no_store_credentials(self) -> None:
        client = _make_client()

        with pytest.raises(StockCreationError) as exc_info:
            await _provider(client, _make_store_configs(None), central=("", "")).get_token(
                "owner@example.com"
            )

        assert exc_info.value.kind is StockErrorKind.AUTHENTICATION
        assert exc_info.value.message == "Missing individual API credentials"
        client.authenticate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_credentials_rejected(self) -> None:
        client = _make_client(
            side_effect=AutoTraderClientError("AutoTrader authenticate returned 403", status_code=403)
        )

        with pytest.raises(StockCreationError) as exc_info:
            await _provider(client, _make_store_configs(), central=("", "")).get_token(
                "owner@example.com"
            )

        assert exc_info.value.kind is StockErrorKind.AUTHENTICATION
        assert exc_info.value.endpoint == "auth"

    @pytest.mark.asyncio
    async def test_missing_access_token_falls_back(self) -> None:
        client = _make_client(side_effect=[{}, {"access_token": "store-tok"}])

        token = await _provider(client, _make_store_configs()).get_token("owner@example.com")

        assert token == "store-tok"

    @pytest.mark.asyncio
    async def test_store_response_without_token_is_authentication_error(self) -> None:
        client = _make_client(return_value={})

        with pytest.raises(StockCreationError) as exc_info:
            await _provider(client, _make_store_configs(), central=("", "")).get_token(
                "owner@example.com"
            )

        assert exc_info.value.kind is StockErrorKind.AUTHENTICATION
        assert exc_info.value.http_status == 401
        assert exc_info.value.endpoint == "auth"
