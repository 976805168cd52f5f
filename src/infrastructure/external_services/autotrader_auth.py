"""
AutoTrader access tokens.

Centralized API credentials from settings are tried first; stores that carry
their own key/secret are the fallback. Tokens are cached in process until
shortly before they expire.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import structlog

from src.application.interfaces.access_token_provider import AccessTokenProvider
from src.application.interfaces.store_config_provider import StoreConfigProvider
from src.config import settings
from src.domain.errors.stock_creation_error import StockCreationError
from src.infrastructure.external_services.autotrader_client import (
    AutoTraderClient,
    AutoTraderClientError,
)

logger = structlog.get_logger(__name__)

DEFAULT_EXPIRES_IN_SECONDS = 900
EXPIRY_MARGIN = timedelta(seconds=60)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CachedToken:
    access_token: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now + EXPIRY_MARGIN < self.expires_at


class TokenCache:
    """Tokens keyed by (API key, base URL)."""

    def __init__(self) -> None:
        self._tokens: dict[tuple[str, str], CachedToken] = {}

    def get(self, key: str, base_url: str) -> CachedToken | None:
        token = self._tokens.get((key, base_url))
        if token is None:
            return None
        if not token.is_valid(_utcnow()):
            del self._tokens[(key, base_url)]
            return None
        return token

    def put(self, key: str, base_url: str, token: CachedToken) -> None:
        self._tokens[(key, base_url)] = token

    def invalidate(self, key: str, base_url: str) -> None:
        self._tokens.pop((key, base_url), None)

    def clear(self) -> None:
        self._tokens.clear()


def _parse_expiry(token_data: dict) -> datetime:  # type: ignore[type-arg]
    expires_at = token_data.get("expires_at")
    if expires_at:
        try:
            parsed = datetime.fromisoformat(str(expires_at).replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            logger.warning("unparseable_token_expiry", expires_at=expires_at)
    expires_in = token_data.get("expires_in") or DEFAULT_EXPIRES_IN_SECONDS
    return _utcnow() + timedelta(seconds=int(expires_in))


class AutoTraderTokenProvider(AccessTokenProvider):
    def __init__(
        self,
        client: AutoTraderClient,
        store_configs: StoreConfigProvider,
        cache: TokenCache,
        *,
        base_url: str = settings.autotrader_api_base_url,
        central_key: str = settings.autotrader_api_key,
        central_secret: str = settings.autotrader_secret,
    ) -> None:
        self._client = client
        self._store_configs = store_configs
        self._cache = cache
        self._base_url = base_url
        self._central_key = central_key
        self._central_secret = central_secret

    async def get_token(self, email: str) -> str:
        if self._central_key and self._central_secret:
            try:
                return await self._token_for(self._central_key, self._central_secret)
            except AutoTraderClientError as exc:
                logger.warning(
                    "centralized_auth_failed_falling_back",
                    status_code=exc.status_code,
                    error=str(exc),
                )
            except StockCreationError as exc:
                logger.warning("centralized_auth_failed_falling_back", error=exc.details)
        else:
            logger.info("centralized_credentials_not_configured")

        if not email:
            raise StockCreationError.authentication(
                "Missing user email",
                "Email is required to lookup store configuration",
                http_status=400,
            )

        credentials = await self._store_configs.get_api_credentials(email)
        if credentials is None:
            raise StockCreationError.authentication(
                "Missing individual API credentials",
                f"No AutoTrader API keys configured for email: {email}",
            )

        key, secret = credentials
        try:
            return await self._token_for(key, secret)
        except AutoTraderClientError as exc:
            if exc.status_code is None:
                raise StockCreationError.network(str(exc)) from exc
            error = StockCreationError.from_upstream_response(exc.status_code, exc.body, "authenticate")
            error.endpoint = "auth"
            raise error from exc

    async def _token_for(self, key: str, secret: str) -> str:
        cached = self._cache.get(key, self._base_url)
        if cached is not None:
            logger.debug("using_cached_token")
            return cached.access_token

        token_data = await self._client.authenticate(key, secret)
        access_token = token_data.get("access_token")
        if not access_token:
            error = StockCreationError.authentication(
                "Authentication failed", "No access token received from AutoTrader"
            )
            error.endpoint = "auth"
            raise error

        expires_at = _parse_expiry(token_data)
        self._cache.put(key, self._base_url, CachedToken(access_token, expires_at))
        logger.info(
            "autotrader_token_obtained",
            token_length=len(access_token),
            expires_at=expires_at.isoformat(),
        )
        return access_token
