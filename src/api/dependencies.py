"""
FastAPI dependency injection wiring.

Each dependency function returns a fully-constructed object with its
collaborators injected, so route handlers only translate HTTP.
"""
from collections.abc import AsyncGenerator

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.coordinators.image_uploader import ImageUploader
from src.application.coordinators.listing_submitter import ListingSubmitter
from src.application.coordinators.vehicle_data_resolver import VehicleDataResolver
from src.application.interfaces.access_token_provider import AccessTokenProvider
from src.application.interfaces.dealer_image_repository import DealerImageRepository
from src.application.interfaces.store_config_provider import StoreConfigProvider
from src.application.use_cases.create_stock_listing import AuthenticatedUser, CreateStockListing
from src.domain.errors.stock_creation_error import StockCreationError
from src.infrastructure.database.connection import get_db_session
from src.infrastructure.database.repositories.dealer_image_repository import (
    SqlAlchemyDealerImageRepository,
)
from src.infrastructure.database.repositories.store_config_repository import (
    SqlAlchemyStoreConfigRepository,
)
from src.infrastructure.external_services.autotrader_auth import (
    AutoTraderTokenProvider,
    TokenCache,
)
from src.infrastructure.external_services.autotrader_client import AutoTraderClient

# Shared across requests so tokens are reused until they expire
_token_cache = TokenCache()


# ---- Identity ---------------------------------------------------------------

def get_authenticated_user(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
) -> AuthenticatedUser:
    """Identity forwarded by the auth gateway in front of this service."""
    if not x_user_id:
        raise StockCreationError.authentication(
            "User not authenticated", "Please sign in to create stock items"
        )
    if not x_user_email:
        raise StockCreationError.authentication(
            "User email not found",
            "No email address found for the authenticated user",
            http_status=400,
        )
    return AuthenticatedUser(user_id=x_user_id, email=x_user_email)


# ---- Low-level dependencies ------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


def get_store_config_provider(
    session: AsyncSession = Depends(get_session),
) -> StoreConfigProvider:
    return SqlAlchemyStoreConfigRepository(session)


def get_dealer_image_repo(
    session: AsyncSession = Depends(get_session),
) -> DealerImageRepository:
    return SqlAlchemyDealerImageRepository(session)


def get_autotrader_client() -> AutoTraderClient:
    return AutoTraderClient()


def get_token_provider(
    client: AutoTraderClient = Depends(get_autotrader_client),
    store_configs: StoreConfigProvider = Depends(get_store_config_provider),
) -> AccessTokenProvider:
    return AutoTraderTokenProvider(client, store_configs, _token_cache)


# ---- Use-case dependencies -------------------------------------------------

def get_create_stock_use_case(
    store_configs: StoreConfigProvider = Depends(get_store_config_provider),
    token_provider: AccessTokenProvider = Depends(get_token_provider),
    dealer_images: DealerImageRepository = Depends(get_dealer_image_repo),
    client: AutoTraderClient = Depends(get_autotrader_client),
) -> CreateStockListing:
    return CreateStockListing(
        store_configs,
        token_provider,
        dealer_images,
        VehicleDataResolver(client),
        ImageUploader(client),
        ListingSubmitter(client),
    )
