from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.store_config_provider import StoreConfigProvider
from src.domain.entities.store_config import StoreConfig, parse_advertiser_ids
from src.infrastructure.database.models import DealerModel, StoreConfigModel, TeamMemberModel

logger = structlog.get_logger(__name__)


def _to_domain(model: StoreConfigModel, owner_dealer_id: UUID | None = None) -> StoreConfig:
    return StoreConfig(
        store_name=model.store_name,
        owner_email=model.email,
        advertiser_ids=parse_advertiser_ids(
            model.advertisement_id,
            model.additional_advertisement_ids,
            model.primary_advertisement_id,
            model.advertisement_ids,
        ),
        owner_dealer_id=owner_dealer_id,
    )


class SqlAlchemyStoreConfigRepository(StoreConfigProvider):
    """SQLAlchemy-backed store configuration lookup."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _by_email(self, email: str) -> StoreConfigModel | None:
        result = await self._session.execute(
            select(StoreConfigModel).where(StoreConfigModel.email == email).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_for_user(self, user_id: str, email: str) -> StoreConfig | None:
        own = await self._by_email(email)
        if own is not None:
            return _to_domain(own)

        # Team members act on behalf of the store owner
        result = await self._session.execute(
            select(DealerModel)
            .join(TeamMemberModel, TeamMemberModel.store_owner_id == DealerModel.id)
            .where(TeamMemberModel.clerk_user_id == user_id, TeamMemberModel.status == "active")
            .limit(1)
        )
        owner = result.scalar_one_or_none()
        if owner is None:
            return None

        config = await self._by_email(owner.email)
        if config is None:
            logger.warning("store_owner_without_config", owner_email=owner.email)
            return None

        logger.info("store_config_via_team_membership", user_id=user_id, owner_email=owner.email)
        return _to_domain(config, owner_dealer_id=owner.id)

    async def get_api_credentials(self, email: str) -> tuple[str, str] | None:
        config = await self._by_email(email)
        if config is None or not config.autotrader_key or not config.autotrader_secret:
            return None
        return config.autotrader_key, config.autotrader_secret
