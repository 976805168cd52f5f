from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.dealer_image_repository import DealerImageRepository
from src.domain.entities.dealer_image_asset import DealerImageAsset
from src.domain.enums.stock_enums import ImageType
from src.infrastructure.database.models import DealerModel, StockImageModel

logger = structlog.get_logger(__name__)


def _to_domain(model: StockImageModel) -> DealerImageAsset:
    return DealerImageAsset(
        id=str(model.id),
        public_url=model.public_url,
        name=model.file_name or model.name,
        image_type=ImageType.parse(model.image_type),
    )


class SqlAlchemyDealerImageRepository(DealerImageRepository):
    """SQLAlchemy-backed implementation of DealerImageRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_or_create_dealer(self, user_id: str, email: str) -> UUID:
        result = await self._session.execute(
            select(DealerModel).where(DealerModel.clerk_user_id == user_id).limit(1)
        )
        dealer = result.scalar_one_or_none()
        if dealer is not None:
            return dealer.id

        dealer = DealerModel(name="Unknown", email=email, clerk_user_id=user_id)
        self._session.add(dealer)
        await self._session.flush()
        logger.info("dealer_created", dealer_id=str(dealer.id), email=email)
        return dealer.id

    async def list_for_dealer(self, dealer_id: UUID) -> list[DealerImageAsset]:
        result = await self._session.execute(
            select(StockImageModel)
            .where(StockImageModel.dealer_id == dealer_id)
            .order_by(StockImageModel.sort_order.asc(), StockImageModel.created_at.asc())
        )
        return [_to_domain(m) for m in result.scalars().all()]
