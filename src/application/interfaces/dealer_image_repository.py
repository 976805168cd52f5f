from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.entities.dealer_image_asset import DealerImageAsset


class DealerImageRepository(ABC):
    """Port for a dealer's configured stock images."""

    @abstractmethod
    async def get_or_create_dealer(self, user_id: str, email: str) -> UUID:
        ...

    @abstractmethod
    async def list_for_dealer(self, dealer_id: UUID) -> list[DealerImageAsset]:
        """Assets in the dealer's configured order."""
        ...
