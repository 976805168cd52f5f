from abc import ABC, abstractmethod

from src.domain.entities.store_config import StoreConfig


class StoreConfigProvider(ABC):
    """Port for resolving a signed-in user's store configuration."""

    @abstractmethod
    async def get_for_user(self, user_id: str, email: str) -> StoreConfig | None:
        """Works for store owners and for active team members of a store."""
        ...

    @abstractmethod
    async def get_api_credentials(self, email: str) -> tuple[str, str] | None:
        """Returns the store's own (key, secret), if it has any."""
        ...
