from abc import ABC, abstractmethod


class AccessTokenProvider(ABC):
    """Port for acquiring a bearer token for the listing service."""

    @abstractmethod
    async def get_token(self, email: str) -> str:
        """Raises StockCreationError(AUTHENTICATION) when no token can be issued."""
        ...
