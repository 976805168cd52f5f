from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from src.domain.enums.stock_enums import LookupFlow


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ImageCounts:
    user: int = 0
    fallback: int = 0
    default: int = 0
    failed_uploads: int = 0

    @property
    def total(self) -> int:
        return self.user + self.fallback + self.default


@dataclass(frozen=True)
class VehicleSummary:
    make: str
    model: str
    registration: str | None = None
    derivative_id: str | None = None


@dataclass(frozen=True)
class StockCreationResult:
    listing_id: str | None
    flow: LookupFlow
    vehicle: VehicleSummary
    images: ImageCounts
    upstream_response: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utcnow)
