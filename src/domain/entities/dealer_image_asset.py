from dataclasses import dataclass

from src.domain.enums.stock_enums import ImageType


@dataclass(frozen=True)
class DealerImageAsset:
    """A photo a dealer has configured once and reuses across listings."""

    id: str
    public_url: str
    name: str
    image_type: ImageType = ImageType.OTHER
