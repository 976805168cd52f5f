"""
Which photos a new listing gets, and in what order.

The first image becomes the storefront thumbnail, so group order is fixed:
user images (as supplied), then fallback images only when the user supplied
none, then default images always last.
"""
from dataclasses import dataclass

from src.domain.entities.dealer_image_asset import DealerImageAsset
from src.domain.entities.image_upload import UploadBatchResult
from src.domain.enums.stock_enums import ImageSource, ImageType


@dataclass(frozen=True)
class SelectedImage:
    source: ImageSource
    # AutoTrader image ID for user images, dealer asset ID otherwise
    asset_ref: str
    asset: DealerImageAsset | None = None


@dataclass(frozen=True)
class ImageSelectionResult:
    images: tuple[SelectedImage, ...] = ()

    def from_source(self, source: ImageSource) -> list[SelectedImage]:
        return [image for image in self.images if image.source is source]

    def assets_from(self, source: ImageSource) -> list[DealerImageAsset]:
        """Dealer assets of one group that need uploading, in listing order."""
        return [image.asset for image in self.from_source(source) if image.asset is not None]


@dataclass(frozen=True)
class FinalImage:
    source: ImageSource
    image_id: str


def select_images(
    user_image_ids: list[str], dealer_assets: list[DealerImageAsset]
) -> ImageSelectionResult:
    defaults = [a for a in dealer_assets if a.image_type is ImageType.DEFAULT]
    fallbacks = [a for a in dealer_assets if a.image_type is ImageType.FALLBACK]

    images = [SelectedImage(ImageSource.USER, image_id) for image_id in user_image_ids]
    if not user_image_ids:
        images += [SelectedImage(ImageSource.FALLBACK, a.id, a) for a in fallbacks]
    images += [SelectedImage(ImageSource.DEFAULT, a.id, a) for a in defaults]

    return ImageSelectionResult(images=tuple(_dedupe_selection(images)))


def _dedupe_selection(images: list[SelectedImage]) -> list[SelectedImage]:
    seen: set[tuple[bool, str]] = set()
    result = []
    for image in images:
        key = (image.asset is None, image.asset_ref)
        if key not in seen:
            seen.add(key)
            result.append(image)
    return result


def merge_image_ids(
    selection: ImageSelectionResult, uploads: UploadBatchResult
) -> list[FinalImage]:
    """
    Resolve the selection into external image IDs.

    Order follows the selection, never upload completion. Failed uploads are
    dropped and the first occurrence of an ID fixes its position.
    """
    seen: set[str] = set()
    final: list[FinalImage] = []
    for image in selection.images:
        if image.asset is None:
            image_id: str | None = image.asset_ref
        else:
            image_id = uploads.image_id_for(image.asset.id)
        if image_id and image_id not in seen:
            seen.add(image_id)
            final.append(FinalImage(source=image.source, image_id=image_id))
    return final
