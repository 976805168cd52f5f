import asyncio

import structlog

from src.config import settings
from src.domain.entities.dealer_image_asset import DealerImageAsset
from src.domain.entities.image_upload import UploadBatchResult, UploadOutcome
from src.infrastructure.external_services.autotrader_client import (
    AutoTraderClient,
    AutoTraderClientError,
)

logger = structlog.get_logger(__name__)


def _is_jpeg(content_type: str) -> bool:
    content_type = content_type.lower()
    return "jpeg" in content_type or "jpg" in content_type


class ImageUploader:
    """
    Pushes dealer images to AutoTrader as independent tasks.

    Every asset yields an UploadOutcome; a failed image is dropped, never the
    batch. Outcomes keep the order of the input assets.
    """

    def __init__(
        self,
        client: AutoTraderClient,
        *,
        concurrency: int = settings.image_upload_concurrency,
        per_image_timeout: float = settings.image_upload_timeout_seconds,
        max_images: int = settings.max_images_per_group,
    ) -> None:
        self._client = client
        self._concurrency = max(1, concurrency)
        self._per_image_timeout = per_image_timeout
        self._max_images = max_images

    async def upload(
        self, assets: list[DealerImageAsset], advertiser_id: str, token: str
    ) -> UploadBatchResult:
        if not assets:
            return UploadBatchResult()

        accepted, overflow = assets[: self._max_images], assets[self._max_images :]
        if overflow:
            logger.warning(
                "image_batch_truncated",
                limit=self._max_images,
                skipped=len(overflow),
            )

        semaphore = asyncio.Semaphore(self._concurrency)

        async def bounded(asset: DealerImageAsset) -> UploadOutcome:
            async with semaphore:
                return await self._upload_one(asset, advertiser_id, token)

        # gather preserves input order regardless of completion order
        outcomes = list(await asyncio.gather(*(bounded(a) for a in accepted)))
        outcomes += [
            UploadOutcome(asset=a, failure_reason=f"skipped: batch limit of {self._max_images} images")
            for a in overflow
        ]

        batch = UploadBatchResult(outcomes=tuple(outcomes))
        logger.info(
            "image_upload_summary",
            uploaded=len(batch.succeeded),
            failed=len(batch.failed),
            total=len(assets),
        )
        return batch

    async def _upload_one(
        self, asset: DealerImageAsset, advertiser_id: str, token: str
    ) -> UploadOutcome:
        try:
            image_id = await asyncio.wait_for(
                self._transfer(asset, advertiser_id, token), timeout=self._per_image_timeout
            )
        except asyncio.TimeoutError:
            reason = f"timed out after {self._per_image_timeout}s"
        except AutoTraderClientError as exc:
            reason = str(exc)
        except ValueError as exc:
            reason = f"unreadable upload response: {exc}"
        else:
            if image_id:
                logger.info("stock_image_uploaded", asset_id=asset.id, image_id=image_id)
                return UploadOutcome(asset=asset, external_image_id=image_id)
            reason = "no imageId in response"

        logger.error(
            "stock_image_upload_failed",
            asset_id=asset.id,
            name=asset.name,
            image_type=asset.image_type.value,
            reason=reason,
        )
        return UploadOutcome(asset=asset, failure_reason=reason)

    async def _transfer(self, asset: DealerImageAsset, advertiser_id: str, token: str) -> str | None:
        content, content_type = await self._client.fetch_source_image(asset.public_url)
        if not _is_jpeg(content_type):
            # AutoTrader may reject it; that is recorded as this image's failure
            logger.warning("non_jpeg_stock_image", asset_id=asset.id, content_type=content_type)

        result = await self._client.upload_image(
            advertiser_id,
            token,
            filename=asset.name,
            content=content,
            content_type=content_type,
        )
        image_id = result.get("imageId") if isinstance(result, dict) else None
        return str(image_id) if image_id else None
