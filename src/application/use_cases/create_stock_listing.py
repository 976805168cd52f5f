import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from src.application.coordinators.image_uploader import ImageUploader
from src.application.coordinators.listing_submitter import ListingSubmitter
from src.application.coordinators.vehicle_data_resolver import VehicleDataResolver
from src.application.interfaces.access_token_provider import AccessTokenProvider
from src.application.interfaces.dealer_image_repository import DealerImageRepository
from src.application.interfaces.store_config_provider import StoreConfigProvider
from src.config import settings
from src.domain.entities.image_upload import UploadBatchResult
from src.domain.entities.listing_request import parse_listing_request
from src.domain.entities.stock_creation_result import (
    ImageCounts,
    StockCreationResult,
    VehicleSummary,
)
from src.domain.enums.stock_enums import ImageSource, StockErrorKind
from src.domain.errors.stock_creation_error import StockCreationError
from src.domain.policies.image_selection_policy import merge_image_ids, select_images
from src.domain.policies.listing_payload_builder import build_listing_payload

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str
    email: str


@dataclass
class CreateStockListingInput:
    user: AuthenticatedUser
    # camelCase stock-create body as posted by the dealer
    request: Mapping[str, Any]


class CreateStockListing:
    """
    Use case: publish a vehicle to AutoTrader for a signed-in dealer.

    Validates the request, resolves the store's advertiser and an access token,
    fetches the vehicle's technical data, attaches user/fallback/default photos,
    and submits the stock item. Everything runs under one deadline; unexpected
    failures surface as SERVER_ERROR.
    """

    def __init__(
        self,
        store_configs: StoreConfigProvider,
        token_provider: AccessTokenProvider,
        dealer_images: DealerImageRepository,
        resolver: VehicleDataResolver,
        uploader: ImageUploader,
        submitter: ListingSubmitter,
        *,
        deadline_seconds: float = settings.stock_create_deadline_seconds,
    ) -> None:
        self._store_configs = store_configs
        self._token_provider = token_provider
        self._dealer_images = dealer_images
        self._resolver = resolver
        self._uploader = uploader
        self._submitter = submitter
        self._deadline_seconds = deadline_seconds

    async def execute(self, input_data: CreateStockListingInput) -> StockCreationResult:
        try:
            return await asyncio.wait_for(self._create(input_data), timeout=self._deadline_seconds)
        except StockCreationError as exc:
            logger.warning(
                "stock_create_failed",
                kind=exc.kind.value,
                message=exc.message,
                http_status=exc.http_status,
            )
            raise
        except asyncio.TimeoutError:
            logger.error("stock_create_timed_out", deadline_seconds=self._deadline_seconds)
            raise StockCreationError(
                StockErrorKind.SERVER_ERROR,
                "Stock creation timed out",
                f"Request exceeded the {self._deadline_seconds}s deadline",
                http_status=504,
            ) from None
        except Exception as exc:
            logger.exception("stock_create_unexpected_error")
            raise StockCreationError.internal(exc) from exc

    async def _create(self, input_data: CreateStockListingInput) -> StockCreationResult:
        user = input_data.user
        request = parse_listing_request(input_data.request)
        logger.info(
            "stock_create_requested",
            flow=request.flow.value,
            mileage=request.details.mileage,
            user_images=len(request.details.user_image_ids),
        )

        if not user.email:
            raise StockCreationError.authentication(
                "User email not found",
                "No email address found for the authenticated user",
                http_status=400,
            )

        store_config = await self._store_configs.get_for_user(user.user_id, user.email)
        if store_config is None:
            raise StockCreationError.not_found(
                "Store configuration not found",
                "Please contact support to set up your store configuration",
            )

        advertiser_id = store_config.advertiser_id
        if not advertiser_id:
            raise StockCreationError.authentication(
                "Missing advertiser ID in store configuration",
                f"No advertisement ID configured for store: {store_config.store_name}",
            )
        logger.info(
            "advertiser_resolved",
            advertiser_id=advertiser_id,
            store_name=store_config.store_name,
            configured_ids=len(store_config.advertiser_ids),
        )

        owner_email = store_config.owner_email or user.email
        # Every AutoTrader call below needs this token
        token = await self._token_provider.get_token(owner_email)

        vehicle = await self._resolver.resolve(request, advertiser_id, token)

        dealer_id = store_config.owner_dealer_id or await self._dealer_images.get_or_create_dealer(
            user.user_id, user.email
        )
        assets = await self._dealer_images.list_for_dealer(dealer_id)
        selection = select_images(request.details.user_image_ids, assets)
        logger.info(
            "images_selected",
            dealer_id=str(dealer_id),
            user=len(selection.from_source(ImageSource.USER)),
            fallback=len(selection.from_source(ImageSource.FALLBACK)),
            default=len(selection.from_source(ImageSource.DEFAULT)),
        )

        # Fallback and default groups each get their own batch limit
        batches: list[UploadBatchResult] = []
        for source in (ImageSource.FALLBACK, ImageSource.DEFAULT):
            group = selection.assets_from(source)
            if group:
                batches.append(await self._uploader.upload(group, advertiser_id, token))
        uploads = UploadBatchResult(
            outcomes=tuple(outcome for batch in batches for outcome in batch.outcomes)
        )

        final_images = merge_image_ids(selection, uploads)
        if not final_images:
            logger.warning("stock_has_no_images", advertiser_id=advertiser_id)

        payload = build_listing_payload(
            vehicle, request, [image.image_id for image in final_images], advertiser_id
        )
        submission = await self._submitter.submit(payload, advertiser_id, token)

        counts = ImageCounts(
            user=sum(1 for i in final_images if i.source is ImageSource.USER),
            fallback=sum(1 for i in final_images if i.source is ImageSource.FALLBACK),
            default=sum(1 for i in final_images if i.source is ImageSource.DEFAULT),
            failed_uploads=len(uploads.failed),
        )
        logger.info(
            "stock_created",
            listing_id=submission.listing_id,
            advertiser_id=advertiser_id,
            make=vehicle.make,
            model=vehicle.model,
            total_images=counts.total,
            failed_uploads=counts.failed_uploads,
        )

        return StockCreationResult(
            listing_id=submission.listing_id,
            flow=request.flow,
            vehicle=VehicleSummary(
                make=vehicle.make,
                model=vehicle.model,
                registration=vehicle.registration,
                derivative_id=vehicle.derivative_id,
            ),
            images=counts,
            upstream_response=submission.response,
        )
