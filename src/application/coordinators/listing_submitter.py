from dataclasses import dataclass, field
from typing import Any

import structlog

from src.domain.enums.stock_enums import StockErrorKind
from src.domain.errors.stock_creation_error import StockCreationError, parse_json_body
from src.domain.policies.listing_payload_builder import ListingPayload
from src.infrastructure.external_services.autotrader_client import (
    AutoTraderClient,
    AutoTraderClientError,
)

logger = structlog.get_logger(__name__)

DEFAULT_REJECTION_MESSAGE = "Failed to create stock in AutoTrader"


@dataclass(frozen=True)
class SubmissionResult:
    listing_id: str | None
    response: dict[str, Any] = field(default_factory=dict)


def _extract_listing_id(response: dict[str, Any]) -> str | None:
    metadata = response.get("metadata")
    nested = metadata.get("stockId") if isinstance(metadata, dict) else None
    listing_id = response.get("stockId") or response.get("id") or nested
    return str(listing_id) if listing_id else None


def rejection_error(status_code: int, body: str) -> StockCreationError:
    """Turn a non-success stock response into a SERVER_ERROR keeping the body verbatim."""
    parsed = parse_json_body(body)
    message = DEFAULT_REJECTION_MESSAGE
    details = f"AutoTrader API returned {status_code}"

    if isinstance(parsed, dict):
        message = parsed.get("message") or message
        details = parsed.get("details") or parsed.get("error") or details
    elif parsed is None and body:
        details = body

    return StockCreationError(
        StockErrorKind.SERVER_ERROR,
        str(message),
        str(details),
        http_status=status_code,
        upstream_error=parsed,
        upstream_body=body,
    )


class ListingSubmitter:
    """Creates the stock item in AutoTrader; no retries."""

    def __init__(self, client: AutoTraderClient) -> None:
        self._client = client

    async def submit(self, payload: ListingPayload, advertiser_id: str, token: str) -> SubmissionResult:
        logger.info(
            "submitting_stock",
            advertiser_id=advertiser_id,
            images=len(payload.image_ids),
            has_adverts=payload.adverts is not None,
        )
        try:
            response = await self._client.create_stock(advertiser_id, token, payload.to_json())
        except AutoTraderClientError as exc:
            if exc.status_code is None:
                raise StockCreationError.network(str(exc)) from exc
            error = rejection_error(exc.status_code, exc.body)
            logger.error(
                "stock_rejected",
                status_code=exc.status_code,
                message=error.message,
            )
            raise error from exc

        return SubmissionResult(listing_id=_extract_listing_id(response), response=response)
