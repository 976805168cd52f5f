import re
from dataclasses import dataclass, field
from typing import Any

from src.domain.entities.listing_request import ADVERT_CHANNELS, Feature, ListingRequest
from src.domain.entities.vehicle_record import VehicleRecord

DEFAULT_LIFECYCLE_STATE = "FORECOURT"
DEFAULT_VAT_STATUS = "No VAT"
DEFAULT_ATTENTION_GRABBER = "Available Now"


@dataclass
class ListingPayload:
    vehicle: dict[str, Any]
    metadata: dict[str, Any]
    features: list[dict[str, Any]]
    media: dict[str, Any]
    advertiser: dict[str, Any]
    adverts: dict[str, Any] | None = None
    image_ids: list[str] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "vehicle": self.vehicle,
            "metadata": self.metadata,
            "features": self.features,
            "media": self.media,
            "advertiser": self.advertiser,
        }
        if self.adverts is not None:
            body["adverts"] = self.adverts
        return body


def generate_stock_reference(vehicle: VehicleRecord) -> str:
    """First three letters of make and model, then the last three of the plate."""
    make = vehicle.make[:3].upper() or "VEH"
    model = vehicle.model[:3].upper()
    registration = re.sub(r"[^A-Z0-9]", "", (vehicle.registration or "").upper())
    return f"{make}{model}{registration[-3:]}"


def _feature_to_wire(feature: Feature) -> dict[str, Any]:
    return {
        "name": feature.name,
        "genericName": feature.generic_name,
        "type": feature.type or "Standard",
        "category": feature.category or "Other",
        "basicPrice": feature.basic_price or 0,
        "vatPrice": feature.vat_price or 0,
        "factoryCodes": list(feature.factory_codes),
    }


def _build_adverts(vehicle: VehicleRecord, request: ListingRequest) -> dict[str, Any] | None:
    details = request.details
    if details.forecourt_price is None:
        return None

    vat_status = details.vat_status or DEFAULT_VAT_STATUS
    retail: dict[str, Any] = {
        "priceOnApplication": False,
        "suppliedPrice": {"amountGBP": details.forecourt_price},
        "vatStatus": vat_status,
        "attentionGrabber": details.attention_grabber or DEFAULT_ATTENTION_GRABBER,
        "description": details.description or f"{vehicle.make} {vehicle.model} - Excellent condition",
    }
    for channel in ADVERT_CHANNELS:
        published = details.channel_status.get(channel, False)
        retail[channel] = {"status": "PUBLISHED" if published else "NOT_PUBLISHED"}

    return {
        "forecourtPrice": {"amountGBP": details.forecourt_price},
        "forecourtPriceVatStatus": vat_status,
        "retailAdverts": retail,
    }


def build_listing_payload(
    vehicle: VehicleRecord,
    request: ListingRequest,
    image_ids: list[str],
    advertiser_id: str,
) -> ListingPayload:
    details = request.details

    vehicle_block = vehicle.to_wire()
    vehicle_block.update(
        {
            "odometerReadingMiles": details.mileage,
            "ownershipCondition": vehicle.ownership_condition or "Used",
            "make": vehicle.make,
            "model": vehicle.model,
        }
    )

    features = details.selected_features or vehicle.features

    return ListingPayload(
        vehicle=vehicle_block,
        metadata={
            "lifecycleState": details.lifecycle_state or DEFAULT_LIFECYCLE_STATE,
            "stockReference": details.stock_reference or generate_stock_reference(vehicle),
        },
        features=[_feature_to_wire(f) for f in features],
        media={"images": [{"imageId": image_id} for image_id in image_ids]},
        advertiser={"advertiserId": advertiser_id, "location": []},
        adverts=_build_adverts(vehicle, request),
        image_ids=list(image_ids),
    )
