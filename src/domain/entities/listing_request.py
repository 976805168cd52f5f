from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.domain.enums.stock_enums import LookupFlow
from src.domain.errors.stock_creation_error import StockCreationError

ADVERT_CHANNELS: tuple[str, ...] = (
    "autotraderAdvert",
    "advertiserAdvert",
    "locatorAdvert",
    "profileAdvert",
    "exportAdvert",
)


@dataclass(frozen=True)
class Feature:
    name: str
    type: str = "Standard"
    category: str = "Other"
    generic_name: str | None = None
    basic_price: float = 0
    vat_price: float = 0
    factory_codes: list[str] = field(default_factory=list)
    rarity_rating: float | None = None
    value_rating: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Feature":
        return cls(
            name=str(data.get("name") or ""),
            type=data.get("type") or "Standard",
            category=data.get("category") or "Other",
            generic_name=data.get("genericName"),
            basic_price=data.get("basicPrice") or 0,
            vat_price=data.get("vatPrice") or 0,
            factory_codes=list(data.get("factoryCodes") or []),
            rarity_rating=data.get("rarityRating"),
            value_rating=data.get("valueRating"),
        )


@dataclass(frozen=True)
class ListingDetails:
    """Fields shared by both lookup flows."""

    mileage: int
    forecourt_price: float | None = None
    vat_status: str | None = None
    attention_grabber: str | None = None
    description: str | None = None
    lifecycle_state: str | None = None
    stock_reference: str | None = None
    selected_features: list[Feature] = field(default_factory=list)
    user_image_ids: list[str] = field(default_factory=list)
    channel_status: dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class RegistrationLookupRequest:
    details: ListingDetails
    registration: str

    flow = LookupFlow.REGISTRATION


@dataclass(frozen=True)
class TaxonomyLookupRequest:
    details: ListingDetails
    derivative_id: str
    year: int | None = None
    plate: str | None = None
    colour: str | None = None

    flow = LookupFlow.TAXONOMY


ListingRequest = RegistrationLookupRequest | TaxonomyLookupRequest


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    # Odometer readings are whole miles
    if isinstance(value, float) and not value.is_integer():
        return None
    if value <= 0:
        return None
    return int(value)


def parse_listing_request(data: Mapping[str, Any]) -> ListingRequest:
    """
    Validate a camelCase stock-create body and build the typed request.

    Raises StockCreationError(VALIDATION) for an unknown flow, a missing or
    non-positive mileage, or a missing identifying field for the flow.
    """
    try:
        flow = LookupFlow(data.get("flow"))
    except ValueError:
        raise StockCreationError.validation(
            "Invalid flow type",
            'Flow must be either "registration-lookup" or "taxonomy-lookup"',
        ) from None

    mileage = _positive_int(data.get("mileage"))
    if mileage is None:
        raise StockCreationError.validation("Invalid mileage", "Mileage must be a positive number")

    channel_status = data.get("channelStatus") or {}
    details = ListingDetails(
        mileage=mileage,
        forecourt_price=data.get("forecourtPrice"),
        vat_status=data.get("forecourtPriceVatStatus"),
        attention_grabber=data.get("attentionGrabber"),
        description=data.get("description"),
        lifecycle_state=data.get("lifecycleState"),
        stock_reference=data.get("stockReference"),
        selected_features=[Feature.from_dict(f) for f in data.get("selectedFeatures") or []],
        user_image_ids=_dedupe([str(i) for i in data.get("imageIds") or []]),
        channel_status={k: bool(v) for k, v in channel_status.items()},
    )

    if flow is LookupFlow.REGISTRATION:
        registration = str(data.get("registration") or "").strip()
        if not registration:
            raise StockCreationError.validation(
                "Missing registration", "Registration lookup requires a registration"
            )
        return RegistrationLookupRequest(details=details, registration=registration)

    derivative_id = str(data.get("derivativeId") or "").strip()
    if not derivative_id:
        raise StockCreationError.validation(
            "Missing derivative ID", "Taxonomy lookup requires a derivativeId"
        )
    return TaxonomyLookupRequest(
        details=details,
        derivative_id=derivative_id,
        year=data.get("year") or None,
        plate=data.get("plate") or None,
        colour=data.get("colour") or None,
    )
