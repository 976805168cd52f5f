import structlog

from src.domain.entities.listing_request import (
    ListingRequest,
    RegistrationLookupRequest,
    TaxonomyLookupRequest,
)
from src.domain.entities.vehicle_record import (
    RegistrationLookupResult,
    TaxonomyLookupResult,
    VehicleLookupResult,
    VehicleRecord,
    normalize_vehicle,
)
from src.domain.errors.stock_creation_error import StockCreationError
from src.infrastructure.external_services.autotrader_client import (
    AutoTraderClient,
    AutoTraderClientError,
)

logger = structlog.get_logger(__name__)


def _upstream_failure(exc: AutoTraderClientError, endpoint: str) -> StockCreationError:
    if exc.status_code is None:
        return StockCreationError.network(str(exc))
    return StockCreationError.from_upstream_response(exc.status_code, exc.body, endpoint)


class VehicleDataResolver:
    """Fetches full technical data for the vehicle being stocked, by either flow."""

    def __init__(self, client: AutoTraderClient) -> None:
        self._client = client

    async def resolve(
        self, request: ListingRequest, advertiser_id: str, token: str
    ) -> VehicleRecord:
        if isinstance(request, RegistrationLookupRequest):
            result: VehicleLookupResult = await self._lookup_registration(
                request, advertiser_id, token
            )
        elif isinstance(request, TaxonomyLookupRequest):
            result = await self._lookup_derivative(request, advertiser_id, token)
        else:
            raise TypeError(f"Unsupported listing request: {type(request).__name__}")

        vehicle = normalize_vehicle(result)
        if not vehicle.make or not vehicle.model:
            logger.error(
                "vehicle_missing_make_or_model",
                make=vehicle.make,
                model=vehicle.model,
                derivative=vehicle.derivative,
            )
            raise StockCreationError.validation(
                "Invalid vehicle data", "Vehicle must have make and model information"
            )

        logger.info(
            "vehicle_resolved",
            flow=request.flow.value,
            make=vehicle.make,
            model=vehicle.model,
            derivative=vehicle.derivative,
            registration=vehicle.registration,
        )
        return vehicle

    async def _lookup_registration(
        self, request: RegistrationLookupRequest, advertiser_id: str, token: str
    ) -> RegistrationLookupResult:
        registration = request.registration.upper()
        logger.info("looking_up_registration", registration=registration)
        try:
            body = await self._client.get_vehicle(advertiser_id, registration, token)
        except AutoTraderClientError as exc:
            raise _upstream_failure(exc, "vehicles") from exc

        vehicle = body.get("vehicle") if isinstance(body, dict) else None
        if not vehicle:
            raise StockCreationError.not_found(
                "Vehicle not found", f"No vehicle found for registration: {request.registration}"
            )
        return RegistrationLookupResult(vehicle=vehicle)

    async def _lookup_derivative(
        self, request: TaxonomyLookupRequest, advertiser_id: str, token: str
    ) -> TaxonomyLookupResult:
        logger.info("looking_up_derivative", derivative_id=request.derivative_id)
        try:
            body = await self._client.get_derivative(advertiser_id, request.derivative_id, token)
        except AutoTraderClientError as exc:
            raise _upstream_failure(exc, "taxonomy/derivatives") from exc

        if not body or not isinstance(body, dict):
            raise StockCreationError.not_found(
                "Vehicle not found", f"No vehicle found for derivative ID: {request.derivative_id}"
            )
        return TaxonomyLookupResult(
            derivative=body,
            mileage=request.details.mileage,
            year=request.year,
            plate=request.plate,
            colour=request.colour,
        )
