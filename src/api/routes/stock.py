from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_authenticated_user, get_create_stock_use_case
from src.api.schemas.stock_create import (
    ImagesSummarySchema,
    StockCreatedData,
    StockCreatedResponse,
    StockCreateRequest,
    VehicleInfoSchema,
)
from src.application.use_cases.create_stock_listing import (
    AuthenticatedUser,
    CreateStockListing,
    CreateStockListingInput,
)
from src.domain.entities.stock_creation_result import StockCreationResult
from src.domain.enums.stock_enums import LookupFlow

router = APIRouter(prefix="/stock", tags=["stock"])


def _to_response(result: StockCreationResult) -> StockCreatedResponse:
    images = result.images
    return StockCreatedResponse(
        data=StockCreatedData(
            stock_id=result.listing_id,
            auto_trader_response=result.upstream_response,
            flow=result.flow.value,
            vehicle_info=VehicleInfoSchema(
                make=result.vehicle.make,
                model=result.vehicle.model,
                registration=result.vehicle.registration,
                derivative_id=result.vehicle.derivative_id,
            ),
            images_summary=ImagesSummarySchema(
                user_images=images.user,
                fallback_images=images.fallback,
                default_images=images.default,
                total_images=images.total,
                failed_uploads=images.failed_uploads,
            ),
        ),
        timestamp=result.created_at,
    )


@router.post("/create", response_model=StockCreatedResponse, response_model_by_alias=True)
async def create_stock(
    payload: StockCreateRequest,
    user: AuthenticatedUser = Depends(get_authenticated_user),
    use_case: CreateStockListing = Depends(get_create_stock_use_case),
) -> StockCreatedResponse:
    """Create a stock item in AutoTrader from a registration or a taxonomy derivative."""
    result = await use_case.execute(
        CreateStockListingInput(
            user=user,
            request=payload.model_dump(by_alias=True, exclude_none=True),
        )
    )
    return _to_response(result)


_EXAMPLES = {
    LookupFlow.REGISTRATION: {
        "flow": LookupFlow.REGISTRATION.value,
        "registration": "KY24TKT",
        "mileage": 15000,
        "forecourtPrice": 25000,
        "forecourtPriceVatStatus": "No VAT",
        "imageIds": [],
        "channelStatus": {"autotraderAdvert": True, "advertiserAdvert": True},
    },
    LookupFlow.TAXONOMY: {
        "flow": LookupFlow.TAXONOMY.value,
        "derivativeId": "7a62cbaa81594d5bb1e09b9563cd1124",
        "mileage": 15000,
        "year": 2020,
        "plate": "70",
        "colour": "Black",
        "forecourtPrice": 18500,
    },
}


@router.get("/create")
async def stock_create_docs(flow: str | None = Query(default=None)) -> dict:  # type: ignore[type-arg]
    """Usage notes and a sample body for POST /stock/create."""
    docs: dict = {  # type: ignore[type-arg]
        "endpoint": "POST /stock/create",
        "headers": ["X-User-Id", "X-User-Email"],
        "flows": {
            LookupFlow.REGISTRATION.value: "Look the vehicle up by registration plate",
            LookupFlow.TAXONOMY.value: "Build the vehicle from a taxonomy derivative ID",
        },
        "required": ["flow", "mileage", "registration | derivativeId"],
    }
    try:
        selected = LookupFlow(flow) if flow else None
    except ValueError:
        selected = None
    if selected is not None:
        docs["example"] = _EXAMPLES[selected]
    else:
        docs["examples"] = {f.value: body for f, body in _EXAMPLES.items()}
    return docs
