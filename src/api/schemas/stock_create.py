from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SelectedFeatureSchema(_CamelModel):
    name: str
    generic_name: str | None = None
    type: str = "Standard"
    category: str = "Other"
    basic_price: float = 0
    vat_price: float = 0
    factory_codes: list[str] = Field(default_factory=list)
    rarity_rating: float | None = None
    value_rating: float | None = None


class ChannelStatusSchema(_CamelModel):
    autotrader_advert: bool = False
    advertiser_advert: bool = False
    locator_advert: bool = False
    profile_advert: bool = False
    export_advert: bool = False


class StockCreateRequest(_CamelModel):
    """
    Body of POST /stock/create.

    Types are checked here; flow, mileage and identifying fields are validated
    by the use case so they come back as VALIDATION errors.
    """

    flow: str | None = None
    registration: str | None = None
    derivative_id: str | None = None
    mileage: float | None = None
    forecourt_price: float | None = None
    forecourt_price_vat_status: str | None = None
    attention_grabber: str | None = None
    description: str | None = None
    lifecycle_state: str | None = None
    stock_reference: str | None = None
    image_ids: list[str] = Field(default_factory=list)
    selected_features: list[SelectedFeatureSchema] = Field(default_factory=list)
    channel_status: ChannelStatusSchema | None = None
    year: int | None = None
    plate: str | None = None
    colour: str | None = None


class VehicleInfoSchema(_CamelModel):
    make: str
    model: str
    registration: str | None = None
    derivative_id: str | None = None


class ImagesSummarySchema(_CamelModel):
    user_images: int
    fallback_images: int
    default_images: int
    total_images: int
    failed_uploads: int


class StockCreatedData(_CamelModel):
    message: str = "Stock created successfully in AutoTrader"
    stock_id: str | None
    auto_trader_response: dict[str, Any]
    flow: str
    vehicle_info: VehicleInfoSchema
    images_summary: ImagesSummarySchema


class StockCreatedResponse(BaseModel):
    success: bool = True
    data: StockCreatedData
    timestamp: datetime
    endpoint: str = "stock/create"
