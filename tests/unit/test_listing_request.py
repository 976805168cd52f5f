"""Unit tests for stock-create request parsing."""
import pytest

from src.domain.entities.listing_request import (
    RegistrationLookupRequest,
    TaxonomyLookupRequest,
    parse_listing_request,
)
from src.domain.enums.stock_enums import LookupFlow, StockErrorKind
from src.domain.errors.stock_creation_error import StockCreationError


class TestParseListingRequest:
    def test_registration_request(self) -> None:
        request = parse_listing_request(
            {
                "flow": "registration-lookup",
                "registration": " KY24TKT ",
                "mileage": 30000,
                "imageIds": ["a", "b", "a"],
                "channelStatus": {"autotraderAdvert": True},
            }
        )

        assert isinstance(request, RegistrationLookupRequest)
        assert request.flow is LookupFlow.REGISTRATION
        assert request.registration == "KY24TKT"
        assert request.details.mileage == 30000
        assert request.details.user_image_ids == ["a", "b"]
        assert request.details.channel_status == {"autotraderAdvert": True}

    def test_taxonomy_request(self) -> None:
        request = parse_listing_request(
            {
                "flow": "taxonomy-lookup",
                "derivativeId": "7a62cbaa81594d5bb1e09b9563cd1124",
                "mileage": 15000,
                "year": 2020,
                "plate": "70",
                "colour": "Black",
            }
        )

        assert isinstance(request, TaxonomyLookupRequest)
        assert request.derivative_id == "7a62cbaa81594d5bb1e09b9563cd1124"
        assert (request.year, request.plate, request.colour) == (2020, "70", "Black")

    @pytest.mark.parametrize(
        "alias, flow",
        [("vehicle-finder", LookupFlow.REGISTRATION), ("taxonomy", LookupFlow.TAXONOMY)],
    )
    def test_legacy_flow_names(self, alias: str, flow: LookupFlow) -> None:
        request = parse_listing_request(
            {"flow": alias, "registration": "AB12CDE", "derivativeId": "d1", "mileage": 1}
        )

        assert request.flow is flow

    @pytest.mark.parametrize(
        "body, message",
        [
            ({"flow": "by-vin", "mileage": 10}, "Invalid flow type"),
            ({"mileage": 10}, "Invalid flow type"),
            ({"flow": "registration-lookup", "registration": "AB12"}, "Invalid mileage"),
            ({"flow": "registration-lookup", "registration": "AB12", "mileage": 0}, "Invalid mileage"),
            ({"flow": "registration-lookup", "registration": "AB12", "mileage": -5}, "Invalid mileage"),
            ({"flow": "registration-lookup", "registration": "AB12", "mileage": "lots"}, "Invalid mileage"),
            ({"flow": "registration-lookup", "registration": "AB12", "mileage": 0.5}, "Invalid mileage"),
            ({"flow": "registration-lookup", "registration": "AB12", "mileage": 1.7}, "Invalid mileage"),
            ({"flow": "registration-lookup", "mileage": 10}, "Missing registration"),
            ({"flow": "registration-lookup", "registration": "  ", "mileage": 10}, "Missing registration"),
            ({"flow": "taxonomy-lookup", "mileage": 10}, "Missing derivative ID"),
        ],
    )
    def test_invalid_requests(self, body: dict, message: str) -> None:  # type: ignore[type-arg]
        with pytest.raises(StockCreationError) as exc_info:
            parse_listing_request(body)

        assert exc_info.value.kind is StockErrorKind.VALIDATION
        assert exc_info.value.http_status == 400
        assert exc_info.value.message == message

    def test_whole_number_float_mileage(self) -> None:
        request = parse_listing_request(
            {"flow": "registration-lookup", "registration": "AB12CDE", "mileage": 30000.0}
        )

        assert request.details.mileage == 30000

    def test_selected_features_are_typed(self) -> None:
        request = parse_listing_request(
            {
                "flow": "registration-lookup",
                "registration": "AB12CDE",
                "mileage": 100,
                "selectedFeatures": [{"name": "Sat Nav", "basicPrice": 500}],
            }
        )

        feature = request.details.selected_features[0]
        assert feature.name == "Sat Nav"
        assert feature.basic_price == 500
        assert feature.type == "Standard"
        assert feature.category == "Other"
