"""
Canonical vehicle record and the normalization of both upstream lookup flows
into it.

AutoTrader returns a vehicle object for registration lookups and a derivative
object for taxonomy lookups. Each is wrapped in its own result type and mapped
through ``normalize_vehicle``; attributes that have no dedicated field are kept
in ``VehicleRecord.attributes`` and passed through to the listing payload.
"""
from dataclasses import dataclass, field, fields
from typing import Any

from src.domain.entities.listing_request import Feature

UNKNOWN_MODEL = "Unknown Model"

# VehicleRecord field -> AutoTrader vehicle key
_WIRE_NAMES: dict[str, str] = {
    "make": "make",
    "model": "model",
    "generation": "generation",
    "derivative": "derivative",
    "derivative_id": "derivativeId",
    "trim": "trim",
    "vehicle_type": "vehicleType",
    "body_type": "bodyType",
    "fuel_type": "fuelType",
    "transmission_type": "transmissionType",
    "drivetrain": "drivetrain",
    "doors": "doors",
    "seats": "seats",
    "engine_capacity_cc": "engineCapacityCC",
    "engine_power_bhp": "enginePowerBHP",
    "badge_engine_size_litres": "badgeEngineSizeLitres",
    "registration": "registration",
    "vin": "vin",
    "colour": "colour",
    "year_of_manufacture": "yearOfManufacture",
    "first_registration_date": "firstRegistrationDate",
    "odometer_reading_miles": "odometerReadingMiles",
    "ownership_condition": "ownershipCondition",
}

# Derivative keys that are renamed onto the vehicle shape and not passed through
_RENAMED_DERIVATIVE_KEYS = frozenset({"name", "longName", "generationName"})


@dataclass
class VehicleRecord:
    make: str = ""
    model: str = ""
    generation: str | None = None
    derivative: str | None = None
    derivative_id: str | None = None
    trim: str | None = None
    vehicle_type: str | None = None
    body_type: str | None = None
    fuel_type: str | None = None
    transmission_type: str | None = None
    drivetrain: str | None = None
    doors: int | None = None
    seats: int | None = None
    engine_capacity_cc: int | None = None
    engine_power_bhp: float | None = None
    badge_engine_size_litres: float | None = None
    registration: str | None = None
    vin: str | None = None
    colour: str | None = None
    year_of_manufacture: int | None = None
    first_registration_date: str | None = None
    odometer_reading_miles: int | None = None
    ownership_condition: str | None = None
    features: list[Feature] = field(default_factory=list)
    # Everything else AutoTrader reported (dimensions, performance, emissions...)
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "VehicleRecord":
        known = {wire: name for name, wire in _WIRE_NAMES.items()}
        values: dict[str, Any] = {}
        attributes: dict[str, Any] = {}
        for key, value in data.items():
            if key == "features":
                continue
            if key in known:
                values[known[key]] = value
            else:
                attributes[key] = value
        features = [Feature.from_dict(f) for f in data.get("features") or [] if isinstance(f, dict)]
        record = cls(**values, features=features, attributes=attributes)
        record.make = record.make or ""
        record.model = record.model or ""
        return record

    def to_wire(self) -> dict[str, Any]:
        """AutoTrader vehicle block; dedicated fields win over pass-through attributes."""
        wire = dict(self.attributes)
        for f in fields(self):
            if f.name in _WIRE_NAMES:
                value = getattr(self, f.name)
                if value is not None:
                    wire[_WIRE_NAMES[f.name]] = value
        return wire

    def apply_model_fallback(self) -> None:
        if not self.model:
            self.model = self.derivative or self.trim or self.vehicle_type or UNKNOWN_MODEL


@dataclass(frozen=True)
class RegistrationLookupResult:
    """Body of ``GET /vehicles`` for a registration."""

    vehicle: dict[str, Any]


@dataclass(frozen=True)
class TaxonomyLookupResult:
    """Body of ``GET /taxonomy/derivatives/{id}`` plus the dealer's overrides."""

    derivative: dict[str, Any]
    mileage: int
    year: int | None = None
    plate: str | None = None
    colour: str | None = None


VehicleLookupResult = RegistrationLookupResult | TaxonomyLookupResult


def _derivative_to_vehicle(derivative: dict[str, Any]) -> dict[str, Any]:
    vehicle = {k: v for k, v in derivative.items() if k not in _RENAMED_DERIVATIVE_KEYS}
    vehicle["generation"] = derivative.get("generationName")
    vehicle["derivative"] = derivative.get("name") or derivative.get("longName")
    vehicle["features"] = derivative.get("features") or []
    return vehicle


def normalize_vehicle(result: VehicleLookupResult) -> VehicleRecord:
    """Map either lookup result onto the canonical record, model fallback applied."""
    if isinstance(result, RegistrationLookupResult):
        record = VehicleRecord.from_wire(result.vehicle)
    elif isinstance(result, TaxonomyLookupResult):
        record = VehicleRecord.from_wire(_derivative_to_vehicle(result.derivative))
        record.odometer_reading_miles = result.mileage
        record.ownership_condition = "Used"
        if result.year:
            record.year_of_manufacture = result.year
        if result.plate:
            record.registration = result.plate
        if result.colour:
            record.colour = result.colour
    else:
        raise TypeError(f"Unsupported lookup result: {type(result).__name__}")

    record.apply_model_fallback()
    return record
