from enum import Enum


class LookupFlow(str, Enum):
    """The two ways a dealer can identify the vehicle being stocked."""

    REGISTRATION = "registration-lookup"
    TAXONOMY = "taxonomy-lookup"

    @classmethod
    def _missing_(cls, value: object) -> "LookupFlow | None":
        # Older clients still post the original flow names
        aliases = {"vehicle-finder": cls.REGISTRATION, "taxonomy": cls.TAXONOMY}
        if isinstance(value, str):
            return aliases.get(value)
        return None


class ImageType(str, Enum):
    """How a dealer has tagged one of their stock images."""

    DEFAULT = "default"
    FALLBACK = "fallback"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> "ImageType":
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.OTHER


class ImageSource(str, Enum):
    """Where an image in the final listing came from."""

    USER = "user"
    FALLBACK = "fallback"
    DEFAULT = "default"


class StockErrorKind(str, Enum):
    AUTHENTICATION = "AUTHENTICATION"
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMIT = "RATE_LIMIT"
    SERVER_ERROR = "SERVER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
