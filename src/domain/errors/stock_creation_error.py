import json
from datetime import datetime, timezone
from typing import Any

from src.domain.enums.stock_enums import StockErrorKind

ENDPOINT = "stock/create"

# Client-facing status for each kind when an upstream failure is classified
_CLIENT_STATUS: dict[StockErrorKind, int] = {
    StockErrorKind.VALIDATION: 400,
    StockErrorKind.AUTHENTICATION: 401,
    StockErrorKind.NOT_FOUND: 404,
    StockErrorKind.RATE_LIMIT: 429,
    StockErrorKind.SERVER_ERROR: 502,
    StockErrorKind.NETWORK_ERROR: 503,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_json_body(body: str | None) -> Any | None:
    """Return the decoded JSON of an upstream body, or None if it is not JSON."""
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


class StockCreationError(Exception):
    """
    A typed failure of the stock creation pipeline.

    ``upstream_error`` holds the decoded upstream body (when it was JSON) and
    ``upstream_body`` the raw text exactly as received, so a client can apply
    its own interpretation of AutoTrader's error format.
    """

    def __init__(
        self,
        kind: StockErrorKind,
        message: str,
        details: str | None = None,
        *,
        http_status: int,
        upstream_error: Any | None = None,
        upstream_body: str | None = None,
        endpoint: str = ENDPOINT,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details
        self.http_status = http_status
        self.upstream_error = upstream_error
        self.upstream_body = upstream_body
        self.endpoint = endpoint
        self.timestamp = _utcnow()

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def authentication(
        cls, message: str, details: str | None = None, http_status: int = 401
    ) -> "StockCreationError":
        return cls(StockErrorKind.AUTHENTICATION, message, details, http_status=http_status)

    @classmethod
    def validation(cls, message: str, details: str | None = None) -> "StockCreationError":
        return cls(StockErrorKind.VALIDATION, message, details, http_status=400)

    @classmethod
    def not_found(cls, message: str, details: str | None = None) -> "StockCreationError":
        return cls(StockErrorKind.NOT_FOUND, message, details, http_status=404)

    @classmethod
    def network(cls, details: str) -> "StockCreationError":
        return cls(
            StockErrorKind.NETWORK_ERROR,
            "Failed to reach AutoTrader",
            details,
            http_status=_CLIENT_STATUS[StockErrorKind.NETWORK_ERROR],
        )

    @classmethod
    def internal(cls, exc: BaseException) -> "StockCreationError":
        return cls(
            StockErrorKind.SERVER_ERROR,
            "Internal server error",
            str(exc) or type(exc).__name__,
            http_status=500,
        )

    @classmethod
    def from_upstream_response(
        cls, status_code: int, body: str | None, upstream_endpoint: str
    ) -> "StockCreationError":
        """Classify a failed AutoTrader lookup by status code and warning payload."""
        parsed = parse_json_body(body)
        warnings = parsed.get("warnings") if isinstance(parsed, dict) else None
        primary: dict[str, Any] = {}
        if isinstance(warnings, list) and warnings:
            errors = [w for w in warnings if isinstance(w, dict) and w.get("type") == "ERROR"]
            first = errors[0] if errors else warnings[0]
            primary = first if isinstance(first, dict) else {}

        if status_code in (401, 403):
            kind, message = StockErrorKind.AUTHENTICATION, "Authentication failed - check API credentials"
        elif status_code == 404:
            kind, message = StockErrorKind.NOT_FOUND, primary.get("message") or "Resource not found"
        elif status_code == 400:
            kind, message = StockErrorKind.VALIDATION, primary.get("message") or "Invalid request parameters"
        elif status_code == 429:
            kind, message = StockErrorKind.RATE_LIMIT, "API rate limit exceeded"
        elif status_code >= 500:
            kind, message = StockErrorKind.SERVER_ERROR, "AutoTrader API server error"
        else:
            kind, message = StockErrorKind.SERVER_ERROR, primary.get("message") or f"HTTP {status_code}"

        if parsed is None:
            details = body or None
        elif primary.get("feature"):
            details = f"Feature: {primary['feature']}"
        else:
            details = f"AutoTrader {upstream_endpoint} returned {status_code}"

        http_status = _CLIENT_STATUS[kind]
        if kind is StockErrorKind.SERVER_ERROR and status_code < 500:
            http_status = status_code

        return cls(
            kind,
            message,
            details,
            http_status=http_status,
            upstream_error=parsed,
            upstream_body=body,
        )

    # -------------------------------------------------------------------------
    # Serialisation
    # -------------------------------------------------------------------------

    def to_response(self) -> dict[str, Any]:
        error: dict[str, Any] = {
            "type": self.kind.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "endpoint": self.endpoint,
        }
        if self.upstream_error is not None:
            error["autoTraderError"] = self.upstream_error
        if self.upstream_body is not None:
            error["upstreamBody"] = self.upstream_body
        return {"success": False, "error": error}
