# ABOUTME: Error taxonomy for a weather fetch cycle.
# ABOUTME: Every failure is terminal for its cycle; location kinds are recovered by the city fallback.

from enum import Enum


class WeatherErrorKind(str, Enum):
    """Why a fetch cycle stopped."""

    PERMISSION_DENIED = "permission_denied"
    LOCATION_FAILED = "location_failed"
    NETWORK_ERROR = "network_error"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_JSON = "malformed_json"
    MODEL_VALIDATION_FAILED = "model_validation_failed"


class WeatherError(Exception):
    """Raised by the client and the decoder; carries the failure kind."""

    def __init__(self, kind: WeatherErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
