# ABOUTME: Pydantic models for location fixes and current-weather responses.
# ABOUTME: Validates OpenWeather JSON into an immutable WeatherModel, all fields or nothing.

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from weather_screen.errors import WeatherError, WeatherErrorKind


class Coordinate(BaseModel):
    """A latitude/longitude location fix."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class _RawMain(BaseModel):
    model_config = ConfigDict(strict=True)

    temp: float = Field(allow_inf_nan=False)


class _RawCondition(BaseModel):
    model_config = ConfigDict(strict=True)

    description: str
    icon: str


class _RawWeatherPayload(BaseModel):
    """The subset of the OpenWeather current-weather body the screen needs."""

    model_config = ConfigDict(strict=True)

    name: str
    main: _RawMain
    weather: list[_RawCondition] = Field(min_length=1)


class WeatherModel(BaseModel):
    """Current weather for one city, as returned by a single successful response.

    Temperature is kept exactly as received, in the unit the request asked for.
    """

    model_config = ConfigDict(frozen=True)

    city_name: str
    temperature_celsius: float
    description: str
    icon_code: str

    @classmethod
    def from_payload(cls, data: Any) -> "WeatherModel":
        """Build a model from a decoded JSON map, or raise MODEL_VALIDATION_FAILED."""
        try:
            raw = _RawWeatherPayload.model_validate(data)
        except ValidationError as e:
            raise WeatherError(
                WeatherErrorKind.MODEL_VALIDATION_FAILED,
                f"Weather response is missing required fields: {e.error_count()} error(s)",
            ) from e
        condition = raw.weather[0]
        return cls(
            city_name=raw.name,
            temperature_celsius=raw.main.temp,
            description=condition.description,
            icon_code=condition.icon,
        )


def decode_weather(body: bytes) -> WeatherModel:
    """Turn a raw response body into a WeatherModel.

    Raises WeatherError with EMPTY_RESPONSE, MALFORMED_JSON or
    MODEL_VALIDATION_FAILED. None of these are retried by the caller.
    """
    if not body or not body.strip():
        raise WeatherError(WeatherErrorKind.EMPTY_RESPONSE, "Weather service returned an empty response")
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise WeatherError(WeatherErrorKind.MALFORMED_JSON, f"Weather response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise WeatherError(WeatherErrorKind.MALFORMED_JSON, "Weather response is not a JSON object")
    return WeatherModel.from_payload(data)
