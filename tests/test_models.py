# ABOUTME: Contract tests for the weather models and the response decoder.
# ABOUTME: Validates all-or-nothing construction of WeatherModel and the decoder's error kinds.

import copy
import json

import pytest
from helpers import PARIS_BODY
from pydantic import ValidationError

from weather_screen.errors import WeatherError, WeatherErrorKind
from weather_screen.models import Coordinate, WeatherModel, decode_weather


def _without(path: tuple) -> dict:
    """Return a copy of the Paris body with the value at `path` removed."""
    body = copy.deepcopy(PARIS_BODY)
    target = body
    for key in path[:-1]:
        target = target[key]
    del target[path[-1]]
    return body


def _with(path: tuple, value) -> dict:
    body = copy.deepcopy(PARIS_BODY)
    target = body
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    return body


class TestCoordinate:
    def test_coordinate_is_immutable(self):
        """Coordinate cannot be modified after construction.

        Implementation: Assigns to a field of a frozen Coordinate.
        Passing implies: A fix cannot be altered while it is waiting to be used.
        """
        coord = Coordinate(latitude=48.85, longitude=2.35)
        with pytest.raises(ValidationError):
            coord.latitude = 0.0


class TestWeatherModelFromPayload:
    def test_valid_payload_parses(self):
        """WeatherModel takes its four fields verbatim from the payload.

        Implementation: Builds a model from the Paris scenario body.
        Passing implies: name, main.temp, weather[0].description and weather[0].icon are mapped exactly.
        """
        model = WeatherModel.from_payload(PARIS_BODY)
        assert model.city_name == "Paris"
        assert model.temperature_celsius == 21.4
        assert model.description == "clear sky"
        assert model.icon_code == "01d"

    def test_temperature_is_not_rounded(self):
        """Temperature is stored as received, rounding happens at render time.

        Implementation: Uses a temperature with several decimals.
        Passing implies: The model layer keeps full precision.
        """
        model = WeatherModel.from_payload(_with(("main", "temp"), 12.987))
        assert model.temperature_celsius == 12.987

    def test_integer_temperature_accepted(self):
        """An integer JSON temperature is a valid number.

        Implementation: Sets main.temp to an int.
        Passing implies: Strict validation still accepts integral numbers.
        """
        model = WeatherModel.from_payload(_with(("main", "temp"), 3))
        assert model.temperature_celsius == 3.0

    def test_uses_first_weather_entry(self):
        """Only weather[0] feeds description and icon.

        Implementation: Appends a second condition to the weather list.
        Passing implies: Extra conditions are ignored.
        """
        body = copy.deepcopy(PARIS_BODY)
        body["weather"].append({"description": "mist", "icon": "50d"})
        model = WeatherModel.from_payload(body)
        assert model.description == "clear sky"
        assert model.icon_code == "01d"

    def test_extra_fields_ignored(self):
        """Unrelated provider fields do not affect construction.

        Implementation: Adds wind and coord blocks to the body.
        Passing implies: Only the four required fields are validated.
        """
        body = {**PARIS_BODY, "wind": {"speed": 3.1}, "coord": {"lat": 48.85, "lon": 2.35}}
        assert WeatherModel.from_payload(body).city_name == "Paris"

    @pytest.mark.parametrize(
        "path",
        [("name",), ("main",), ("main", "temp"), ("weather",), ("weather", 0, "description"), ("weather", 0, "icon")],
    )
    def test_missing_field_fails(self, path):
        """Any missing required field rejects the whole payload.

        Implementation: Removes one field at a time from a valid body.
        Passing implies: No partial model is ever produced.
        """
        with pytest.raises(WeatherError) as exc_info:
            WeatherModel.from_payload(_without(path))
        assert exc_info.value.kind is WeatherErrorKind.MODEL_VALIDATION_FAILED

    @pytest.mark.parametrize(
        "path, value",
        [
            (("name",), 42),
            (("main", "temp"), "21.4"),
            (("main", "temp"), True),
            (("main", "temp"), None),
            (("weather",), []),
            (("weather",), {"description": "clear sky", "icon": "01d"}),
            (("weather", 0, "description"), ["clear"]),
            (("weather", 0, "icon"), 1),
        ],
    )
    def test_wrong_type_fails(self, path, value):
        """A wrongly typed required field rejects the whole payload.

        Implementation: Replaces one field at a time with a value of the wrong JSON type.
        Passing implies: Validation is strict, numeric strings and booleans are not coerced.
        """
        with pytest.raises(WeatherError) as exc_info:
            WeatherModel.from_payload(_with(path, value))
        assert exc_info.value.kind is WeatherErrorKind.MODEL_VALIDATION_FAILED

    def test_model_is_immutable(self):
        """WeatherModel is read-only once built.

        Implementation: Assigns to a field of a constructed model.
        Passing implies: Consumers cannot alter the data they were handed.
        """
        model = WeatherModel.from_payload(PARIS_BODY)
        with pytest.raises(ValidationError):
            model.city_name = "Lyon"


class TestDecodeWeather:
    def test_decodes_valid_body(self):
        """decode_weather parses a JSON body into a WeatherModel.

        Implementation: Encodes the Paris body to bytes.
        Passing implies: The raw-bytes path produces the same model as from_payload.
        """
        model = decode_weather(json.dumps(PARIS_BODY).encode())
        assert model == WeatherModel.from_payload(PARIS_BODY)

    @pytest.mark.parametrize("body", [b"", b"   \n"])
    def test_empty_body(self, body):
        """An empty body is reported as EMPTY_RESPONSE.

        Implementation: Decodes empty and whitespace-only bodies.
        Passing implies: Empty responses are told apart from broken JSON.
        """
        with pytest.raises(WeatherError) as exc_info:
            decode_weather(body)
        assert exc_info.value.kind is WeatherErrorKind.EMPTY_RESPONSE

    @pytest.mark.parametrize("body", [b"{not json", b"<html>502</html>", b"[1, 2]", b'"Paris"', b"\xff\xfe"])
    def test_malformed_json(self, body):
        """Unparseable JSON or a non-object top level is MALFORMED_JSON.

        Implementation: Decodes syntactically broken bodies and JSON that is not an object.
        Passing implies: Structural failures are reported before schema validation.
        """
        with pytest.raises(WeatherError) as exc_info:
            decode_weather(body)
        assert exc_info.value.kind is WeatherErrorKind.MALFORMED_JSON

    def test_non_finite_temperature_rejected(self):
        """NaN is not an acceptable temperature.

        Implementation: Decodes a body whose main.temp is the non-standard NaN literal.
        Passing implies: The renderer never receives a value it cannot round.
        """
        body = b'{"main": {"temp": NaN}, "weather": [{"description": "x", "icon": "01d"}], "name": "Paris"}'
        with pytest.raises(WeatherError) as exc_info:
            decode_weather(body)
        assert exc_info.value.kind is WeatherErrorKind.MODEL_VALIDATION_FAILED
