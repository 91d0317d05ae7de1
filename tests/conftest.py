# ABOUTME: Shared test fixtures for the weather screen test suite.
# ABOUTME: Provides settings pointing at a fake endpoint with a test key.

import pytest

from weather_screen.config import WeatherSettings


@pytest.fixture
def settings() -> WeatherSettings:
    return WeatherSettings(api_key="test-key", weather_url="https://api.test/data/2.5/weather")
