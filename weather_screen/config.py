# ABOUTME: Runtime settings for the weather screen, loaded from the environment.
# ABOUTME: Keeps the OpenWeather access key out of module globals so it can be injected and rotated.

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
DEFAULT_CITY = "Paris"


class WeatherSettings(BaseModel):
    """Settings injected into the client and the presenter at startup."""

    api_key: str = ""
    weather_url: str = DEFAULT_WEATHER_URL
    default_city: str = DEFAULT_CITY


def load_settings() -> WeatherSettings:
    """Build settings from the process environment, reading `.env` first."""
    load_dotenv()
    settings = WeatherSettings(
        api_key=os.environ.get("OPENWEATHER_API_KEY", ""),
        weather_url=os.environ.get("OPENWEATHER_URL", DEFAULT_WEATHER_URL),
        default_city=os.environ.get("WEATHER_DEFAULT_CITY", DEFAULT_CITY),
    )
    if not settings.api_key:
        logger.warning("OPENWEATHER_API_KEY is not set, weather requests will be rejected")
    return settings
