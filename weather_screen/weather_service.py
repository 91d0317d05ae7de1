# ABOUTME: Client for the OpenWeather current-weather endpoint.
# ABOUTME: Issues one non-retrying GET per call, by coordinate or by city name, and returns the raw body.

import logging

import httpx

from weather_screen.config import WeatherSettings
from weather_screen.errors import WeatherError, WeatherErrorKind
from weather_screen.models import Coordinate

logger = logging.getLogger(__name__)

UNITS = "metric"


def create_http_client() -> httpx.AsyncClient:
    """Create a plain httpx client: no retry transport, default timeouts."""
    return httpx.AsyncClient()


class WeatherClient:
    """Fetches raw current-weather bodies; parsing is left to `decode_weather`."""

    def __init__(self, http_client: httpx.AsyncClient, settings: WeatherSettings) -> None:
        self.http_client = http_client
        self.settings = settings

    async def fetch_by_coordinate(self, coordinate: Coordinate) -> bytes:
        """Fetch current weather for a location fix."""
        return await self._get({"lat": coordinate.latitude, "lon": coordinate.longitude})

    async def fetch_by_city(self, city_name: str) -> bytes:
        """Fetch current weather for a free-text city name."""
        return await self._get({"q": city_name})

    async def _get(self, query: dict) -> bytes:
        params = {**query, "units": UNITS, "appid": self.settings.api_key}
        logger.info("Requesting current weather for %s", query)
        try:
            resp = await self.http_client.get(self.settings.weather_url, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Weather request failed: %s", type(e).__name__)
            raise WeatherError(WeatherErrorKind.NETWORK_ERROR, f"Weather request failed: {type(e).__name__}") from e
        return resp.content
