# ABOUTME: Weather screen presenter: location -> fetch -> decode -> render, and all screen state.
# ABOUTME: Runs on one asyncio loop; every screen mutation is funnelled onto that loop.

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Callable

from pydantic import BaseModel

from weather_screen.config import WeatherSettings
from weather_screen.errors import WeatherError, WeatherErrorKind
from weather_screen.location import LocationProvider
from weather_screen.models import Coordinate, WeatherModel, decode_weather
from weather_screen.presentation import (
    Gradient,
    Icon,
    format_description,
    format_temperature,
    gradient_for_hour,
    icon_for_code,
)
from weather_screen.weather_service import WeatherClient

logger = logging.getLogger(__name__)

PLACEHOLDER_CITY = "Locating..."
PLACEHOLDER_TEMPERATURE = "--°C"
PLACEHOLDER_DESCRIPTION = "Loading weather"

_ALERT_TEXT = {
    WeatherErrorKind.NETWORK_ERROR: ("Network error", "The weather service could not be reached."),
    WeatherErrorKind.EMPTY_RESPONSE: ("No data", "The weather service sent an empty response."),
    WeatherErrorKind.MALFORMED_JSON: ("Invalid data", "The weather service sent an unreadable response."),
    WeatherErrorKind.MODEL_VALIDATION_FAILED: ("Invalid data", "The weather data is incomplete."),
}


class PresenterState(str, Enum):
    IDLE = "idle"
    LOCATING = "locating"
    FETCHING = "fetching"
    RENDERING = "rendering"
    ERROR_SHOWN = "error_shown"


class ErrorAlert(BaseModel):
    """A blocking notification with a single dismiss action."""

    kind: WeatherErrorKind
    title: str
    message: str
    action: str = "OK"


class ScreenState(BaseModel):
    """Everything the screen shows. Only the presenter writes to it."""

    state: PresenterState = PresenterState.IDLE
    city_text: str = ""
    temperature_text: str = ""
    description_text: str = ""
    icon: Icon | None = None
    gradient: Gradient | None = None
    alert: ErrorAlert | None = None


class WeatherPresenter:
    """Orchestrates one fetch cycle per location signal or manual refresh.

    Overlapping cycles are not cancelled. Each cycle gets a generation number
    and only the most recently started one may touch the screen.
    """

    def __init__(
        self,
        client: WeatherClient,
        location: LocationProvider,
        settings: WeatherSettings,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.client = client
        self.location = location
        self.settings = settings
        self.clock = clock
        self.screen = ScreenState()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: set[asyncio.Task] = set()
        self._generation = 0
        location.bind(self._post_coordinate, self._post_fallback)

    async def load(self) -> None:
        """Show placeholders, colour the background and start locating."""
        self._loop = asyncio.get_running_loop()
        self.screen.city_text = PLACEHOLDER_CITY
        self.screen.temperature_text = PLACEHOLDER_TEMPERATURE
        self.screen.description_text = PLACEHOLDER_DESCRIPTION
        self._refresh_gradient()
        self.screen.state = PresenterState.LOCATING
        self.location.start()

    def refresh(self) -> None:
        """Re-enter the flow: fresh fix, else last known coordinate, else the default city."""
        self._require_loop()
        self._refresh_gradient()
        self.screen.state = PresenterState.LOCATING
        self.location.refresh()

    def dismiss_error(self) -> None:
        if self.screen.alert is None:
            return
        self.screen.alert = None
        self.screen.state = PresenterState.IDLE

    async def wait_idle(self) -> None:
        """Wait until every scheduled fetch cycle has finished."""
        await asyncio.sleep(0)
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
            await asyncio.sleep(0)

    # Location signals may come from any thread; hop onto the loop first.

    def _post_coordinate(self, coordinate: Coordinate) -> None:
        self._require_loop().call_soon_threadsafe(self._start_cycle, coordinate)

    def _post_fallback(self, reason: WeatherErrorKind) -> None:
        self._require_loop().call_soon_threadsafe(self._handle_fallback, reason)

    def _handle_fallback(self, reason: WeatherErrorKind) -> None:
        target = self.location.last_known or self.settings.default_city
        logger.info("Location unavailable (%s), fetching weather for %s", reason.value, target)
        self._start_cycle(target)

    def _start_cycle(self, target: Coordinate | str) -> None:
        self._generation += 1
        self.screen.state = PresenterState.FETCHING
        task = self._require_loop().create_task(self._run_cycle(target, self._generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_cycle(self, target: Coordinate | str, generation: int) -> None:
        try:
            await self._complete_cycle(target, generation)
        except Exception:
            logger.exception("Fetch cycle %d crashed", generation)
            if generation == self._generation:
                self.screen.state = PresenterState.IDLE
            raise

    async def _complete_cycle(self, target: Coordinate | str, generation: int) -> None:
        try:
            if isinstance(target, Coordinate):
                body = await self.client.fetch_by_coordinate(target)
            else:
                body = await self.client.fetch_by_city(target)
            weather = decode_weather(body)
        except WeatherError as e:
            if self._is_stale(generation):
                return
            self._show_error(e)
            return
        if self._is_stale(generation):
            return
        self._render(weather)

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.info("Discarding response from fetch cycle %d, cycle %d is newer", generation, self._generation)
            return True
        return False

    def _render(self, weather: WeatherModel) -> None:
        self.screen.state = PresenterState.RENDERING
        self.screen.city_text = weather.city_name
        self.screen.temperature_text = format_temperature(weather.temperature_celsius)
        self.screen.description_text = format_description(weather.description)
        self.screen.icon = icon_for_code(weather.icon_code)
        self._refresh_gradient()
        logger.info("Rendered weather for %s", weather.city_name)

    def _show_error(self, error: WeatherError) -> None:
        logger.error("Fetch cycle failed (%s): %s", error.kind.value, error.message)
        title, message = _ALERT_TEXT.get(error.kind, ("Error", error.message))
        self.screen.alert = ErrorAlert(kind=error.kind, title=title, message=message)
        self.screen.state = PresenterState.ERROR_SHOWN

    def _refresh_gradient(self) -> None:
        self.screen.gradient = gradient_for_hour(self.clock().hour)

    def _require_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            raise RuntimeError("WeatherPresenter.load() must run before the flow can continue")
        return self._loop
