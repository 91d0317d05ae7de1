# ABOUTME: One-shot location provider on top of a platform location service.
# ABOUTME: Handles permission flow and emits either a single coordinate or a fallback signal.

import logging
from enum import Enum
from typing import Callable, Protocol

from weather_screen.errors import WeatherErrorKind
from weather_screen.models import Coordinate

logger = logging.getLogger(__name__)


class AuthorizationStatus(str, Enum):
    """Authorization states reported by the platform."""

    NOT_DETERMINED = "not_determined"
    RESTRICTED = "restricted"
    DENIED = "denied"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"
    AUTHORIZED_ALWAYS = "authorized_always"

    @property
    def is_authorized(self) -> bool:
        return self in (AuthorizationStatus.AUTHORIZED_WHEN_IN_USE, AuthorizationStatus.AUTHORIZED_ALWAYS)


class LocationState(str, Enum):
    UNAUTHORIZED = "unauthorized"
    PENDING = "pending"
    AUTHORIZED = "authorized"
    ACTIVE = "active"
    FAILED = "failed"


class LocationService(Protocol):
    """Platform geolocation. Results come back through the provider's `on_*` methods."""

    def authorization_status(self) -> AuthorizationStatus: ...

    def request_authorization(self) -> None: ...

    def start_updates(self) -> None: ...

    def stop_updates(self) -> None: ...


CoordinateHandler = Callable[[Coordinate], None]
FallbackHandler = Callable[[WeatherErrorKind], None]


class LocationProvider:
    """Turns continuous platform updates into one best-effort fix per request.

    Each `start()` or `refresh()` arms the provider; it then emits exactly one
    signal (a coordinate or a fallback) no matter how many authorization
    changes or position updates the platform delivers.
    """

    def __init__(self, service: LocationService) -> None:
        self.service = service
        self.state = LocationState.UNAUTHORIZED
        self.last_known: Coordinate | None = None
        self._on_coordinate: CoordinateHandler | None = None
        self._on_fallback: FallbackHandler | None = None
        self._permission_requested = False
        self._armed = False

    def bind(self, on_coordinate: CoordinateHandler, on_fallback: FallbackHandler) -> None:
        self._on_coordinate = on_coordinate
        self._on_fallback = on_fallback

    def start(self) -> None:
        """Ask for a fix, requesting permission first if it is still undetermined."""
        self._armed = True
        self._apply_status(self.service.authorization_status())

    def refresh(self) -> None:
        """Ask for a fresh fix; same rules as `start()`.

        A prompt that was shown but never answered does not block the
        refresh: the fallback is emitted instead.
        """
        self._armed = True
        status = self.service.authorization_status()
        if status is AuthorizationStatus.NOT_DETERMINED and self._permission_requested:
            self.state = LocationState.PENDING
            self._emit_fallback(WeatherErrorKind.PERMISSION_DENIED)
            return
        self._apply_status(status)

    # Platform events

    def on_authorization_changed(self, status: AuthorizationStatus) -> None:
        logger.debug("Location authorization changed to %s", status.value)
        self._apply_status(status)

    def on_locations(self, coordinates: list[Coordinate]) -> None:
        if not coordinates:
            return
        # One fix is enough, stop the hardware right away.
        self.service.stop_updates()
        self.last_known = coordinates[-1]
        self.state = LocationState.AUTHORIZED
        if self._armed:
            self._armed = False
            logger.info("Location fix received")
            if self._on_coordinate is not None:
                self._on_coordinate(self.last_known)

    def on_location_error(self, error: object) -> None:
        logger.warning("Location update failed: %s", error)
        self.service.stop_updates()
        self.state = LocationState.FAILED
        self._emit_fallback(WeatherErrorKind.LOCATION_FAILED)

    def _apply_status(self, status: AuthorizationStatus) -> None:
        if status is AuthorizationStatus.NOT_DETERMINED:
            self.state = LocationState.PENDING
            if self._armed and not self._permission_requested:
                self._permission_requested = True
                self.service.request_authorization()
        elif status.is_authorized:
            if not self._armed:
                self.state = LocationState.AUTHORIZED
            elif self.state is not LocationState.ACTIVE:
                self.state = LocationState.ACTIVE
                self.service.start_updates()
        else:
            if self.state is LocationState.ACTIVE:
                self.service.stop_updates()
            self.state = LocationState.UNAUTHORIZED
            self._emit_fallback(WeatherErrorKind.PERMISSION_DENIED)

    def _emit_fallback(self, reason: WeatherErrorKind) -> None:
        if not self._armed:
            return
        self._armed = False
        logger.info("Location unavailable (%s), falling back", reason.value)
        if self._on_fallback is not None:
            self._on_fallback(reason)
