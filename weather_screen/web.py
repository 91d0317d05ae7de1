# ABOUTME: ASGI entry point exposing the weather screen to a browser front end.
# ABOUTME: The browser reports geolocation events and polls the screen state; Starlette routes drive the presenter.

import contextlib
import logging

import httpx
from pydantic import BaseModel, ValidationError, model_validator
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from weather_screen.config import WeatherSettings, load_settings
from weather_screen.location import AuthorizationStatus, LocationProvider
from weather_screen.models import Coordinate
from weather_screen.presenter import WeatherPresenter
from weather_screen.weather_service import WeatherClient, create_http_client

logger = logging.getLogger(__name__)


class BrowserLocationService:
    """Location service backed by the browser Geolocation API.

    The browser cannot be called from here, so requests are recorded as flags
    the page reads from `GET /api/weather`; answers come back as POSTs.
    """

    def __init__(self) -> None:
        self.status = AuthorizationStatus.NOT_DETERMINED
        self.permission_requested = False
        self.updating = False

    def authorization_status(self) -> AuthorizationStatus:
        return self.status

    def request_authorization(self) -> None:
        self.permission_requested = True

    def start_updates(self) -> None:
        self.updating = True

    def stop_updates(self) -> None:
        self.updating = False


class AuthorizationReport(BaseModel):
    status: AuthorizationStatus


class LocationReport(BaseModel):
    """Either a position or an error message from the browser."""

    latitude: float | None = None
    longitude: float | None = None
    error: str | None = None

    @model_validator(mode="after")
    def check_position_or_error(self) -> "LocationReport":
        has_position = self.latitude is not None and self.longitude is not None
        if has_position == (self.error is not None):
            raise ValueError("send either latitude and longitude, or error")
        return self


def _screen_payload(request: Request) -> dict:
    presenter: WeatherPresenter = request.app.state.presenter
    service: BrowserLocationService = request.app.state.location_service
    return {
        "screen": presenter.screen.model_dump(mode="json"),
        "location": {
            "status": service.status.value,
            "permission_requested": service.permission_requested,
            "updating": service.updating,
        },
    }


async def _read_body(request: Request, model: type[BaseModel]) -> BaseModel | JSONResponse:
    try:
        return model.model_validate_json(await request.body())
    except ValidationError as e:
        return JSONResponse({"errors": e.errors(include_url=False, include_context=False)}, status_code=422)


async def get_weather(request: Request) -> JSONResponse:
    return JSONResponse(_screen_payload(request))


async def report_authorization(request: Request) -> JSONResponse:
    report = await _read_body(request, AuthorizationReport)
    if isinstance(report, JSONResponse):
        return report
    request.app.state.location_service.status = report.status
    request.app.state.location_provider.on_authorization_changed(report.status)
    await request.app.state.presenter.wait_idle()
    return JSONResponse(_screen_payload(request))


async def report_location(request: Request) -> JSONResponse:
    report = await _read_body(request, LocationReport)
    if isinstance(report, JSONResponse):
        return report
    provider: LocationProvider = request.app.state.location_provider
    if report.error is not None:
        provider.on_location_error(report.error)
    else:
        provider.on_locations([Coordinate(latitude=report.latitude, longitude=report.longitude)])
    await request.app.state.presenter.wait_idle()
    return JSONResponse(_screen_payload(request))


async def refresh(request: Request) -> JSONResponse:
    request.app.state.presenter.refresh()
    await request.app.state.presenter.wait_idle()
    return JSONResponse(_screen_payload(request))


async def dismiss_alert(request: Request) -> JSONResponse:
    request.app.state.presenter.dismiss_error()
    return JSONResponse(_screen_payload(request))


def create_app(
    settings: WeatherSettings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> Starlette:
    """Build the ASGI app; settings and HTTP client can be injected for tests."""

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        resolved = settings or load_settings()
        client = http_client or create_http_client()
        service = BrowserLocationService()
        provider = LocationProvider(service)
        presenter = WeatherPresenter(WeatherClient(client, resolved), provider, resolved)
        app.state.location_service = service
        app.state.location_provider = provider
        app.state.presenter = presenter
        await presenter.load()
        try:
            yield
        finally:
            await presenter.wait_idle()
            if http_client is None:
                await client.aclose()

    return Starlette(
        routes=[
            Route("/api/weather", get_weather, methods=["GET"]),
            Route("/api/location/authorization", report_authorization, methods=["POST"]),
            Route("/api/location", report_location, methods=["POST"]),
            Route("/api/refresh", refresh, methods=["POST"]),
            Route("/api/alert/dismiss", dismiss_alert, methods=["POST"]),
        ],
        lifespan=lifespan,
    )


app = create_app()
