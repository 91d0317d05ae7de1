# ABOUTME: Test doubles shared across the weather screen test suite.
# ABOUTME: Mock HTTP responses and a scripted platform location service.

import json
from unittest.mock import AsyncMock

import httpx

from weather_screen.location import AuthorizationStatus

PARIS_BODY = {"main": {"temp": 21.4}, "weather": [{"description": "clear sky", "icon": "01d"}], "name": "Paris"}
LYON_BODY = {"main": {"temp": 17.6}, "weather": [{"description": "light rain", "icon": "10n"}], "name": "Lyon"}


def make_response(body: bytes | dict, status_code: int = 200) -> httpx.Response:
    """Build an httpx.Response carrying either raw bytes or a JSON body."""
    content = json.dumps(body).encode() if isinstance(body, dict) else body
    return httpx.Response(status_code=status_code, content=content, request=httpx.Request("GET", "https://test"))


def mock_client(*responses: httpx.Response) -> AsyncMock:
    """Create a mock httpx.AsyncClient returning the given responses in order."""
    mock = AsyncMock(spec=httpx.AsyncClient)
    mock.get.side_effect = list(responses)
    return mock


class FakeLocationService:
    """Records what the provider asked of the platform."""

    def __init__(self, status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED) -> None:
        self.status = status
        self.authorization_requests = 0
        self.start_calls = 0
        self.stop_calls = 0

    def authorization_status(self) -> AuthorizationStatus:
        return self.status

    def request_authorization(self) -> None:
        self.authorization_requests += 1

    def start_updates(self) -> None:
        self.start_calls += 1

    def stop_updates(self) -> None:
        self.stop_calls += 1
