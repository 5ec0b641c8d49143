from __future__ import annotations

import httpx
import pytest

from signup_bridge.config import Settings
from signup_bridge.models.signup import SignupRequest
from signup_bridge.services.browserless_service import BrowserlessService


def step_data(html: str = "<h1>Thank you for signing up</h1>", **overrides) -> dict:
    """A Browserless ``data`` mapping in which every step ran."""
    data = {
        "goto": {"status": 200},
        "waitForForm": {"selector": "input[placeholder*='First']", "time": 120.5},
        "waitForFormLoad": {"selector": "input[placeholder*='Last']", "time": 3.1},
        "typeFirstName": {"time": 410.2},
        "typeLastName": {"time": 388.0},
        "typeEmail": {"time": 902.7},
        "waitForRadios": {
            "height": 24, "selector": "label.form-check-label",
            "time": 2.0, "y": 410, "x": 32, "width": 180,
        },
        "clickRadioLabel": {"time": 55.3},
        "waitForButton": {
            "height": 40, "selector": "button.btn-form-primary",
            "time": 1.4, "y": 620, "x": 32, "width": 120,
        },
        "clickSubmit": {"time": 80.9},
        "waitAfterSubmit": {
            "status": 200, "time": 1500.0, "text": "",
            "url": "https://signup-aus.keela.co/embed/GmjpBXbNAsdcsaRco/thanks",
        },
        "html": {"html": html, "time": 12.0},
    }
    data.update(overrides)
    return data


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def signup_request() -> SignupRequest:
    return SignupRequest(
        first_name="Ada", last_name="Lovelace", email="ada@example.com", is_scientist=True
    )


@pytest.fixture
def live_settings() -> Settings:
    return Settings(browserless_token="live-token")


@pytest.fixture
def make_service(live_settings):
    """Build a relay whose outbound calls are answered by ``handler``."""

    def _make(handler, config: Settings | None = None):
        transport = RecordingTransport(handler)
        service = BrowserlessService(config=config or live_settings, transport=transport)
        return service, transport

    return _make


@pytest.fixture
def make_step_data():
    return step_data
