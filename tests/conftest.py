"""
Pytest configuration and fixtures for the checkout tests.

Settings are read from the environment, so every test starts from a clean
environment and a cleared settings cache. The gateway is replaced by an
httpx.MockTransport; no request ever leaves the process.
"""

from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from cardcheckout.config import get_settings
from cardcheckout.services.gateway import MercadoPagoGateway
from cardcheckout.services.payments import CardPaymentService

TEST_ACCESS_TOKEN = "TEST-1234567890-access"
TEST_PUBLIC_KEY = "TEST-public-key-abcdef"

SETTINGS_ENV = (
    "MERCADOPAGO_ACCESS_TOKEN",
    "MERCADOPAGO_PUBLIC_KEY",
    "NEXT_PUBLIC_MERCADOPAGO_PUBLIC_KEY",
    "MERCADOPAGO_API_URL",
    "DEBUG",
)


class GatewayStub:
    """Records gateway requests and answers with a canned response."""

    def __init__(
        self,
        status_code: int = 201,
        json: Any = None,
        content: bytes | None = None,
        exc: Exception | None = None,
    ):
        self.status_code = status_code
        self.json = json
        self.content = content
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate tests from the host environment and from each other."""
    monkeypatch.chdir(tmp_path)  # no stray .env file
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def configure(monkeypatch):
    """Set environment variables and reload settings."""
    def _configure(**env: str) -> None:
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        get_settings.cache_clear()
    return _configure


@pytest.fixture
def make_client(configure):
    """
    Build a TestClient for a fresh application.

    When a GatewayStub is given, the payment service talks to it instead
    of MercadoPago.
    """
    def _make(stub: GatewayStub | None = None, **env: str) -> TestClient:
        configure(**env)

        from cardcheckout.api.routes.payments import get_payment_service
        from cardcheckout.main import create_app

        app = create_app()

        if stub is not None:
            async def stubbed_payment_service():
                settings = get_settings()
                gateway = MercadoPagoGateway.from_settings(settings, transport=stub.transport)
                try:
                    yield CardPaymentService(gateway, settings.success_redirect_path)
                finally:
                    await gateway.aclose()

            app.dependency_overrides[get_payment_service] = stubbed_payment_service

        return TestClient(app)

    return _make


@pytest.fixture
def payment_request() -> dict[str, Any]:
    """A request body as the checkout page posts it."""
    return {
        "token": "ff8080814c11e237014c1ff593b57b4d",
        "issuer_id": "25",
        "payment_method_id": "visa",
        "transaction_amount": 100,
        "installments": 1,
        "description": "Produto Demo",
        "payer": {
            "email": "comprador@example.com",
            "identification": {"type": "CPF", "number": "12345678909"},
        },
    }
