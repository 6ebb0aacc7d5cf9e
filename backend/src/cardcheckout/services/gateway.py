"""
MercadoPago REST client for payment creation.

Only the "create payment" call is used: the browser has already tokenized
the card, so the server forwards the token with the payer details and
reads back the payment status.

API reference:
https://www.mercadopago.com.br/developers/en/reference/payments/_payments/post
"""

import logging
from typing import Any
from uuid import uuid4

import httpx

from cardcheckout.config import Settings

logger = logging.getLogger(__name__)


DEFAULT_API_URL = "https://api.mercadopago.com"
PAYMENTS_PATH = "/v1/payments"


class PaymentGatewayError(Exception):
    """Base exception for payment gateway errors."""

    def __init__(
        self,
        message: str,
        http_status: int | None = None,
        code: str | None = None,
        causes: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.code = code
        self.causes = causes or []


class GatewayConfigurationError(PaymentGatewayError):
    """Access token is not configured."""

    def __init__(self, message: str = "MercadoPago access token is not configured."):
        super().__init__(message)


class GatewayRequestError(PaymentGatewayError):
    """Gateway rejected the request (HTTP 4xx/5xx or unreadable body)."""
    pass


class GatewayUnavailableError(PaymentGatewayError):
    """Gateway could not be reached or timed out."""
    pass


def mask_secret(value: str | None) -> str:
    """Show only the last four characters of a credential."""
    if not value:
        return "<not set>"
    return f"...{value[-4:]}" if len(value) > 4 else "****"


class MercadoPagoGateway:
    """
    Thin async client over the MercadoPago payments API.

    Example:
        async with MercadoPagoGateway(access_token="TEST-...") as gateway:
            payment = await gateway.create_payment({
                "transaction_amount": 100,
                "token": card_token,
                "installments": 1,
                "payment_method_id": "visa",
                "payer": {"email": "buyer@example.com"},
            })
            print(payment["status"], payment["status_detail"])
    """

    def __init__(
        self,
        access_token: str | None,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not access_token:
            raise GatewayConfigurationError()

        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
        )

        logger.debug(f"MercadoPago gateway ready at {self.base_url} (token {mask_secret(access_token)})")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "MercadoPagoGateway":
        """Build a gateway from application settings."""
        return cls(
            access_token=settings.mercadopago_access_token,
            base_url=settings.mercadopago_api_url,
            timeout=settings.gateway_timeout,
            transport=transport,
        )

    async def create_payment(
        self,
        body: dict[str, Any],
        idempotency_key: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a payment.

        Args:
            body: Payment payload (transaction_amount, token, payer, ...)
            idempotency_key: Key sent as X-Idempotency-Key. A random one is
                generated when omitted, matching the official SDKs.

        Returns:
            The payment resource as returned by the gateway.

        Raises:
            GatewayRequestError: Gateway answered with an error status.
            GatewayUnavailableError: Network failure or timeout.
        """
        headers = {"X-Idempotency-Key": idempotency_key or uuid4().hex}

        try:
            response = await self._client.post(PAYMENTS_PATH, json=body, headers=headers)
        except httpx.TimeoutException as e:
            raise GatewayUnavailableError(f"Payment gateway timed out: {e}") from e
        except httpx.HTTPError as e:
            raise GatewayUnavailableError(f"Payment gateway unreachable: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise GatewayRequestError(
                f"Invalid response from payment gateway (HTTP {response.status_code})",
                http_status=response.status_code,
            ) from e

        if response.is_error:
            if not isinstance(data, dict):
                data = {}
            message = data.get("message") or data.get("error") or f"Payment gateway error (HTTP {response.status_code})"
            logger.warning(f"Gateway rejected payment request: HTTP {response.status_code} {message}")
            raise GatewayRequestError(
                message,
                http_status=response.status_code,
                code=data.get("error"),
                causes=data.get("cause") or [],
            )

        return data

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "MercadoPagoGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
