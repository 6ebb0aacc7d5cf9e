"""
Card payment endpoint.

Receives the tokenized card from the checkout page and creates the
payment with MercadoPago.
"""

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from cardcheckout.api.schemas import (
    CardPaymentRequest,
    PaymentErrorResponse,
    PaymentSuccessResponse,
)
from cardcheckout.config import Settings, get_settings
from cardcheckout.services.gateway import MercadoPagoGateway, PaymentGatewayError
from cardcheckout.services.payments import CardPaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mercadopago", tags=["payments"])


INTERNAL_ERROR_MESSAGE = "Internal Server Error"


async def get_payment_service(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[CardPaymentService]:
    """
    Provide a payment service bound to a fresh gateway client.

    Raises GatewayConfigurationError when the access token is missing;
    the application turns it into a 500 payment error response.
    """
    gateway = MercadoPagoGateway.from_settings(settings)
    try:
        yield CardPaymentService(
            gateway=gateway,
            success_redirect_path=settings.success_redirect_path,
        )
    finally:
        await gateway.aclose()


def payment_error(message: str, status_code: int) -> JSONResponse:
    """Build a ``{success: false, error}`` response."""
    return JSONResponse(
        status_code=status_code,
        content=PaymentErrorResponse(error=message).model_dump(),
    )


@router.post(
    "/process-card-payment",
    response_model=PaymentSuccessResponse,
    responses={
        400: {"model": PaymentErrorResponse, "description": "Payment not approved"},
        422: {"model": PaymentErrorResponse, "description": "Invalid payment request"},
        500: {"model": PaymentErrorResponse, "description": "Configuration or gateway failure"},
    },
)
async def process_card_payment(
    request: CardPaymentRequest,
    service: CardPaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
):
    """
    Create a card payment from a token produced by the hosted fields.

    - **approved**: `{success: true, redirect_url}`
    - **any other status**: HTTP 400 `{success: false, error: status_detail}`
    - **failure**: HTTP 500 `{success: false, error}`
    """
    try:
        outcome = await service.process(request)

    except PaymentGatewayError as e:
        logger.error(f"Error processing payment: {e.message}")
        return payment_error(e.message, status.HTTP_500_INTERNAL_SERVER_ERROR)

    except Exception as e:
        logger.exception(f"Error processing payment: {e}")
        detail = str(e) if settings.debug and str(e) else INTERNAL_ERROR_MESSAGE
        return payment_error(detail, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if outcome.success:
        return PaymentSuccessResponse(redirect_url=outcome.redirect_url)

    return payment_error(outcome.error, status.HTTP_400_BAD_REQUEST)
