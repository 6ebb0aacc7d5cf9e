"""
Card payment processing.

Reshapes the checkout page's request into MercadoPago's payment payload,
creates the payment and maps the resulting status to the page's
success/redirect or error answer.
"""

import logging
from dataclasses import dataclass
from typing import Any

from cardcheckout.api.schemas import CardPaymentRequest
from cardcheckout.domain.identification import identification_type_for, strip_non_digits

from .gateway import MercadoPagoGateway

logger = logging.getLogger(__name__)


APPROVED_STATUS = "approved"
NOT_APPROVED_MESSAGE = "Payment was not approved."


@dataclass
class PaymentOutcome:
    """Result of a card payment attempt."""
    success: bool
    redirect_url: str | None = None
    error: str | None = None
    payment_id: int | str | None = None
    status: str | None = None
    status_detail: str | None = None


def build_payment_body(request: CardPaymentRequest) -> dict[str, Any]:
    """
    Build the gateway payload from a checkout request.

    Unset fields are left out rather than sent as null. The payer document
    number is reduced to digits in case a masked value slipped through, and
    its type is inferred from the digit count when the form sent none.
    """
    payer = None
    if request.payer is not None:
        payer = request.payer.model_dump(exclude_none=True)
        identification = payer.get("identification")
        if identification and identification.get("number"):
            identification["number"] = strip_non_digits(identification["number"])
            identification.setdefault("type", identification_type_for(identification["number"]))

    body: dict[str, Any] = {
        "transaction_amount": request.transaction_amount,
        "token": request.token,
        "description": request.description,
        "installments": request.installments,
        "payment_method_id": request.payment_method_id,
        "issuer_id": request.issuer_id,
        "payer": payer,
        "additional_info": request.additional_info,
    }
    if request.order_id:
        body["metadata"] = {"order_id": request.order_id}

    return {key: value for key, value in body.items() if value is not None}


class CardPaymentService:
    """
    Creates card payments through the gateway.

    Stateless: one call per request, nothing is stored. Gateway errors
    propagate to the caller.
    """

    def __init__(
        self,
        gateway: MercadoPagoGateway,
        success_redirect_path: str = "/payment-success",
    ):
        self.gateway = gateway
        self.success_redirect_path = success_redirect_path

    async def process(self, request: CardPaymentRequest) -> PaymentOutcome:
        """Create the payment and interpret its status."""
        body = build_payment_body(request)

        logger.info(
            f"Creating payment: amount={request.transaction_amount} "
            f"method={request.payment_method_id} installments={request.installments}"
        )

        payment = await self.gateway.create_payment(body)

        status = payment.get("status")
        status_detail = payment.get("status_detail")
        payment_id = payment.get("id")

        logger.info(f"Payment {payment_id}: status={status} detail={status_detail}")

        if status == APPROVED_STATUS:
            return PaymentOutcome(
                success=True,
                redirect_url=self.success_redirect_path,
                payment_id=payment_id,
                status=status,
                status_detail=status_detail,
            )

        logger.warning(f"Payment {payment_id} not approved: {status} ({status_detail})")
        return PaymentOutcome(
            success=False,
            error=status_detail or NOT_APPROVED_MESSAGE,
            payment_id=payment_id,
            status=status,
            status_detail=status_detail,
        )
