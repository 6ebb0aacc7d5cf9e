"""
Services package - Gateway integration and checkout flow.

Includes the MercadoPago client, card payment processing and the hosted
card form controller.
"""

from .card_form import CardFormController
from .gateway import MercadoPagoGateway, PaymentGatewayError
from .payments import CardPaymentService, PaymentOutcome

__all__ = [
    "CardFormController",
    "CardPaymentService",
    "MercadoPagoGateway",
    "PaymentGatewayError",
    "PaymentOutcome",
]
