"""
Hosted card form behaviour.

The MercadoPago SDK renders card number, expiry and security code inside
provider iframes and hands back an opaque form handle. This module
declares the part of that handle we use and the checkout form's state
machine around it: one submission at a time, a toast per outcome, and a
fresh card token after every failed attempt (tokens are single-use).

``static/checkout.js`` runs the same flow in the browser against the real
SDK, reading the field ids, options and messages defined here from the
rendered page.
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Literal, Protocol

from cardcheckout.domain.models import CheckoutFormState
from cardcheckout.domain.translation import DEFAULT_ERROR_MESSAGE, translate_error_message

logger = logging.getLogger(__name__)


FORM_ID = "form-checkout"

# Field ids registered with the SDK, with their placeholders
CARD_FORM_FIELDS: dict[str, dict[str, str]] = {
    "cardNumber": {"id": "form-checkout__cardNumber", "placeholder": "Número do cartão"},
    "expirationDate": {"id": "form-checkout__expirationDate", "placeholder": "MM/YY"},
    "securityCode": {"id": "form-checkout__securityCode", "placeholder": "Código de segurança"},
    "cardholderName": {"id": "form-checkout__cardholderName", "placeholder": "Titular do cartão"},
    "issuer": {"id": "form-checkout__issuer", "placeholder": "Banco emissor"},
    "installments": {"id": "form-checkout__installments", "placeholder": "Parcelas"},
    "identificationType": {"id": "form-checkout__identificationType", "placeholder": "Tipo de documento"},
}

MESSAGES = {
    "loading": "Carregando sistema de pagamento...",
    "processing": "Processando...",
    "approved": "Pagamento aprovado! Redirecionando...",
    "not_ready": "Ocorreu um erro, por favor, tente novamente.",
    "communication": "Erro de comunicação. Tente novamente.",
    "card_data": "Ocorreu um erro, verifique os dados do cartão.",
    "default_error": DEFAULT_ERROR_MESSAGE,
}


class HostedCardForm(Protocol):
    """The slice of the SDK's cardForm handle this checkout relies on."""

    def get_card_form_data(self) -> dict[str, Any]:
        """Tokenized card fields: token, paymentMethodId, issuerId, amount, installments, identificationType."""
        ...

    def unmount(self) -> None:
        ...


# Called with the options from build_card_form_options(); mounts the iframes.
CardFormFactory = Callable[[dict[str, Any]], HostedCardForm]


def build_card_form_options(amount: Decimal | int | str) -> dict[str, Any]:
    """Options passed to ``mp.cardForm()`` (callbacks are attached by the caller)."""
    return {
        "amount": str(amount),
        "iframe": True,
        "form": {"id": FORM_ID, **CARD_FORM_FIELDS},
    }


def to_number(value: Any) -> int | float | None:
    """
    Coerce an SDK form value the way the page script's ``Number()`` does.

    Blank strings become 0; missing or unparsable values become None
    (``NaN`` serializes to null). Whole numbers come back as int.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return int(number) if number.is_integer() else number


@dataclass
class Toast:
    """A notification shown to the payer."""
    kind: Literal["success", "error"]
    message: str


@dataclass
class FormEffect:
    """What the page should do after a form event."""
    toast: Toast | None = None
    payment: dict[str, Any] | None = None
    redirect_url: str | None = None


class CardFormController:
    """
    State of the checkout form for one page view.

    Example:
        controller = CardFormController(amount=Decimal("100"), description="Produto Demo")
        controller.mount(mp_card_form)

        effect = controller.submit(form_state)
        if effect.payment:
            response = post("/api/mercadopago/process-card-payment", effect.payment)
            effect = controller.on_response(response)
        if controller.needs_new_token:
            controller.mount(mp_card_form)
    """

    def __init__(self, amount: Decimal | int | str, description: str):
        self.amount = amount
        self.description = description

        self.is_processing_payment = False
        self.needs_new_token = False
        self.card_form: HostedCardForm | None = None

    @property
    def options(self) -> dict[str, Any]:
        return build_card_form_options(self.amount)

    def mount(self, factory: CardFormFactory) -> HostedCardForm:
        """
        Register the hosted fields, replacing any previous form.

        Remounting after a failed attempt is what gives the next
        submission a new card token.
        """
        if self.needs_new_token:
            self.needs_new_token = False

        self.unmount()
        self.card_form = factory(self.options)
        return self.card_form

    def unmount(self) -> None:
        if self.card_form is not None:
            self.card_form.unmount()
            self.card_form = None

    def on_form_mounted(self, error: Any = None) -> None:
        if error:
            logger.warning(f"Form Mounted handling error: {error}")

    def on_error(self, error: Any) -> FormEffect:
        """SDK validation or tokenization error."""
        logger.error(f"Error from MercadoPago: {error}")
        return FormEffect(toast=Toast("error", MESSAGES["card_data"]))

    def submit(self, form_state: CheckoutFormState) -> FormEffect:
        """
        Collect the payment request for the current card form.

        Returns an effect carrying either the JSON body to POST or an error
        toast. A submission while another is in flight does nothing.
        """
        if self.is_processing_payment:
            return FormEffect()

        if self.card_form is None:
            return FormEffect(toast=Toast("error", MESSAGES["not_ready"]))

        data = self.card_form.get_card_form_data()

        payment = {
            "token": data.get("token"),
            "issuer_id": data.get("issuerId"),
            "payment_method_id": data.get("paymentMethodId"),
            "transaction_amount": to_number(data.get("amount")),
            "installments": to_number(data.get("installments")),
            "description": self.description,
            "payer": {
                "email": form_state.email,
                "identification": {
                    "type": data.get("identificationType"),
                    "number": form_state.raw_identification_number,
                },
            },
        }

        self.is_processing_payment = True
        return FormEffect(payment=payment)

    def on_response(self, data: dict[str, Any]) -> FormEffect:
        """Handle the JSON answer of the payment endpoint."""
        self.is_processing_payment = False

        if data.get("success"):
            return FormEffect(
                toast=Toast("success", MESSAGES["approved"]),
                redirect_url=data.get("redirect_url"),
            )

        self.needs_new_token = True
        message = translate_error_message(data.get("error") or DEFAULT_ERROR_MESSAGE)
        return FormEffect(toast=Toast("error", message))

    def on_network_error(self) -> FormEffect:
        """The payment request never produced a readable answer."""
        self.is_processing_payment = False
        self.needs_new_token = True
        return FormEffect(toast=Toast("error", MESSAGES["communication"]))
