"""
Checkout pages.

Renders the card form page and the post-payment confirmation. All card
data entry happens inside the provider's iframes; these templates only
carry configuration for ``static/checkout.js``.
"""

import logging
from decimal import Decimal
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from cardcheckout.config import get_settings
from cardcheckout.domain.identification import MAX_FORMATTED_LENGTH
from cardcheckout.domain.translation import DEFAULT_ERROR_MESSAGE, ERROR_TRANSLATIONS
from cardcheckout.services.card_form import CARD_FORM_FIELDS, FORM_ID, MESSAGES, build_card_form_options

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

templates_dir = Path(__file__).resolve().parents[2] / "templates"
templates = Jinja2Templates(directory=str(templates_dir))

PAYMENT_ENDPOINT = "/api/mercadopago/process-card-payment"


def format_brl(amount: Decimal) -> str:
    """Format an amount as Brazilian reais, e.g. ``R$ 1.234,56``."""
    formatted = f"{amount:,.2f}"
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {formatted}"


@router.get("/", response_class=HTMLResponse)
async def checkout_page(request: Request):
    """
    Render the checkout page.

    Without a public key the SDK cannot be loaded, so the page shows a
    configuration error instead of the form.
    """
    settings = get_settings()

    if not settings.public_key_configured:
        logger.warning("MercadoPago public key is not configured, rendering configuration error")

    checkout_config = {
        "publicKey": settings.mercadopago_public_key,
        "sdkLoadTimeoutMs": settings.sdk_load_timeout_ms,
        "endpoint": PAYMENT_ENDPOINT,
        "description": settings.product_name,
        "cardForm": build_card_form_options(settings.product_amount),
        "translations": ERROR_TRANSLATIONS,
        "defaultError": DEFAULT_ERROR_MESSAGE,
        "messages": MESSAGES,
    }

    return templates.TemplateResponse(
        request,
        "checkout.html",
        {
            "settings": settings,
            "price": format_brl(settings.product_amount),
            "fields": CARD_FORM_FIELDS,
            "form_id": FORM_ID,
            "messages": MESSAGES,
            "identification_maxlength": MAX_FORMATTED_LENGTH,
            "checkout_config": checkout_config,
        },
    )


@router.get("/payment-success", response_class=HTMLResponse)
async def payment_success_page(request: Request):
    """Confirmation page the browser is redirected to after approval."""
    settings = get_settings()

    return templates.TemplateResponse(
        request,
        "success.html",
        {
            "settings": settings,
            "price": format_brl(settings.product_amount),
        },
    )
