"""
Translation of gateway rejection codes into customer-facing messages.

MercadoPago reports declines through ``status_detail`` codes such as
``cc_rejected_insufficient_amount``. The checkout page shows a Portuguese
message for the codes below and the raw text for anything else.
"""

DEFAULT_ERROR_MESSAGE = "Erro no processamento do pagamento"

# Order matters: the first code contained in the message wins.
ERROR_TRANSLATIONS: dict[str, str] = {
    "cc_rejected_insufficient_amount": "Saldo insuficiente no cartão",
    "cc_rejected_bad_filled_card_number": "Número do cartão inválido",
    "cc_rejected_bad_filled_date": "Data de vencimento inválida",
    "cc_rejected_bad_filled_security_code": "Código de segurança inválido",
    "cc_rejected_call_for_authorize": "Operação negada pelo banco emissor",
    "cc_rejected_card_disabled": "Cartão desabilitado",
    "cc_rejected_duplicated_payment": "Pagamento duplicado",
    "cc_rejected_high_risk": "Pagamento recusado por segurança",
    "cc_rejected_card_error": "Erro no cartão",
    "cc_rejected_blacklist": "Cartão não permitido",
    "cc_rejected_invalid_installments": "Número de parcelas inválido",
}


def translate_error_message(message: str | None) -> str:
    """
    Translate a gateway error into the message shown to the customer.

    Matching is by substring so that codes embedded in longer messages
    are still recognised.

    Args:
        message: ``status_detail`` or error text returned by the server.

    Returns:
        The translated message, the original message when no code matches,
        or DEFAULT_ERROR_MESSAGE when there is no message at all.
    """
    if not message:
        return DEFAULT_ERROR_MESSAGE

    for code, translation in ERROR_TRANSLATIONS.items():
        if code in message:
            return translation

    return message
