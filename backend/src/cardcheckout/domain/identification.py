"""
Brazilian tax-id (CPF/CNPJ) formatting for the payer document field.

The checkout form keeps two versions of the document number: the masked
string shown in the input and the bare digits sent to the gateway.

Formatting is applied only once a complete number has been typed:
- up to 11 digits: CPF mask ``ddd.ddd.ddd-dd``
- more than 11 digits: CNPJ mask ``dd.ddd.ddd/dddd-dd``
Partial numbers are shown as plain digits.
"""

import re
from dataclasses import dataclass

CPF_LENGTH = 11
CNPJ_LENGTH = 14

# maxlength of the document input (a masked CNPJ)
MAX_FORMATTED_LENGTH = 18

_NON_DIGITS = re.compile(r"\D")
_CPF_PATTERN = re.compile(r"(\d{3})(\d{3})(\d{3})(\d{2})")
_CNPJ_PATTERN = re.compile(r"(\d{2})(\d{3})(\d{3})(\d{4})(\d{2})")


@dataclass(frozen=True)
class IdentificationNumber:
    """A document number as displayed and as sent to the gateway."""
    formatted: str
    raw: str


def strip_non_digits(value: str | None) -> str:
    """Remove every non-digit character."""
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def format_identification_number(value: str | None) -> IdentificationNumber:
    """
    Mask a CPF or CNPJ as the user types it.

    Args:
        value: Whatever is currently in the document input.

    Returns:
        IdentificationNumber with the masked display string and the raw digits.

    Example:
        >>> format_identification_number("12345678909")
        IdentificationNumber(formatted='123.456.789-09', raw='12345678909')
    """
    raw = strip_non_digits(value)

    if len(raw) <= CPF_LENGTH:
        formatted = _CPF_PATTERN.sub(r"\1.\2.\3-\4", raw, count=1)
    else:
        formatted = _CNPJ_PATTERN.sub(r"\1.\2.\3/\4-\5", raw, count=1)

    return IdentificationNumber(formatted=formatted, raw=raw)


def identification_type_for(raw: str) -> str:
    """Guess the document type from the digit count."""
    return "CPF" if len(raw) <= CPF_LENGTH else "CNPJ"
