"""
Browser-side form state for a single checkout attempt.

Only the fields the merchant page owns are kept here. Card number, expiry
and security code live inside the provider's iframes and never reach
this code.
"""

from dataclasses import dataclass

from .identification import format_identification_number


@dataclass
class CheckoutFormState:
    """
    Contact and identification fields typed by the payer.

    Created when the form mounts and discarded on navigation. Field names
    passed to ``update`` are the input ``name`` attributes of the page.
    """
    cardholder_name: str = ""
    email: str = ""
    identification_number: str = ""
    raw_identification_number: str = ""

    _INPUT_FIELDS = {
        "cardholderName": "cardholder_name",
        "email": "email",
        "identificationNumber": "identification_number",
    }

    def update(self, name: str, value: str) -> None:
        """
        Apply a keystroke to the named input.

        Raises:
            KeyError: If the page has no input with that name.
        """
        attribute = self._INPUT_FIELDS[name]

        if attribute == "identification_number":
            number = format_identification_number(value)
            self.identification_number = number.formatted
            self.raw_identification_number = number.raw
            return

        setattr(self, attribute, value)
