"""
Pydantic schemas for API request/response validation.

The payment request mirrors what the checkout page assembles from the
hosted card form plus its own contact fields.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Request Schemas
# =============================================================================

class PayerIdentification(BaseModel):
    """Payer document (CPF/CNPJ)."""
    type: str | None = Field(default=None, description="Document type, e.g. CPF")
    number: str | None = Field(default=None, description="Document digits")


class Payer(BaseModel):
    """Payer details forwarded to the gateway."""
    email: str = Field(..., min_length=3)
    identification: PayerIdentification | None = None
    first_name: str | None = None
    last_name: str | None = None


class CardPaymentRequest(BaseModel):
    """Tokenized card payment posted by the checkout page."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., min_length=1, description="Single-use card token from the SDK")
    issuer_id: int | str | None = Field(default=None)
    payment_method_id: str | None = Field(default=None, description="Card brand, e.g. visa")
    transaction_amount: float = Field(..., gt=0)
    installments: int | None = Field(default=None, ge=1)
    description: str | None = None
    payer: Payer | None = None
    additional_info: dict[str, Any] | None = None
    order_id: str | None = Field(default=None, alias="orderId")


# =============================================================================
# Response Schemas
# =============================================================================

class PaymentSuccessResponse(BaseModel):
    """Approved payment."""
    success: Literal[True] = True
    redirect_url: str


class PaymentErrorResponse(BaseModel):
    """Declined payment or processing failure."""
    success: Literal[False] = False
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    gateway_configured: bool
    public_key_configured: bool
