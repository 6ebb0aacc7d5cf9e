"""
Application configuration loaded from environment variables.

Credentials are optional at startup: a missing access token fails each
payment request, a missing public key degrades the checkout page.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with validation.

    All settings are loaded from environment variables with the same name.
    Use .env file for local development.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # MercadoPago credentials
    mercadopago_access_token: str | None = Field(
        default=None,
        description="Server-side access token used to create payments",
    )
    mercadopago_public_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "mercadopago_public_key",
            "next_public_mercadopago_public_key",
        ),
        description="Browser-exposed public key for the JS SDK (optional)",
    )

    # Gateway endpoints
    mercadopago_api_url: str = Field(
        default="https://api.mercadopago.com",
        description="Base URL of the MercadoPago REST API",
    )
    mercadopago_sdk_url: str = Field(
        default="https://sdk.mercadopago.com/js/v2",
        description="URL of the MercadoPago JS SDK loaded by the checkout page",
    )
    gateway_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for gateway HTTP calls",
    )

    # Demo product
    product_name: str = Field(default="Produto Demo")
    product_amount: Decimal = Field(default=Decimal("100"), gt=0)
    max_installments: int = Field(default=12, ge=1)

    # Checkout flow
    success_redirect_path: str = Field(
        default="/payment-success",
        description="Where the browser goes after an approved payment",
    )
    sdk_load_timeout_ms: int = Field(
        default=2000,
        gt=0,
        description="Reload the page if the SDK client is not ready after this delay",
    )

    # Server
    debug: bool = Field(
        default=False,
        description="Enable debug mode with detailed error messages",
    )

    @property
    def gateway_configured(self) -> bool:
        """True when payments can be forwarded to the gateway."""
        return bool(self.mercadopago_access_token)

    @property
    def public_key_configured(self) -> bool:
        """True when the checkout page can mount the hosted fields."""
        return bool(self.mercadopago_public_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once at startup and cached for subsequent calls.
    """
    return Settings()
