"""
FastAPI application entry point.

This is the main application that ties together all components:
- Checkout page and confirmation page
- Card payment API forwarding tokens to MercadoPago
- CORS configuration and static assets
- Error handling and logging
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from cardcheckout import __version__
from cardcheckout.api.routes import health, pages, payments
from cardcheckout.config import get_settings
from cardcheckout.services.gateway import PaymentGatewayError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs the configuration the checkout will run with. Missing credentials
    are reported but do not stop the server.
    """
    settings = get_settings()

    logger.info(f"Starting Card Checkout v{__version__}")
    logger.info(f"MercadoPago API: {settings.mercadopago_api_url}")
    logger.info(f"Debug mode: {settings.debug}")

    if not settings.gateway_configured:
        logger.warning("MERCADOPAGO_ACCESS_TOKEN is not set: payments will fail")
    if not settings.public_key_configured:
        logger.warning("MERCADOPAGO_PUBLIC_KEY is not set: checkout page shows a configuration error")

    yield  # Application runs here

    logger.info("Shutting down Card Checkout")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance ready to serve requests.
    """
    settings = get_settings()

    app = FastAPI(
        title="Card Checkout",
        description=(
            "Demo checkout page with MercadoPago hosted card fields.\n\n"
            "The browser tokenizes the card; this service forwards the token "
            "to the gateway and reports the payment status."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # Register routers
    app.include_router(pages.router)
    app.include_router(health.router)
    app.include_router(payments.router)

    @app.exception_handler(PaymentGatewayError)
    async def payment_gateway_error_handler(request: Request, exc: PaymentGatewayError):
        """Gateway failures outside the payment handler, e.g. missing access token."""
        logger.error(f"Error processing payment: {exc.message}")
        return payments.payment_error(exc.message, 500)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Report invalid payment requests in the checkout's error shape."""
        errors = exc.errors()
        if errors and errors[0].get("type") == "json_invalid":
            message = "Invalid JSON body"
        elif errors:
            first = errors[0]
            location = ".".join(
                str(part) for part in first.get("loc", ())
                if part != "body" and not isinstance(part, int)
            )
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        else:
            message = "Invalid request"

        logger.warning(f"Invalid request to {request.url.path}: {message}")
        return payments.payment_error(message, 422)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all exception handler for unhandled errors."""
        logger.exception(f"Unhandled error: {exc}")

        # Don't expose internal errors in production
        if settings.debug:
            detail = str(exc)
        else:
            detail = payments.INTERNAL_ERROR_MESSAGE

        return payments.payment_error(detail, 500)

    return app


# Create the application instance
app = create_app()


# Development server entry point
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cardcheckout.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
