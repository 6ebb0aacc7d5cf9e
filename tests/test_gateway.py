"""
Tests for the MercadoPago client and the card payment service.
"""

import json

import httpx
import pytest

from cardcheckout.api.schemas import CardPaymentRequest
from cardcheckout.config import Settings
from cardcheckout.services.gateway import (
    GatewayConfigurationError,
    GatewayRequestError,
    GatewayUnavailableError,
    MercadoPagoGateway,
    mask_secret,
)
from cardcheckout.services.payments import (
    NOT_APPROVED_MESSAGE,
    CardPaymentService,
    build_payment_body,
)

from conftest import TEST_ACCESS_TOKEN, GatewayStub


def make_gateway(stub: GatewayStub) -> MercadoPagoGateway:
    return MercadoPagoGateway(
        access_token=TEST_ACCESS_TOKEN,
        base_url="https://api.mercadopago.test",
        transport=stub.transport,
    )


class TestMercadoPagoGateway:

    def test_requires_access_token(self):
        with pytest.raises(GatewayConfigurationError) as exc_info:
            MercadoPagoGateway(access_token=None)
        assert exc_info.value.message == "MercadoPago access token is not configured."

        with pytest.raises(GatewayConfigurationError):
            MercadoPagoGateway.from_settings(Settings(mercadopago_access_token=""))

    @pytest.mark.asyncio
    async def test_create_payment_request(self):
        stub = GatewayStub(json={"id": 1, "status": "approved"})

        async with make_gateway(stub) as gateway:
            payment = await gateway.create_payment({"token": "tok", "transaction_amount": 100})

        assert payment == {"id": 1, "status": "approved"}

        request = stub.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.mercadopago.test/v1/payments"
        assert request.headers["Authorization"] == f"Bearer {TEST_ACCESS_TOKEN}"
        assert request.headers["X-Idempotency-Key"]
        assert json.loads(request.content) == {"token": "tok", "transaction_amount": 100}

    @pytest.mark.asyncio
    async def test_idempotency_key(self):
        stub = GatewayStub(json={"id": 1})

        async with make_gateway(stub) as gateway:
            await gateway.create_payment({}, idempotency_key="order-42")
            await gateway.create_payment({})
            await gateway.create_payment({})

        keys = [r.headers["X-Idempotency-Key"] for r in stub.requests]
        assert keys[0] == "order-42"
        assert keys[1] != keys[2]

    @pytest.mark.asyncio
    async def test_error_response(self):
        stub = GatewayStub(
            status_code=400,
            json={
                "message": "invalid parameter token",
                "error": "bad_request",
                "status": 400,
                "cause": [{"code": 3003, "description": "Invalid card_token_id"}],
            },
        )

        async with make_gateway(stub) as gateway:
            with pytest.raises(GatewayRequestError) as exc_info:
                await gateway.create_payment({"token": "expired"})

        error = exc_info.value
        assert error.message == "invalid parameter token"
        assert error.http_status == 400
        assert error.code == "bad_request"
        assert error.causes[0]["code"] == 3003

    @pytest.mark.asyncio
    async def test_error_response_without_message(self):
        stub = GatewayStub(status_code=502, json=["unexpected"])

        async with make_gateway(stub) as gateway:
            with pytest.raises(GatewayRequestError) as exc_info:
                await gateway.create_payment({})

        assert exc_info.value.message == "Payment gateway error (HTTP 502)"

    @pytest.mark.asyncio
    async def test_non_json_response(self):
        stub = GatewayStub(status_code=503, content=b"<html>Service Unavailable</html>")

        async with make_gateway(stub) as gateway:
            with pytest.raises(GatewayRequestError) as exc_info:
                await gateway.create_payment({})

        assert exc_info.value.http_status == 503

    @pytest.mark.asyncio
    async def test_unreachable(self):
        stub = GatewayStub(exc=httpx.ConnectError("connection refused"))

        async with make_gateway(stub) as gateway:
            with pytest.raises(GatewayUnavailableError):
                await gateway.create_payment({})

    @pytest.mark.asyncio
    async def test_timeout(self):
        stub = GatewayStub(exc=httpx.ReadTimeout("read timed out"))

        async with make_gateway(stub) as gateway:
            with pytest.raises(GatewayUnavailableError) as exc_info:
                await gateway.create_payment({})

        assert "timed out" in exc_info.value.message

    def test_mask_secret(self):
        assert mask_secret(None) == "<not set>"
        assert mask_secret("abc") == "****"
        assert mask_secret(TEST_ACCESS_TOKEN) == "...cess"


class TestBuildPaymentBody:

    def test_reshapes_request(self, payment_request):
        payment_request["orderId"] = "ord_1"
        payment_request["additional_info"] = {"items": [{"id": "demo", "quantity": 1}]}

        body = build_payment_body(CardPaymentRequest.model_validate(payment_request))

        assert body == {
            "transaction_amount": 100.0,
            "token": "ff8080814c11e237014c1ff593b57b4d",
            "description": "Produto Demo",
            "installments": 1,
            "payment_method_id": "visa",
            "issuer_id": "25",
            "payer": {
                "email": "comprador@example.com",
                "identification": {"type": "CPF", "number": "12345678909"},
            },
            "additional_info": {"items": [{"id": "demo", "quantity": 1}]},
            "metadata": {"order_id": "ord_1"},
        }

    def test_omits_unset_fields(self):
        body = build_payment_body(CardPaymentRequest(token="tok", transaction_amount=10))

        assert body == {"transaction_amount": 10.0, "token": "tok"}

    def test_masked_document_is_sent_as_digits(self, payment_request):
        payment_request["payer"]["identification"]["number"] = "123.456.789-09"

        body = build_payment_body(CardPaymentRequest.model_validate(payment_request))

        assert body["payer"]["identification"]["number"] == "12345678909"

    def test_document_type_inferred_when_missing(self, payment_request):
        payment_request["payer"]["identification"] = {"number": "12.345.678/0001-95"}

        body = build_payment_body(CardPaymentRequest.model_validate(payment_request))

        assert body["payer"]["identification"] == {"number": "12345678000195", "type": "CNPJ"}


class TestCardPaymentService:

    @pytest.mark.asyncio
    async def test_approved(self, payment_request):
        stub = GatewayStub(json={"id": 123, "status": "approved", "status_detail": "accredited"})

        async with make_gateway(stub) as gateway:
            service = CardPaymentService(gateway, success_redirect_path="/payment-success")
            outcome = await service.process(CardPaymentRequest.model_validate(payment_request))

        assert outcome.success is True
        assert outcome.redirect_url == "/payment-success"
        assert outcome.error is None
        assert outcome.payment_id == 123
        assert outcome.status_detail == "accredited"

    @pytest.mark.asyncio
    async def test_rejected(self, payment_request):
        stub = GatewayStub(json={"id": 124, "status": "rejected", "status_detail": "cc_rejected_high_risk"})

        async with make_gateway(stub) as gateway:
            outcome = await CardPaymentService(gateway).process(
                CardPaymentRequest.model_validate(payment_request)
            )

        assert outcome.success is False
        assert outcome.redirect_url is None
        assert outcome.error == "cc_rejected_high_risk"
        assert outcome.status == "rejected"

    @pytest.mark.asyncio
    async def test_not_approved_without_detail(self, payment_request):
        stub = GatewayStub(json={"id": 125, "status": "in_process"})

        async with make_gateway(stub) as gateway:
            outcome = await CardPaymentService(gateway).process(
                CardPaymentRequest.model_validate(payment_request)
            )

        assert outcome.success is False
        assert outcome.error == NOT_APPROVED_MESSAGE
