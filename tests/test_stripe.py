from urllib.parse import parse_qs

import httpx
import pytest

from coursehub.application.exceptions.base import PaymentGatewayError
from coursehub.infrastructure.payments.stripe import StripePaymentGateway

INTENT = {
    "id": "pi_123",
    "status": "requires_payment_method",
    "amount": 4999,
    "currency": "gbp",
    "client_secret": "pi_123_secret_abc",
    "metadata": {"course_id": "c1", "user_id": "u1"},
    "last_payment_error": None,
}


def gateway(handler, secret_key: str | None = "sk_test") -> StripePaymentGateway:
    client = httpx.AsyncClient(
        base_url="https://api.stripe.test",
        transport=httpx.MockTransport(handler),
    )
    return StripePaymentGateway(client=client, secret_key=secret_key)


@pytest.mark.asyncio
async def test_create_payment_intent_sends_minor_units():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=INTENT)

    intent = await gateway(handler).create_payment_intent(
        amount=49.99,
        currency="gbp",
        metadata={"course_id": "c1", "user_id": "u1"},
    )

    form = parse_qs(requests[0].content.decode())
    assert requests[0].url.path == "/v1/payment_intents"
    assert requests[0].headers["Authorization"].startswith("Basic ")
    assert form["amount"] == ["4999"]
    assert form["metadata[course_id]"] == ["c1"]
    assert intent.client_secret == "pi_123_secret_abc"
    assert not intent.succeeded
    assert not intent.failed


@pytest.mark.asyncio
async def test_retrieve_declined_intent_is_failed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={**INTENT, "last_payment_error": {"message": "Card declined"}},
        )

    intent = await gateway(handler).retrieve_payment_intent("pi_123")

    assert intent.failed
    assert intent.last_error == "Card declined"


@pytest.mark.asyncio
async def test_provider_error_message_is_kept():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            404,
            json={"error": {"message": "No such payment_intent: 'pi_x'"}},
        )

    with pytest.raises(PaymentGatewayError) as exc_info:
        await gateway(handler).retrieve_payment_intent("pi_x")

    assert "No such payment_intent" in exc_info.value.reason


@pytest.mark.asyncio
async def test_unreachable_provider():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PaymentGatewayError):
        await gateway(handler).retrieve_payment_intent("pi_123")


@pytest.mark.asyncio
async def test_missing_secret_key():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(PaymentGatewayError):
        await gateway(handler, secret_key=None).retrieve_payment_intent("pi_123")
