import logging
from dataclasses import dataclass
from typing import Any

import httpx

from coursehub.application.exceptions.base import PaymentGatewayError
from coursehub.application.payments import PaymentGateway, PaymentIntent

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StripePaymentGateway(PaymentGateway):
    """Payment intents over the Stripe REST API"""

    client: httpx.AsyncClient
    secret_key: str | None

    async def create_payment_intent(
        self,
        amount: float,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        form: dict[str, Any] = {
            "amount": round(amount * 100),
            "currency": currency,
            "automatic_payment_methods[enabled]": "true",
        }
        for key, value in metadata.items():
            form[f"metadata[{key}]"] = value

        data = await self._request("POST", "/v1/payment_intents", data=form)
        intent = self._to_intent(data)
        logger.info("Payment intent created: %s", intent.id)
        return intent

    async def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        data = await self._request("GET", f"/v1/payment_intents/{intent_id}")
        return self._to_intent(data)

    async def _request(
        self,
        method: str,
        url: str,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self.secret_key:
            raise PaymentGatewayError("payment provider is not configured")

        try:
            response = await self.client.request(
                method,
                url,
                data=data,
                auth=(self.secret_key, ""),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _error_message(e.response)
            logger.warning(
                "Stripe %s %s failed with %s: %s",
                method,
                url,
                e.response.status_code,
                detail,
            )
            raise PaymentGatewayError(detail or "request rejected") from e
        except httpx.HTTPError as e:
            logger.warning("Stripe %s %s unreachable: %s", method, url, e)
            raise PaymentGatewayError("provider unreachable") from e

        return response.json()

    @staticmethod
    def _to_intent(data: dict[str, Any]) -> PaymentIntent:
        last_error = data.get("last_payment_error") or {}
        return PaymentIntent(
            id=data["id"],
            status=data["status"],
            amount=data["amount"],
            currency=data["currency"],
            client_secret=data.get("client_secret"),
            metadata=dict(data.get("metadata") or {}),
            last_error=last_error.get("message"),
        )


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return ""
    return str(payload.get("error", {}).get("message", ""))
