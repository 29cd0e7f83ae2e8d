from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Protocol

FAILED_STATUSES = frozenset({"canceled", "payment_failed"})


@dataclass(frozen=True, slots=True)
class PaymentIntent:
    id: str
    status: str
    amount: int
    currency: str
    client_secret: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    last_error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"

    @property
    def failed(self) -> bool:
        if self.status in FAILED_STATUSES:
            return True
        # Card declined: back to requires_payment_method with an error
        return (
            self.status == "requires_payment_method"
            and self.last_error is not None
        )


class PaymentGateway(Protocol):
    @abstractmethod
    async def create_payment_intent(
        self,
        amount: float,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        """amount in major currency units"""
        raise NotImplementedError

    @abstractmethod
    async def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        raise NotImplementedError
