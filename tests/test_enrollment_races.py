import asyncio
from dataclasses import dataclass

import pytest

from coursehub.application.interactors.enrollments.confirm_payment import (
    ConfirmPaymentInteractor,
    ConfirmPaymentRequest,
)
from coursehub.application.interactors.enrollments.enroll import (
    EnrollInteractor,
    EnrollRequest,
)
from coursehub.application.payments import PaymentGateway, PaymentIntent
from coursehub.bootstrap.configs import PaymentConfig
from coursehub.domain.enrollment import PaymentStatus
from coursehub.domain.user import UserRole


@dataclass
class SwitchingGateway(PaymentGateway):
    """Yields to the event loop before every intent is created"""

    inner: PaymentGateway

    async def create_payment_intent(
        self,
        amount: float,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        await asyncio.sleep(0)
        return await self.inner.create_payment_intent(amount, currency, metadata)

    async def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        return await self.inner.retrieve_payment_intent(intent_id)


@pytest.fixture
def enroll(storage, identity, payment_gateway):
    return EnrollInteractor(
        storage=storage,
        identity_provider=identity,
        payment_gateway=SwitchingGateway(payment_gateway),
        payment_config=PaymentConfig(currency="usd"),
    )


@pytest.fixture
def confirm_payment(storage, identity, payment_gateway):
    return ConfirmPaymentInteractor(
        storage=storage,
        identity_provider=identity,
        payment_gateway=payment_gateway,
    )


def intent_for(payment_gateway, client_secret: str) -> PaymentIntent:
    return next(
        intent
        for intent in payment_gateway.created
        if intent.client_secret == client_secret
    )


# ============= Double-submitted paid enrollment =============


@pytest.mark.asyncio
@pytest.mark.parametrize("paid_response", [0, 1])
async def test_double_enroll_either_intent_grants_access(
    storage,
    identity,
    enroll,
    confirm_payment,
    payment_gateway,
    make_user,
    make_course,
    paid_response,
):
    """Paying the intent from either response completes the one enrollment"""
    course = await make_course(
        await make_user(role=UserRole.INSTRUCTOR),
        price=30,
    )
    identity.user = await make_user()
    request = EnrollRequest(course_id=course.id)

    results = await asyncio.gather(enroll(request), enroll(request))

    assert results[0].enrollment.id == results[1].enrollment.id
    assert len(await storage.get_enrollments_by_course(course.id)) == 1

    intent = intent_for(payment_gateway, results[paid_response].client_secret)
    payment_gateway.settle(intent.id)
    confirmed = await confirm_payment(
        ConfirmPaymentRequest(payment_intent_id=intent.id),
    )

    assert confirmed.id == results[0].enrollment.id
    assert confirmed.payment_status == PaymentStatus.COMPLETED
    stored = await storage.get_enrollment(identity.user.id, course.id)
    assert stored.has_access


@pytest.mark.asyncio
async def test_enrollment_follows_newest_intent(
    storage,
    identity,
    enroll,
    payment_gateway,
    make_user,
    make_course,
):
    course = await make_course(
        await make_user(role=UserRole.INSTRUCTOR),
        price=30,
    )
    identity.user = await make_user()
    request = EnrollRequest(course_id=course.id)

    await asyncio.gather(enroll(request), enroll(request))

    stored = await storage.get_enrollment(identity.user.id, course.id)
    assert stored.payment_status == PaymentStatus.PENDING
    assert stored.payment_ref in {intent.id for intent in payment_gateway.created}


@pytest.mark.asyncio
async def test_failed_stale_intent_keeps_newer_pending(
    storage,
    identity,
    enroll,
    confirm_payment,
    payment_gateway,
    make_user,
    make_course,
):
    course = await make_course(
        await make_user(role=UserRole.INSTRUCTOR),
        price=30,
    )
    identity.user = await make_user()
    first = await enroll(EnrollRequest(course_id=course.id))
    stale_ref = first.enrollment.payment_ref
    second = await enroll(EnrollRequest(course_id=course.id))

    payment_gateway.settle(stale_ref, status="canceled")
    result = await confirm_payment(
        ConfirmPaymentRequest(payment_intent_id=stale_ref),
    )

    assert result.payment_status == PaymentStatus.PENDING
    assert result.payment_ref == second.enrollment.payment_ref
