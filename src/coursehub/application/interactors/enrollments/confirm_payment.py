import logging
from dataclasses import dataclass

from coursehub.application.access_policy import ensure_enrollment_owner
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.payments import PaymentGateway, PaymentIntent
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId, UserId
from coursehub.domain.enrollment import Enrollment, PaymentStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class ConfirmPaymentRequest:
    payment_intent_id: str


@dataclass(slots=True, frozen=True)
class ConfirmPaymentInteractor:
    """Sync an enrollment with the provider's view of its payment intent"""

    storage: Storage
    identity_provider: IdentityProvider
    payment_gateway: PaymentGateway

    async def __call__(self, request_data: ConfirmPaymentRequest) -> Enrollment:
        user = await self.identity_provider.get_current_user()

        enrollment = await self.storage.get_enrollment_by_payment_ref(
            request_data.payment_intent_id,
        )
        if enrollment is not None:
            ensure_enrollment_owner(user, enrollment)

        intent = await self.payment_gateway.retrieve_payment_intent(
            request_data.payment_intent_id,
        )
        superseded = enrollment is None
        if superseded:
            # The enrollment was moved to a newer intent
            enrollment = await self._find_by_metadata(intent)
            ensure_enrollment_owner(user, enrollment)

        if enrollment.has_access:
            return enrollment
        if intent.succeeded:
            status = PaymentStatus.COMPLETED
        elif intent.failed and not superseded:
            status = PaymentStatus.FAILED
        else:
            logger.info(
                "Payment intent %s still %s",
                intent.id,
                intent.status,
            )
            return enrollment

        return await self.storage.update_enrollment_payment_status(
            enrollment.id,  # type: ignore[arg-type]
            intent.id,
            status,
        )

    async def _find_by_metadata(self, intent: PaymentIntent) -> Enrollment:
        user_id = intent.metadata.get("user_id")
        course_id = intent.metadata.get("course_id")
        enrollment = None
        if user_id and course_id:
            enrollment = await self.storage.get_enrollment(
                UserId(user_id),
                CourseId(course_id),
            )
        if enrollment is None:
            raise EntityNotFoundError(Enrollment, "payment_ref", intent.id)

        logger.info(
            "Payment intent %s matched enrollment %s by metadata",
            intent.id,
            enrollment.id,
        )
        return enrollment
