import logging
from dataclasses import dataclass

from coursehub.application.access_policy import ensure_course_visible
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.payments import PaymentGateway
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.bootstrap.configs import PaymentConfig
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.course import Course
from coursehub.domain.enrollment import Enrollment, PaymentStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class EnrollRequest:
    course_id: CourseId


@dataclass(frozen=True, slots=True)
class EnrollResult:
    enrollment: Enrollment
    # Present while a card payment still has to be made
    client_secret: str | None = None


@dataclass(slots=True, frozen=True)
class EnrollInteractor:
    """
    Enroll the caller in a course

    Free courses are granted immediately. Paid courses get a pending
    enrollment tied to a new payment intent; repeating the call reuses
    the enrollment and issues a fresh intent until payment completes.
    """

    storage: Storage
    identity_provider: IdentityProvider
    payment_gateway: PaymentGateway
    payment_config: PaymentConfig

    async def __call__(self, request_data: EnrollRequest) -> EnrollResult:
        user = await self.identity_provider.get_current_user()

        course = await self.storage.get_course(request_data.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", request_data.course_id)
        ensure_course_visible(user, course)

        existing = await self.storage.get_enrollment(user.id, course.id)  # type: ignore[arg-type]
        if existing is not None and existing.has_access:
            logger.info("User %s already enrolled in %s", user.id, course.id)
            return EnrollResult(enrollment=existing)

        if course.is_free:
            granted = await self._grant(existing, user.id, course)  # type: ignore[arg-type]
            return EnrollResult(enrollment=granted)

        intent = await self.payment_gateway.create_payment_intent(
            amount=course.price,
            currency=self.payment_config.currency,
            metadata={"course_id": str(course.id), "user_id": str(user.id)},
        )

        if existing is None:
            # Returns the stored record when a concurrent request won
            enrollment = await self.storage.create_enrollment(
                Enrollment(
                    user_id=user.id,  # type: ignore[arg-type]
                    course_id=course.id,  # type: ignore[arg-type]
                    payment_status=PaymentStatus.PENDING,
                    payment_ref=intent.id,
                ),
            )
        else:
            enrollment = existing

        if enrollment.has_access:
            return EnrollResult(enrollment=enrollment)
        if enrollment.payment_ref != intent.id:
            # The enrollment follows the newest intent handed to the client
            enrollment = await self.storage.update_enrollment_payment_status(
                enrollment.id,  # type: ignore[arg-type]
                intent.id,
                PaymentStatus.PENDING,
            )

        logger.info(
            "Payment intent %s issued for enrollment %s",
            intent.id,
            enrollment.id,
        )
        return EnrollResult(
            enrollment=enrollment,
            client_secret=intent.client_secret,
        )

    async def _grant(
        self,
        existing: Enrollment | None,
        user_id: str,
        course: Course,
    ) -> Enrollment:
        if existing is not None:
            return await self.storage.update_enrollment_payment_status(
                existing.id,  # type: ignore[arg-type]
                None,
                PaymentStatus.COMPLETED,
            )

        logger.info("Free enrollment of %s in %s", user_id, course.id)
        return await self.storage.create_enrollment(
            Enrollment(
                user_id=user_id,  # type: ignore[arg-type]
                course_id=course.id,  # type: ignore[arg-type]
                payment_status=PaymentStatus.COMPLETED,
            ),
        )
