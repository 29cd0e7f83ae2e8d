import logging
from dataclasses import dataclass

from coursehub.application.access_policy import ensure_enrollment_owner
from coursehub.application.exceptions.base import (
    AuthorizationError,
    EntityNotFoundError,
)
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import EnrollmentId
from coursehub.domain.enrollment import Enrollment

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateProgressRequest:
    enrollment_id: EnrollmentId
    progress: int


@dataclass(slots=True, frozen=True)
class UpdateProgressInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: UpdateProgressRequest) -> Enrollment:
        user = await self.identity_provider.get_current_user()

        enrollment = await self.storage.get_enrollment_by_id(
            request_data.enrollment_id,
        )
        if enrollment is None:
            raise EntityNotFoundError(
                Enrollment,
                "id",
                request_data.enrollment_id,
            )
        ensure_enrollment_owner(user, enrollment)
        if not enrollment.has_access:
            raise AuthorizationError("Payment for this course is not completed")

        updated = await self.storage.update_enrollment_progress(
            request_data.enrollment_id,
            request_data.progress,
        )
        logger.info(
            "Enrollment %s progress: %s",
            updated.id,
            updated.progress,
        )
        return updated
