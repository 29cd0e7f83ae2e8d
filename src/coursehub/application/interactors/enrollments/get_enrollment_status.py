from dataclasses import dataclass

from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.enrollment import Enrollment


@dataclass(frozen=True, slots=True, kw_only=True)
class GetEnrollmentStatusRequest:
    course_id: CourseId


@dataclass(slots=True, frozen=True)
class GetEnrollmentStatusInteractor:
    """Caller's enrollment in a course, None when not enrolled"""

    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(
        self,
        request_data: GetEnrollmentStatusRequest,
    ) -> Enrollment | None:
        user = await self.identity_provider.get_current_user()
        return await self.storage.get_enrollment(
            user.id,  # type: ignore[arg-type]
            request_data.course_id,
        )
