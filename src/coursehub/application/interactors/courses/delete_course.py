import logging
from dataclasses import dataclass

from coursehub.application.access_policy import ensure_course_owner
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.course import Course

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class DeleteCourseRequest:
    course_id: CourseId


@dataclass(slots=True, frozen=True)
class DeleteCourseInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: DeleteCourseRequest) -> None:
        user = await self.identity_provider.get_current_user()

        course = await self.storage.get_course(request_data.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", request_data.course_id)
        ensure_course_owner(user, course)

        await self.storage.delete_course(request_data.course_id)
        logger.info("Course %s deleted by %s", request_data.course_id, user.id)
