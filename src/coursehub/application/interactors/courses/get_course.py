from dataclasses import dataclass

from coursehub.application.access_policy import ensure_course_visible
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.course import Course


@dataclass(frozen=True, slots=True, kw_only=True)
class GetCourseRequest:
    course_id: CourseId


@dataclass(slots=True, frozen=True)
class GetCourseInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: GetCourseRequest) -> Course:
        course = await self.storage.get_course(request_data.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", request_data.course_id)

        if not course.is_published:
            user = await self.identity_provider.get_optional_user()
            ensure_course_visible(user, course)

        return course
