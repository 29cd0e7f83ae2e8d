from dataclasses import dataclass

from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.course import Course
from coursehub.domain.review import Review


@dataclass(frozen=True, slots=True, kw_only=True)
class GetCourseReviewsRequest:
    course_id: CourseId


@dataclass(slots=True, frozen=True)
class GetCourseReviewsInteractor:
    storage: Storage

    async def __call__(self, request_data: GetCourseReviewsRequest) -> list[Review]:
        if await self.storage.get_course(request_data.course_id) is None:
            raise EntityNotFoundError(Course, "id", request_data.course_id)
        return await self.storage.get_reviews_by_course(request_data.course_id)
