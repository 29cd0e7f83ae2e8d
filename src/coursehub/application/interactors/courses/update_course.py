import logging
from dataclasses import dataclass

from coursehub.application.access_policy import ensure_course_owner
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.course import (
    Course,
    CourseCategory,
    CourseLevel,
    CourseUpdate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateCourseRequest:
    course_id: CourseId
    title: str | None = None
    description: str | None = None
    category: CourseCategory | None = None
    level: CourseLevel | None = None
    price: float | None = None
    thumbnail: str | None = None
    preview_video: str | None = None
    requirements: list[str] | None = None
    objectives: list[str] | None = None
    is_published: bool | None = None


@dataclass(slots=True, frozen=True)
class UpdateCourseInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: UpdateCourseRequest) -> Course:
        user = await self.identity_provider.get_current_user()
        logger.info("Updating course: %s", request_data.course_id)

        course = await self.storage.get_course(request_data.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", request_data.course_id)
        ensure_course_owner(user, course)

        return await self.storage.update_course(
            request_data.course_id,
            CourseUpdate(
                title=request_data.title,
                description=request_data.description,
                category=request_data.category,
                level=request_data.level,
                price=request_data.price,
                thumbnail=request_data.thumbnail,
                preview_video=request_data.preview_video,
                requirements=request_data.requirements,
                objectives=request_data.objectives,
                is_published=request_data.is_published,
            ),
        )
