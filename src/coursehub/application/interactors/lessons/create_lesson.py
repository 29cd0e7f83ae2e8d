import logging
from dataclasses import dataclass

from coursehub.application.access_policy import ensure_course_owner
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.course import Course
from coursehub.domain.lesson import Lesson

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateLessonRequest:
    course_id: CourseId
    title: str
    content: str
    description: str = ""
    video_url: str = ""
    duration: int = 0
    # Appended after the last lesson when omitted
    order: int | None = None
    is_preview: bool = False


@dataclass(slots=True, frozen=True)
class CreateLessonInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: CreateLessonRequest) -> Lesson:
        user = await self.identity_provider.get_current_user()

        course = await self.storage.get_course(request_data.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", request_data.course_id)
        ensure_course_owner(user, course)

        lesson = await self.storage.create_lesson(
            Lesson(
                title=request_data.title,
                content=request_data.content,
                description=request_data.description,
                video_url=request_data.video_url,
                duration=request_data.duration,
                order=request_data.order,
                is_preview=request_data.is_preview,
                course_id=request_data.course_id,
            ),
        )
        logger.info(
            "Lesson %s added to course %s at position %s",
            lesson.id,
            course.id,
            lesson.order,
        )
        return lesson
