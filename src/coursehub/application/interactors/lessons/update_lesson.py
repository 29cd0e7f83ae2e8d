import logging
from dataclasses import dataclass

from coursehub.application.access_policy import ensure_course_owner
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import LessonId
from coursehub.domain.course import Course
from coursehub.domain.lesson import Lesson, LessonUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateLessonRequest:
    lesson_id: LessonId
    title: str | None = None
    description: str | None = None
    content: str | None = None
    video_url: str | None = None
    duration: int | None = None
    order: int | None = None
    is_preview: bool | None = None


@dataclass(slots=True, frozen=True)
class UpdateLessonInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: UpdateLessonRequest) -> Lesson:
        user = await self.identity_provider.get_current_user()
        logger.info("Updating lesson: %s", request_data.lesson_id)

        lesson = await self.storage.get_lesson(request_data.lesson_id)
        if lesson is None:
            raise EntityNotFoundError(Lesson, "id", request_data.lesson_id)
        course = await self.storage.get_course(lesson.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", lesson.course_id)
        ensure_course_owner(user, course)

        return await self.storage.update_lesson(
            request_data.lesson_id,
            LessonUpdate(
                title=request_data.title,
                description=request_data.description,
                content=request_data.content,
                video_url=request_data.video_url,
                duration=request_data.duration,
                order=request_data.order,
                is_preview=request_data.is_preview,
            ),
        )
