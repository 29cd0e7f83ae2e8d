import logging
from dataclasses import dataclass

from coursehub.application.access_policy import ensure_course_owner
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import LessonId
from coursehub.domain.course import Course
from coursehub.domain.lesson import Lesson

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class DeleteLessonRequest:
    lesson_id: LessonId


@dataclass(slots=True, frozen=True)
class DeleteLessonInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: DeleteLessonRequest) -> None:
        user = await self.identity_provider.get_current_user()

        lesson = await self.storage.get_lesson(request_data.lesson_id)
        if lesson is None:
            raise EntityNotFoundError(Lesson, "id", request_data.lesson_id)
        course = await self.storage.get_course(lesson.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", lesson.course_id)
        ensure_course_owner(user, course)

        await self.storage.delete_lesson(request_data.lesson_id)
        logger.info("Lesson %s deleted by %s", request_data.lesson_id, user.id)
