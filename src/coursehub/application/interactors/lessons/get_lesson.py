from dataclasses import dataclass

from coursehub.application.access_policy import ensure_course_visible
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.interactors.lessons.get_course_lessons import (
    LessonView,
    caller_enrollment,
    lesson_view,
)
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import LessonId
from coursehub.domain.course import Course
from coursehub.domain.lesson import Lesson


@dataclass(frozen=True, slots=True, kw_only=True)
class GetLessonRequest:
    lesson_id: LessonId


@dataclass(slots=True, frozen=True)
class GetLessonInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: GetLessonRequest) -> LessonView:
        lesson = await self.storage.get_lesson(request_data.lesson_id)
        if lesson is None:
            raise EntityNotFoundError(Lesson, "id", request_data.lesson_id)

        course = await self.storage.get_course(lesson.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", lesson.course_id)

        user = await self.identity_provider.get_optional_user()
        ensure_course_visible(user, course)
        enrollment = await caller_enrollment(self.storage, user, course)
        return lesson_view(user, lesson, course, enrollment)
