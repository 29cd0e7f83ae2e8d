from dataclasses import dataclass

from coursehub.application.access_policy import (
    can_view_lesson_content,
    ensure_course_visible,
)
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.course import Course
from coursehub.domain.enrollment import Enrollment
from coursehub.domain.lesson import Lesson
from coursehub.domain.user import User


@dataclass(frozen=True, slots=True)
class LessonView:
    """Lesson as seen by a caller, locked hides content and video"""

    lesson: Lesson
    locked: bool


async def caller_enrollment(
    storage: Storage,
    user: User | None,
    course: Course,
) -> Enrollment | None:
    if user is None:
        return None
    return await storage.get_enrollment(user.id, course.id)  # type: ignore[arg-type]


def lesson_view(
    user: User | None,
    lesson: Lesson,
    course: Course,
    enrollment: Enrollment | None,
) -> LessonView:
    return LessonView(
        lesson=lesson,
        locked=not can_view_lesson_content(user, lesson, course, enrollment),
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class GetCourseLessonsRequest:
    course_id: CourseId


@dataclass(slots=True, frozen=True)
class GetCourseLessonsInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(
        self,
        request_data: GetCourseLessonsRequest,
    ) -> list[LessonView]:
        course = await self.storage.get_course(request_data.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", request_data.course_id)

        user = await self.identity_provider.get_optional_user()
        ensure_course_visible(user, course)
        enrollment = await caller_enrollment(self.storage, user, course)
        lessons = await self.storage.get_lessons_for_course(course.id)  # type: ignore[arg-type]

        return [
            lesson_view(user, lesson, course, enrollment)
            for lesson in lessons
        ]
