import logging

from coursehub.application.exceptions.base import (
    AuthorizationError,
    EntityNotFoundError,
)
from coursehub.domain.course import Course
from coursehub.domain.enrollment import Enrollment
from coursehub.domain.lesson import Lesson
from coursehub.domain.review import Review
from coursehub.domain.user import User, UserRole

logger = logging.getLogger(__name__)


def ensure_can_author(user: User) -> None:
    """Only instructors and admins create or manage courses and lessons"""
    if not user.can_author_courses:
        logger.info("Role %s rejected for authoring: %s", user.role, user.id)
        raise AuthorizationError(
            f"User role {user.role.value} is not authorized to access this route",
        )


def is_course_owner(user: User | None, course: Course) -> bool:
    if user is None:
        return False
    return user.role == UserRole.ADMIN or course.instructor_id == user.id


def ensure_course_visible(user: User | None, course: Course) -> None:
    """Drafts look missing to everyone but their instructor and admins"""
    if course.is_published or is_course_owner(user, course):
        return
    logger.info("Draft course hidden: %s", course.id)
    raise EntityNotFoundError(Course, "id", course.id)


def ensure_course_owner(user: User, course: Course) -> None:
    ensure_can_author(user)
    if not is_course_owner(user, course):
        logger.info(
            "User %s is not the instructor of course %s",
            user.id,
            course.id,
        )
        raise AuthorizationError("Not authorized to modify this course")


def ensure_review_author(user: User, review: Review) -> None:
    if review.user_id != user.id:
        raise AuthorizationError("You can only update your own reviews")


def ensure_can_delete_review(user: User, review: Review, course: Course) -> None:
    if review.user_id == user.id or is_course_owner(user, course):
        return
    raise AuthorizationError("You can only delete your own reviews")


def ensure_enrollment_owner(user: User, enrollment: Enrollment) -> None:
    if enrollment.user_id != user.id:
        raise AuthorizationError("Not authorized to access this enrollment")


def can_view_lesson_content(
    user: User | None,
    lesson: Lesson,
    course: Course,
    enrollment: Enrollment | None,
) -> bool:
    if lesson.is_preview:
        return True
    if is_course_owner(user, course):
        return True
    return enrollment is not None and enrollment.has_access
