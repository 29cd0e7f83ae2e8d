import pytest

from coursehub.application.access_policy import (
    can_view_lesson_content,
    ensure_can_author,
    ensure_can_delete_review,
    ensure_course_owner,
    ensure_course_visible,
    ensure_enrollment_owner,
    ensure_review_author,
    is_course_owner,
)
from coursehub.application.exceptions.base import (
    AuthorizationError,
    EntityNotFoundError,
)
from coursehub.domain.common.identifiers import CourseId, UserId
from coursehub.domain.course import Course, CourseCategory, CourseLevel
from coursehub.domain.enrollment import Enrollment, PaymentStatus
from coursehub.domain.lesson import Lesson
from coursehub.domain.review import Review
from coursehub.domain.user import User, UserRole

COURSE_ID = CourseId("c1")


def user(user_id: str, role: UserRole = UserRole.STUDENT) -> User:
    return User(
        id=UserId(user_id),
        email=f"{user_id}@example.com",
        password="x",
        role=role,
    )


@pytest.fixture
def instructor():
    return user("tutor", UserRole.INSTRUCTOR)


@pytest.fixture
def course(instructor):
    return Course(
        id=COURSE_ID,
        title="Course",
        description="Description",
        category=CourseCategory.OTHER,
        level=CourseLevel.BEGINNER,
        instructor_id=instructor.id,
    )


@pytest.fixture
def lesson():
    return Lesson(title="Lesson", content="Body", course_id=COURSE_ID, order=1)


def enrollment(user_id: str, status: PaymentStatus) -> Enrollment:
    return Enrollment(
        user_id=UserId(user_id),
        course_id=COURSE_ID,
        payment_status=status,
    )


# ============= Course ownership =============


def test_student_cannot_author():
    with pytest.raises(AuthorizationError):
        ensure_can_author(user("s1"))


@pytest.mark.parametrize("role", [UserRole.INSTRUCTOR, UserRole.ADMIN])
def test_instructor_and_admin_can_author(role):
    ensure_can_author(user("u1", role))


def test_owner_and_admin_own_course(course, instructor):
    assert is_course_owner(instructor, course)
    assert is_course_owner(user("root", UserRole.ADMIN), course)
    assert not is_course_owner(user("other", UserRole.INSTRUCTOR), course)
    assert not is_course_owner(None, course)


def test_other_instructor_cannot_modify(course):
    with pytest.raises(AuthorizationError):
        ensure_course_owner(user("other", UserRole.INSTRUCTOR), course)


def test_draft_visible_to_owner_and_admin(course, instructor):
    course.is_published = False

    ensure_course_visible(instructor, course)
    ensure_course_visible(user("root", UserRole.ADMIN), course)
    for caller in (None, user("s1"), user("other", UserRole.INSTRUCTOR)):
        with pytest.raises(EntityNotFoundError):
            ensure_course_visible(caller, course)


def test_published_course_visible_to_everyone(course):
    course.is_published = True

    ensure_course_visible(None, course)


# ============= Reviews and enrollments =============


def test_review_author_only():
    review = Review(user_id=UserId("s1"), course_id=COURSE_ID, rating=4, text="Good")

    ensure_review_author(user("s1"), review)
    with pytest.raises(AuthorizationError):
        ensure_review_author(user("s2"), review)


def test_course_instructor_may_delete_review(course, instructor):
    review = Review(user_id=UserId("s1"), course_id=COURSE_ID, rating=1, text="Bad")

    ensure_can_delete_review(user("s1"), review, course)
    ensure_can_delete_review(instructor, review, course)
    ensure_can_delete_review(user("root", UserRole.ADMIN), review, course)
    with pytest.raises(AuthorizationError):
        ensure_can_delete_review(user("s2"), review, course)


def test_enrollment_owner_only():
    owned = enrollment("s1", PaymentStatus.COMPLETED)

    ensure_enrollment_owner(user("s1"), owned)
    with pytest.raises(AuthorizationError):
        ensure_enrollment_owner(user("s2"), owned)


# ============= Lesson content =============


def test_lesson_locked_for_anonymous(lesson, course):
    assert not can_view_lesson_content(None, lesson, course, None)


def test_preview_lesson_open_to_everyone(lesson, course):
    lesson.is_preview = True

    assert can_view_lesson_content(None, lesson, course, None)


def test_paid_enrollment_unlocks(lesson, course):
    student = user("s1")

    assert can_view_lesson_content(
        student,
        lesson,
        course,
        enrollment("s1", PaymentStatus.COMPLETED),
    )
    assert not can_view_lesson_content(
        student,
        lesson,
        course,
        enrollment("s1", PaymentStatus.PENDING),
    )


def test_owner_sees_own_lessons(lesson, course, instructor):
    assert can_view_lesson_content(instructor, lesson, course, None)
