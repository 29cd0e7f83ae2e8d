import itertools
import logging
from collections.abc import Iterator
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import TypeVar

from coursehub.application.exceptions.base import (
    ConflictError,
    EntityNotFoundError,
)
from coursehub.application.security import PasswordHasher
from coursehub.application.storage import Storage
from coursehub.domain.aggregates import (
    move_lesson,
    place_lesson,
    rating_summary,
    renumber_lessons,
    sort_lessons,
    total_duration,
)
from coursehub.domain.common.identifiers import (
    CourseId,
    EnrollmentId,
    LessonId,
    ReviewId,
    UserId,
)
from coursehub.domain.common.validators import apply_patch, utc_now
from coursehub.domain.course import Course, CourseUpdate
from coursehub.domain.enrollment import (
    CourseSummary,
    EnrolledCourse,
    Enrollment,
    InstructorSummary,
    PaymentStatus,
    check_payment_transition,
)
from coursehub.domain.lesson import Lesson, LessonUpdate
from coursehub.domain.review import Review, ReviewUpdate
from coursehub.domain.user import (
    User,
    UserSettingsUpdate,
    UserUpdate,
    merge_settings,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _newest_first(items: list[T], attribute: str) -> list[T]:
    # Later inserts win ties, same as sorting by (timestamp, _id) desc
    return sorted(
        reversed(items),
        key=lambda item: getattr(item, attribute),
        reverse=True,
    )


@dataclass(slots=True)
class MemoryStorage(Storage):
    """
    Process-local storage used when MongoDB is unreachable.

    Entities are kept in insertion-ordered dicts keyed by id, ids come from
    per-entity counters starting at 1. Copies are returned so callers can't
    change stored state without going through the storage methods.
    """

    password_hasher: PasswordHasher
    name = "memory"

    _users: dict[str, User] = field(default_factory=dict, init=False)
    _courses: dict[str, Course] = field(default_factory=dict, init=False)
    _lessons: dict[str, Lesson] = field(default_factory=dict, init=False)
    _enrollments: dict[str, Enrollment] = field(
        default_factory=dict,
        init=False,
    )
    _reviews: dict[str, Review] = field(default_factory=dict, init=False)
    _counters: dict[str, Iterator[int]] = field(
        default_factory=dict,
        init=False,
    )

    def _next_id(self, kind: str) -> str:
        counter = self._counters.setdefault(kind, itertools.count(1))
        return str(next(counter))

    def _require_user(self, user_id: UserId) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise EntityNotFoundError(User, "id", user_id)
        return user

    def _require_course(self, course_id: CourseId) -> Course:
        course = self._courses.get(course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", course_id)
        return course

    def _course_lessons(self, course_id: CourseId) -> list[Lesson]:
        return sort_lessons(
            lesson
            for lesson in self._lessons.values()
            if lesson.course_id == course_id
        )

    def _touch_course(self, course_id: CourseId, **counters: float) -> None:
        course = self._courses.get(course_id)
        if course is None:
            return
        self._courses[course_id] = replace(
            course,
            **counters,
            updated_at=utc_now(),
        )

    # Users

    async def get_user(self, user_id: UserId) -> User | None:
        user = self._users.get(user_id)
        return deepcopy(user) if user else None

    async def get_user_by_email(self, email: str) -> User | None:
        normalized = email.strip().lower()
        for user in self._users.values():
            if user.email == normalized:
                return deepcopy(user)
        return None

    def _ensure_email_free(self, email: str, owner: UserId | None) -> None:
        for user in self._users.values():
            if user.email == email and user.id != owner:
                raise ConflictError(User, "email already in use")

    def _hashed(self, password: str) -> str:
        if self.password_hasher.is_hashed(password):
            return password
        return self.password_hasher.hash(password)

    async def create_user(self, user: User) -> User:
        self._ensure_email_free(user.email, owner=None)
        stored = replace(
            deepcopy(user),
            id=UserId(self._next_id("users")),
            password=self._hashed(user.password),
        )
        self._users[stored.id] = stored  # type: ignore[index]
        logger.info("User added with ID: %s", stored.id)
        return deepcopy(stored)

    async def update_user(self, user_id: UserId, update: UserUpdate) -> User:
        user = self._require_user(user_id)
        updated = apply_patch(user, update)
        if update.email is not None:
            self._ensure_email_free(updated.email, owner=user_id)
        if update.password is not None:
            updated.password = self._hashed(update.password)

        self._users[user_id] = updated
        logger.info("User updated: %s", user_id)
        return deepcopy(updated)

    async def update_user_settings(
        self,
        user_id: UserId,
        update: UserSettingsUpdate,
    ) -> User:
        user = self._require_user(user_id)
        updated = replace(
            user,
            settings=merge_settings(user.settings, update),
            updated_at=utc_now(),
        )
        self._users[user_id] = updated
        logger.info("User settings updated: %s", user_id)
        return deepcopy(updated)

    async def delete_user(self, user_id: UserId) -> None:
        self._require_user(user_id)

        for enrollment in list(self._enrollments.values()):
            if enrollment.user_id == user_id:
                del self._enrollments[enrollment.id]  # type: ignore[arg-type]
                course = self._courses.get(enrollment.course_id)
                if course is not None:
                    self._touch_course(
                        enrollment.course_id,
                        total_students=max(course.total_students - 1, 0),
                    )

        for course in list(self._courses.values()):
            if course.instructor_id == user_id:
                self._delete_course_tree(course.id)  # type: ignore[arg-type]

        reviewed_courses = set()
        for review in list(self._reviews.values()):
            if review.user_id == user_id:
                del self._reviews[review.id]  # type: ignore[arg-type]
                reviewed_courses.add(review.course_id)

        for course_id in reviewed_courses:
            await self.update_course_rating(course_id)

        del self._users[user_id]
        logger.info("User deleted: %s", user_id)

    # Courses

    async def create_course(self, course: Course) -> Course:
        self._require_user(course.instructor_id)
        stored = replace(deepcopy(course), id=CourseId(self._next_id("courses")))
        self._courses[stored.id] = stored  # type: ignore[index]
        logger.info("Course added with ID: %s", stored.id)
        return deepcopy(stored)

    async def get_course(self, course_id: CourseId) -> Course | None:
        course = self._courses.get(course_id)
        return deepcopy(course) if course else None

    async def get_courses(self, published_only: bool = False) -> list[Course]:
        courses = [
            course
            for course in self._courses.values()
            if course.is_published or not published_only
        ]
        return deepcopy(_newest_first(courses, "created_at"))

    async def get_courses_by_instructor(
        self,
        instructor_id: UserId,
    ) -> list[Course]:
        courses = [
            course
            for course in self._courses.values()
            if course.instructor_id == instructor_id
        ]
        return deepcopy(_newest_first(courses, "created_at"))

    async def update_course(
        self,
        course_id: CourseId,
        update: CourseUpdate,
    ) -> Course:
        course = self._require_course(course_id)
        updated = apply_patch(course, update)
        self._courses[course_id] = updated
        logger.info("Course updated: %s", course_id)
        return deepcopy(updated)

    def _delete_course_tree(self, course_id: CourseId) -> None:
        for store in (self._lessons, self._enrollments, self._reviews):
            for entity_id in [
                key for key, item in store.items()
                if item.course_id == course_id
            ]:
                del store[entity_id]
        del self._courses[course_id]
        logger.info("Course deleted with lessons, enrollments and reviews: %s", course_id)  # noqa: E501

    async def delete_course(self, course_id: CourseId) -> None:
        self._require_course(course_id)
        self._delete_course_tree(course_id)

    # Lessons

    async def create_lesson(self, lesson: Lesson) -> Lesson:
        course = self._require_course(lesson.course_id)
        new_lesson = replace(deepcopy(lesson), id=LessonId(self._next_id("lessons")))

        placed, shifted = place_lesson(
            self._course_lessons(lesson.course_id),
            new_lesson,
        )
        for sibling in shifted:
            self._lessons[sibling.id] = sibling  # type: ignore[index]
        self._lessons[placed.id] = placed  # type: ignore[index]

        self._touch_course(
            lesson.course_id,
            total_lessons=course.total_lessons + 1,
            total_duration=course.total_duration + placed.duration,
        )
        logger.info("Lesson added with ID: %s, order %s", placed.id, placed.order)
        return deepcopy(placed)

    async def get_lesson(self, lesson_id: LessonId) -> Lesson | None:
        lesson = self._lessons.get(lesson_id)
        return deepcopy(lesson) if lesson else None

    async def get_lessons_for_course(self, course_id: CourseId) -> list[Lesson]:
        return deepcopy(self._course_lessons(course_id))

    async def update_lesson(
        self,
        lesson_id: LessonId,
        update: LessonUpdate,
    ) -> Lesson:
        lesson = self._lessons.get(lesson_id)
        if lesson is None:
            raise EntityNotFoundError(Lesson, "id", lesson_id)

        # order goes through move_lesson to keep positions contiguous
        updated = apply_patch(lesson, replace(update, order=None))
        self._lessons[lesson_id] = updated

        if update.order is not None and update.order != lesson.order:
            for moved in move_lesson(
                self._course_lessons(lesson.course_id),
                lesson_id,
                update.order,
            ):
                self._lessons[moved.id] = moved  # type: ignore[index]

        if updated.duration != lesson.duration:
            course = self._require_course(lesson.course_id)
            self._touch_course(
                lesson.course_id,
                total_duration=course.total_duration
                + updated.duration
                - lesson.duration,
            )

        logger.info("Lesson updated: %s", lesson_id)
        return deepcopy(self._lessons[lesson_id])

    async def delete_lesson(self, lesson_id: LessonId) -> None:
        lesson = self._lessons.pop(lesson_id, None)
        if lesson is None:
            raise EntityNotFoundError(Lesson, "id", lesson_id)

        remaining = self._course_lessons(lesson.course_id)
        for renumbered in renumber_lessons(remaining):
            self._lessons[renumbered.id] = renumbered  # type: ignore[index]

        course = self._courses.get(lesson.course_id)
        if course is not None:
            self._touch_course(
                lesson.course_id,
                total_lessons=max(course.total_lessons - 1, 0),
                total_duration=total_duration(remaining),
            )
        logger.info("Lesson deleted: %s", lesson_id)

    # Enrollments

    def _find_enrollment(
        self,
        user_id: UserId,
        course_id: CourseId,
    ) -> Enrollment | None:
        for enrollment in self._enrollments.values():
            if (
                enrollment.user_id == user_id
                and enrollment.course_id == course_id
            ):
                return enrollment
        return None

    async def create_enrollment(self, enrollment: Enrollment) -> Enrollment:
        self._require_user(enrollment.user_id)
        course = self._require_course(enrollment.course_id)

        existing = self._find_enrollment(enrollment.user_id, enrollment.course_id)
        if existing is not None:
            logger.info("Enrollment already exists: %s", existing.id)
            return deepcopy(existing)

        stored = replace(
            deepcopy(enrollment),
            id=EnrollmentId(self._next_id("enrollments")),
        )
        self._enrollments[stored.id] = stored  # type: ignore[index]
        self._touch_course(
            enrollment.course_id,
            total_students=course.total_students + 1,
        )
        logger.info("Enrollment added with ID: %s", stored.id)
        return deepcopy(stored)

    async def get_enrollment(
        self,
        user_id: UserId,
        course_id: CourseId,
    ) -> Enrollment | None:
        return deepcopy(self._find_enrollment(user_id, course_id))

    async def get_enrollment_by_id(
        self,
        enrollment_id: EnrollmentId,
    ) -> Enrollment | None:
        return deepcopy(self._enrollments.get(enrollment_id))

    async def get_enrollment_by_payment_ref(
        self,
        payment_ref: str,
    ) -> Enrollment | None:
        for enrollment in self._enrollments.values():
            if enrollment.payment_ref == payment_ref:
                return deepcopy(enrollment)
        return None

    async def get_enrollments_by_user(
        self,
        user_id: UserId,
    ) -> list[EnrolledCourse]:
        enrollments = _newest_first(
            [e for e in self._enrollments.values() if e.user_id == user_id],
            "enrolled_at",
        )

        result = []
        for enrollment in enrollments:
            course = self._courses.get(enrollment.course_id)
            if course is None:
                continue
            instructor = self._users.get(course.instructor_id)
            result.append(
                EnrolledCourse(
                    enrollment=deepcopy(enrollment),
                    course=CourseSummary(
                        id=course.id,  # type: ignore[arg-type]
                        title=course.title,
                        description=course.description,
                        thumbnail=course.thumbnail,
                        instructor=InstructorSummary(
                            id=instructor.id,  # type: ignore[arg-type]
                            name=instructor.display_name,
                        ) if instructor else None,
                    ),
                ),
            )
        return result

    async def get_enrollments_by_course(
        self,
        course_id: CourseId,
    ) -> list[Enrollment]:
        return deepcopy(
            _newest_first(
                [
                    e for e in self._enrollments.values()
                    if e.course_id == course_id
                ],
                "enrolled_at",
            ),
        )

    def _require_enrollment(self, enrollment_id: EnrollmentId) -> Enrollment:
        enrollment = self._enrollments.get(enrollment_id)
        if enrollment is None:
            raise EntityNotFoundError(Enrollment, "id", enrollment_id)
        return enrollment

    async def update_enrollment_progress(
        self,
        enrollment_id: EnrollmentId,
        progress: int,
    ) -> Enrollment:
        enrollment = self._require_enrollment(enrollment_id)
        # __post_init__ validates progress and derives completed
        updated = replace(
            enrollment,
            progress=progress,
            last_accessed_at=utc_now(),
        )
        self._enrollments[enrollment_id] = updated
        return deepcopy(updated)

    async def update_enrollment_payment_status(
        self,
        enrollment_id: EnrollmentId,
        payment_ref: str | None,
        status: PaymentStatus,
    ) -> Enrollment:
        enrollment = self._require_enrollment(enrollment_id)
        check_payment_transition(enrollment.payment_status, status)
        updated = replace(
            enrollment,
            payment_ref=payment_ref or enrollment.payment_ref,
            payment_status=status,
            last_accessed_at=utc_now(),
        )
        self._enrollments[enrollment_id] = updated
        logger.info("Enrollment %s payment status: %s", enrollment_id, status.value)
        return deepcopy(updated)

    # Reviews

    async def create_review(self, review: Review) -> Review:
        self._require_user(review.user_id)
        self._require_course(review.course_id)
        for existing in self._reviews.values():
            if (
                existing.user_id == review.user_id
                and existing.course_id == review.course_id
            ):
                raise ConflictError(Review, "course already reviewed by user")

        stored = replace(deepcopy(review), id=ReviewId(self._next_id("reviews")))
        self._reviews[stored.id] = stored  # type: ignore[index]
        logger.info("Review added with ID: %s", stored.id)

        await self.update_course_rating(review.course_id)
        return deepcopy(stored)

    async def get_review(self, review_id: ReviewId) -> Review | None:
        return deepcopy(self._reviews.get(review_id))

    async def get_reviews_by_course(self, course_id: CourseId) -> list[Review]:
        return deepcopy(
            _newest_first(
                [r for r in self._reviews.values() if r.course_id == course_id],
                "created_at",
            ),
        )

    async def update_review(
        self,
        review_id: ReviewId,
        update: ReviewUpdate,
    ) -> Review:
        review = self._reviews.get(review_id)
        if review is None:
            raise EntityNotFoundError(Review, "id", review_id)

        updated = apply_patch(review, update)
        self._reviews[review_id] = updated
        await self.update_course_rating(review.course_id)
        return deepcopy(updated)

    async def delete_review(self, review_id: ReviewId) -> None:
        review = self._reviews.pop(review_id, None)
        if review is None:
            raise EntityNotFoundError(Review, "id", review_id)

        logger.info("Review deleted: %s", review_id)
        await self.update_course_rating(review.course_id)

    async def update_course_rating(self, course_id: CourseId) -> None:
        if course_id not in self._courses:
            return

        average, count = rating_summary(
            [r.rating for r in self._reviews.values() if r.course_id == course_id],
        )
        self._touch_course(course_id, average_rating=average, num_reviews=count)
        logger.debug("Course %s rating: %s (%s reviews)", course_id, average, count)
