from abc import abstractmethod
from typing import Protocol

from coursehub.domain.common.identifiers import (
    CourseId,
    EnrollmentId,
    LessonId,
    ReviewId,
    UserId,
)
from coursehub.domain.course import Course, CourseUpdate
from coursehub.domain.enrollment import (
    EnrolledCourse,
    Enrollment,
    PaymentStatus,
)
from coursehub.domain.lesson import Lesson, LessonUpdate
from coursehub.domain.review import Review, ReviewUpdate
from coursehub.domain.user import User, UserSettingsUpdate, UserUpdate


class Storage(Protocol):
    """
    Persistence for users, courses, lessons, enrollments and reviews.

    Implemented by the MongoDB backend and the in-memory backend with the same
    observable behaviour. Identifiers are opaque and compared by equality.
    Reads return None or an empty list, mutations of a missing entity raise
    EntityNotFoundError.
    """

    name: str

    # Users
    @abstractmethod
    async def get_user(self, user_id: UserId) -> User | None:
        raise NotImplementedError

    @abstractmethod
    async def get_user_by_email(self, email: str) -> User | None:
        raise NotImplementedError

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """Store user, hashing the password unless it is already hashed"""
        raise NotImplementedError

    @abstractmethod
    async def update_user(self, user_id: UserId, update: UserUpdate) -> User:
        raise NotImplementedError

    @abstractmethod
    async def update_user_settings(
        self,
        user_id: UserId,
        update: UserSettingsUpdate,
    ) -> User:
        raise NotImplementedError

    @abstractmethod
    async def delete_user(self, user_id: UserId) -> None:
        """Delete user with enrollments, owned courses and authored reviews"""
        raise NotImplementedError

    # Courses
    @abstractmethod
    async def create_course(self, course: Course) -> Course:
        raise NotImplementedError

    @abstractmethod
    async def get_course(self, course_id: CourseId) -> Course | None:
        raise NotImplementedError

    @abstractmethod
    async def get_courses(self, published_only: bool = False) -> list[Course]:
        raise NotImplementedError

    @abstractmethod
    async def get_courses_by_instructor(
        self,
        instructor_id: UserId,
    ) -> list[Course]:
        raise NotImplementedError

    @abstractmethod
    async def update_course(
        self,
        course_id: CourseId,
        update: CourseUpdate,
    ) -> Course:
        raise NotImplementedError

    @abstractmethod
    async def delete_course(self, course_id: CourseId) -> None:
        """Delete course with its lessons, enrollments and reviews"""
        raise NotImplementedError

    # Lessons
    @abstractmethod
    async def create_lesson(self, lesson: Lesson) -> Lesson:
        raise NotImplementedError

    @abstractmethod
    async def get_lesson(self, lesson_id: LessonId) -> Lesson | None:
        raise NotImplementedError

    @abstractmethod
    async def get_lessons_for_course(self, course_id: CourseId) -> list[Lesson]:
        """Lessons sorted by ascending order"""
        raise NotImplementedError

    @abstractmethod
    async def update_lesson(
        self,
        lesson_id: LessonId,
        update: LessonUpdate,
    ) -> Lesson:
        raise NotImplementedError

    @abstractmethod
    async def delete_lesson(self, lesson_id: LessonId) -> None:
        """Delete lesson, renumber the rest 1..N and refresh course totals"""
        raise NotImplementedError

    # Enrollments
    @abstractmethod
    async def create_enrollment(self, enrollment: Enrollment) -> Enrollment:
        """Store enrollment or return the existing one for (user, course)"""
        raise NotImplementedError

    @abstractmethod
    async def get_enrollment(
        self,
        user_id: UserId,
        course_id: CourseId,
    ) -> Enrollment | None:
        raise NotImplementedError

    @abstractmethod
    async def get_enrollment_by_id(
        self,
        enrollment_id: EnrollmentId,
    ) -> Enrollment | None:
        raise NotImplementedError

    @abstractmethod
    async def get_enrollment_by_payment_ref(
        self,
        payment_ref: str,
    ) -> Enrollment | None:
        raise NotImplementedError

    @abstractmethod
    async def get_enrollments_by_user(
        self,
        user_id: UserId,
    ) -> list[EnrolledCourse]:
        raise NotImplementedError

    @abstractmethod
    async def get_enrollments_by_course(
        self,
        course_id: CourseId,
    ) -> list[Enrollment]:
        raise NotImplementedError

    @abstractmethod
    async def update_enrollment_progress(
        self,
        enrollment_id: EnrollmentId,
        progress: int,
    ) -> Enrollment:
        raise NotImplementedError

    @abstractmethod
    async def update_enrollment_payment_status(
        self,
        enrollment_id: EnrollmentId,
        payment_ref: str | None,
        status: PaymentStatus,
    ) -> Enrollment:
        raise NotImplementedError

    # Reviews
    @abstractmethod
    async def create_review(self, review: Review) -> Review:
        raise NotImplementedError

    @abstractmethod
    async def get_review(self, review_id: ReviewId) -> Review | None:
        raise NotImplementedError

    @abstractmethod
    async def get_reviews_by_course(self, course_id: CourseId) -> list[Review]:
        """Reviews newest first"""
        raise NotImplementedError

    @abstractmethod
    async def update_review(
        self,
        review_id: ReviewId,
        update: ReviewUpdate,
    ) -> Review:
        raise NotImplementedError

    @abstractmethod
    async def delete_review(self, review_id: ReviewId) -> None:
        raise NotImplementedError

    @abstractmethod
    async def update_course_rating(self, course_id: CourseId) -> None:
        raise NotImplementedError
