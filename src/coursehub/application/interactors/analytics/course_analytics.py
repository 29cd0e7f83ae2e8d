import logging
from dataclasses import dataclass, field

from coursehub.application.access_policy import ensure_can_author, is_course_owner
from coursehub.application.analytics import (
    CountBucket,
    DailyEnrollments,
    average_progress,
    enrollments_by_date,
    percentage,
    progress_distribution,
)
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.interactors.analytics.instructor_dashboard import (
    paid_enrollments,
)
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.course import Course

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class CourseAnalyticsRequest:
    course_id: CourseId


@dataclass(frozen=True, slots=True)
class CourseAnalytics:
    course_id: CourseId
    course_title: str
    total_enrollments: int
    completed_enrollments: int
    completion_rate: int
    average_progress: int
    revenue: float
    enrollments_by_date: list[DailyEnrollments] = field(default_factory=list)
    progress_distribution: list[CountBucket] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class CourseAnalyticsInteractor:
    """Detailed stats of one course for its instructor"""

    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: CourseAnalyticsRequest) -> CourseAnalytics:
        user = await self.identity_provider.get_current_user()
        ensure_can_author(user)

        course = await self.storage.get_course(request_data.course_id)
        # Someone else's course looks missing
        if course is None or not is_course_owner(user, course):
            logger.info(
                "Course %s not found for instructor %s",
                request_data.course_id,
                user.id,
            )
            raise EntityNotFoundError(Course, "id", request_data.course_id)

        paid = await paid_enrollments(self.storage, course)
        completed = sum(1 for enrollment in paid if enrollment.completed)
        return CourseAnalytics(
            course_id=course.id,  # type: ignore[arg-type]
            course_title=course.title,
            total_enrollments=len(paid),
            completed_enrollments=completed,
            completion_rate=percentage(completed, len(paid)),
            average_progress=average_progress(paid),
            revenue=round(len(paid) * course.price, 2),
            enrollments_by_date=enrollments_by_date(paid),
            progress_distribution=progress_distribution(paid),
        )
