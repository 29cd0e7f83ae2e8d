from dataclasses import dataclass, field

from coursehub.application.access_policy import ensure_can_author
from coursehub.application.analytics import (
    CountBucket,
    MonthlyEnrollments,
    MonthlyRevenue,
    average_progress,
    engagement_levels,
    enrollments_by_month,
    percentage,
    revenue_by_month,
)
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId, UserId
from coursehub.domain.common.validators import utc_now
from coursehub.domain.course import Course, CourseCategory, CourseLevel
from coursehub.domain.enrollment import Enrollment


@dataclass(frozen=True, slots=True)
class CourseStats:
    course_id: CourseId
    title: str
    category: CourseCategory
    level: CourseLevel
    price: float
    is_published: bool
    students: int
    revenue: float
    average_progress: int
    completion_rate: int
    average_rating: float
    num_reviews: int


@dataclass(frozen=True, slots=True)
class CompletionRate:
    name: str
    value: int


@dataclass(frozen=True, slots=True)
class InstructorDashboard:
    total_courses: int = 0
    total_students: int = 0
    total_revenue: float = 0.0
    course_stats: list[CourseStats] = field(default_factory=list)
    revenue_data: list[MonthlyRevenue] = field(default_factory=list)
    enrollments_by_month: list[MonthlyEnrollments] = field(default_factory=list)
    student_engagement: list[CountBucket] = field(default_factory=list)
    course_completion_rates: list[CompletionRate] = field(default_factory=list)


async def paid_enrollments(storage: Storage, course: Course) -> list[Enrollment]:
    return [
        enrollment
        for enrollment in await storage.get_enrollments_by_course(
            course.id,  # type: ignore[arg-type]
        )
        if enrollment.has_access
    ]


def course_stats(course: Course, paid: list[Enrollment]) -> CourseStats:
    """Stats over enrollments whose payment completed"""
    completed = sum(1 for enrollment in paid if enrollment.completed)
    return CourseStats(
        course_id=course.id,  # type: ignore[arg-type]
        title=course.title,
        category=course.category,
        level=course.level,
        price=course.price,
        is_published=course.is_published,
        students=len(paid),
        revenue=round(len(paid) * course.price, 2),
        average_progress=average_progress(paid),
        completion_rate=percentage(completed, len(paid)),
        average_rating=course.average_rating,
        num_reviews=course.num_reviews,
    )


@dataclass(slots=True, frozen=True)
class InstructorDashboardInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self) -> InstructorDashboard:
        user = await self.identity_provider.get_current_user()
        ensure_can_author(user)

        courses = await self.storage.get_courses_by_instructor(user.id)  # type: ignore[arg-type]
        if not courses:
            return InstructorDashboard()

        stats = []
        sales: list[tuple[Enrollment, float]] = []
        for course in courses:
            paid = await paid_enrollments(self.storage, course)
            sales.extend((enrollment, course.price) for enrollment in paid)
            stats.append(course_stats(course, paid))

        enrollments = [enrollment for enrollment, _ in sales]
        students: set[UserId] = {enrollment.user_id for enrollment in enrollments}
        today = utc_now().date()
        return InstructorDashboard(
            total_courses=len(courses),
            total_students=len(students),
            total_revenue=round(sum(item.revenue for item in stats), 2),
            course_stats=stats,
            revenue_data=revenue_by_month(sales, today),
            enrollments_by_month=enrollments_by_month(enrollments, today),
            student_engagement=engagement_levels(enrollments),
            course_completion_rates=[
                CompletionRate(name=item.title, value=item.completion_rate)
                for item in stats
            ],
        )
