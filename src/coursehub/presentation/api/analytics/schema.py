from datetime import date

from pydantic import BaseModel, ConfigDict

from coursehub.domain.course import CourseCategory, CourseLevel


class CourseStatsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: str
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


class MonthlyRevenueSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    revenue: float


class MonthlyEnrollmentsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    enrollments: int


class CountBucketSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    count: int


class CompletionRateSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    value: int


class DailyEnrollmentsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    count: int


class InstructorDashboardSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_courses: int
    total_students: int
    total_revenue: float
    course_stats: list[CourseStatsSchema]
    revenue_data: list[MonthlyRevenueSchema]
    enrollments_by_month: list[MonthlyEnrollmentsSchema]
    student_engagement: list[CountBucketSchema]
    course_completion_rates: list[CompletionRateSchema]


class CourseAnalyticsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: str
    course_title: str
    total_enrollments: int
    completed_enrollments: int
    completion_rate: int
    average_progress: int
    revenue: float
    enrollments_by_date: list[DailyEnrollmentsSchema]
    progress_distribution: list[CountBucketSchema]
