from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter
from starlette import status

from coursehub.application.interactors.analytics.course_analytics import (
    CourseAnalyticsInteractor,
    CourseAnalyticsRequest,
)
from coursehub.application.interactors.analytics.instructor_dashboard import (
    InstructorDashboardInteractor,
)
from coursehub.domain.common.identifiers import CourseId
from coursehub.presentation.api.analytics.schema import (
    CourseAnalyticsSchema,
    InstructorDashboardSchema,
)

analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])


@analytics_router.get(
    "/instructor/dashboard",
    status_code=status.HTTP_200_OK,
)
@inject
async def instructor_dashboard(
    interactor: FromDishka[InstructorDashboardInteractor],
) -> InstructorDashboardSchema:
    """
    Totals and per-course stats for the calling instructor

    Only enrollments with a completed payment are counted. Monthly
    series cover the last six months, the current one included.
    """
    return InstructorDashboardSchema.model_validate(await interactor())


@analytics_router.get(
    "/instructor/course/{course_id}",
    status_code=status.HTTP_200_OK,
)
@inject
async def course_analytics(
    course_id: str,
    interactor: FromDishka[CourseAnalyticsInteractor],
) -> CourseAnalyticsSchema:
    analytics = await interactor(
        CourseAnalyticsRequest(course_id=CourseId(course_id)),
    )
    return CourseAnalyticsSchema.model_validate(analytics)
