from fastapi import APIRouter

from coursehub.presentation.api.analytics.router import analytics_router
from coursehub.presentation.api.auth.router import auth_router
from coursehub.presentation.api.courses.router import courses_router
from coursehub.presentation.api.enrollments.router import enrollments_router
from coursehub.presentation.api.healthcheck.router import healthcheck_router
from coursehub.presentation.api.lessons.router import lessons_router
from coursehub.presentation.api.profile.router import profile_router
from coursehub.presentation.api.reviews.router import reviews_router

root_router = APIRouter(prefix="/api")
root_router.include_router(healthcheck_router)
root_router.include_router(auth_router)
root_router.include_router(courses_router)
root_router.include_router(lessons_router)
root_router.include_router(enrollments_router)
root_router.include_router(reviews_router)
root_router.include_router(profile_router)
root_router.include_router(analytics_router)
