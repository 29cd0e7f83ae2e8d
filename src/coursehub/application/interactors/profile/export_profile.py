import logging
from dataclasses import dataclass, field
from datetime import datetime

from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.validators import utc_now
from coursehub.domain.course import Course
from coursehub.domain.enrollment import Enrollment
from coursehub.domain.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProfileExport:
    profile: User
    enrollments: list[Enrollment] = field(default_factory=list)
    enrolled_courses: list[Course] = field(default_factory=list)
    instructor_courses: list[Course] = field(default_factory=list)
    exported_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True, frozen=True)
class ExportProfileInteractor:
    """Everything stored about the caller, in one document"""

    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self) -> ProfileExport:
        user = await self.identity_provider.get_current_user()

        enrolled = await self.storage.get_enrollments_by_user(user.id)  # type: ignore[arg-type]
        enrolled_courses = []
        for item in enrolled:
            course = await self.storage.get_course(item.enrollment.course_id)
            if course is not None:
                enrolled_courses.append(course)

        instructor_courses: list[Course] = []
        if user.can_author_courses:
            instructor_courses = await self.storage.get_courses_by_instructor(
                user.id,  # type: ignore[arg-type]
            )

        logger.info("Profile data exported for user %s", user.id)
        return ProfileExport(
            profile=user,
            enrollments=[item.enrollment for item in enrolled],
            enrolled_courses=enrolled_courses,
            instructor_courses=instructor_courses,
        )
