import logging
from dataclasses import dataclass, field

from coursehub.application.access_policy import ensure_can_author
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.course import Course, CourseCategory, CourseLevel

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateCourseRequest:
    title: str
    description: str
    category: CourseCategory
    level: CourseLevel
    price: float = 0.0
    thumbnail: str | None = None
    preview_video: str = ""
    requirements: list[str] = field(default_factory=list)
    objectives: list[str] = field(default_factory=list)
    is_published: bool = False


@dataclass(slots=True, frozen=True)
class CreateCourseInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: CreateCourseRequest) -> Course:
        user = await self.identity_provider.get_current_user()
        ensure_can_author(user)

        course = Course(
            title=request_data.title,
            description=request_data.description,
            category=request_data.category,
            level=request_data.level,
            price=request_data.price,
            preview_video=request_data.preview_video,
            requirements=list(request_data.requirements),
            objectives=list(request_data.objectives),
            is_published=request_data.is_published,
            instructor_id=user.id,  # type: ignore[arg-type]
        )
        if request_data.thumbnail:
            course.thumbnail = request_data.thumbnail

        created = await self.storage.create_course(course)
        logger.info("Course created: %s with ID: %s", created.title, created.id)
        return created
