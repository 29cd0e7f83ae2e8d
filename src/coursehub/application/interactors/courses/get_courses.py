from dataclasses import dataclass

from coursehub.application.storage import Storage
from coursehub.domain.course import Course


@dataclass(slots=True, frozen=True)
class GetCoursesInteractor:
    """Published courses, newest first"""

    storage: Storage

    async def __call__(self) -> list[Course]:
        return await self.storage.get_courses(published_only=True)
