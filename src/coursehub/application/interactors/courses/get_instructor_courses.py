from dataclasses import dataclass

from coursehub.application.access_policy import ensure_can_author
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.course import Course


@dataclass(slots=True, frozen=True)
class GetInstructorCoursesInteractor:
    """All courses of the caller, drafts included"""

    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self) -> list[Course]:
        user = await self.identity_provider.get_current_user()
        ensure_can_author(user)
        return await self.storage.get_courses_by_instructor(user.id)  # type: ignore[arg-type]
