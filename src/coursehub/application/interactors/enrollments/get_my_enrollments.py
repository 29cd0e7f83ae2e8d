from dataclasses import dataclass

from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.enrollment import EnrolledCourse


@dataclass(slots=True, frozen=True)
class GetMyEnrollmentsInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self) -> list[EnrolledCourse]:
        user = await self.identity_provider.get_current_user()
        return await self.storage.get_enrollments_by_user(user.id)  # type: ignore[arg-type]
