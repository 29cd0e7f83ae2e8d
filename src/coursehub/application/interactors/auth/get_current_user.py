from dataclasses import dataclass

from coursehub.application.security import IdentityProvider
from coursehub.domain.user import User


@dataclass(slots=True, frozen=True)
class GetCurrentUserInteractor:
    identity_provider: IdentityProvider

    async def __call__(self) -> User:
        return await self.identity_provider.get_current_user()
