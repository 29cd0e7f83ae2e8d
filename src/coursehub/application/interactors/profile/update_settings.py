from dataclasses import dataclass

from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.user import User, UserSettingsUpdate


@dataclass(slots=True, frozen=True)
class UpdateSettingsInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: UserSettingsUpdate) -> User:
        user = await self.identity_provider.get_current_user()
        return await self.storage.update_user_settings(
            user.id,  # type: ignore[arg-type]
            request_data,
        )
