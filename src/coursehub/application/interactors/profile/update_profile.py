import logging
from dataclasses import dataclass

from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.user import User, UserUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateProfileRequest:
    email: str | None = None
    name: str | None = None
    username: str | None = None
    full_name: str | None = None
    bio: str | None = None
    website: str | None = None
    profile_picture: str | None = None


@dataclass(slots=True, frozen=True)
class UpdateProfileInteractor:
    """
    Update own profile fields

    Role, activation and verification flags are not editable here.
    """

    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: UpdateProfileRequest) -> User:
        user = await self.identity_provider.get_current_user()
        logger.info("Updating profile: %s", user.id)

        return await self.storage.update_user(
            user.id,  # type: ignore[arg-type]
            UserUpdate(
                email=request_data.email,
                name=request_data.name,
                username=request_data.username,
                full_name=request_data.full_name,
                bio=request_data.bio,
                website=request_data.website,
                profile_picture=request_data.profile_picture,
            ),
        )
