import logging
from dataclasses import dataclass

from coursehub.application.interactors.auth.register import check_new_password
from coursehub.application.security import IdentityProvider, PasswordHasher
from coursehub.application.storage import Storage
from coursehub.domain.common.exceptions import ValidationError
from coursehub.domain.user import UserUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class ChangePasswordRequest:
    current_password: str
    new_password: str


@dataclass(slots=True, frozen=True)
class ChangePasswordInteractor:
    storage: Storage
    identity_provider: IdentityProvider
    password_hasher: PasswordHasher

    async def __call__(self, request_data: ChangePasswordRequest) -> None:
        user = await self.identity_provider.get_current_user()

        if not self.password_hasher.verify(
            request_data.current_password,
            user.password,
        ):
            logger.info("Wrong current password for: %s", user.id)
            raise ValidationError("current_password", "is incorrect")
        check_new_password(request_data.new_password)

        # storage hashes plain passwords on update
        await self.storage.update_user(
            user.id,  # type: ignore[arg-type]
            UserUpdate(password=request_data.new_password),
        )
        logger.info("Password changed: %s", user.id)
