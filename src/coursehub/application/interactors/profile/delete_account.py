import logging
from dataclasses import dataclass

from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DeleteAccountInteractor:
    """Remove the caller with their enrollments, reviews and owned courses"""

    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self) -> None:
        user = await self.identity_provider.get_current_user()
        logger.info("Deleting account: %s", user.id)
        await self.storage.delete_user(user.id)  # type: ignore[arg-type]
