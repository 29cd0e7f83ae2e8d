import logging
from dataclasses import dataclass

from fastapi import Request

from coursehub.application.exceptions.base import AuthenticationError
from coursehub.application.security import IdentityProvider, TokenProcessor
from coursehub.application.storage import Storage
from coursehub.domain.user import User

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TokenIdentityProvider(IdentityProvider):
    """Resolve the caller from a bearer header or the auth cookie"""

    request: Request
    token_processor: TokenProcessor
    storage: Storage
    cookie_name: str

    def _read_token(self) -> str | None:
        authorization = self.request.headers.get("Authorization", "")
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
        return self.request.cookies.get(self.cookie_name)

    async def get_current_user(self) -> User:
        token = self._read_token()
        if token is None:
            raise AuthenticationError()

        user_id = self.token_processor.read_user_id(token)
        user = await self.storage.get_user(user_id)
        if user is None or not user.is_active:
            logger.info("Token user missing or inactive: %s", user_id)
            raise AuthenticationError("User not found")
        return user

    async def get_optional_user(self) -> User | None:
        if self._read_token() is None:
            return None
        try:
            return await self.get_current_user()
        except AuthenticationError:
            return None
