import logging
from dataclasses import dataclass

from coursehub.application.exceptions.base import AuthenticationError
from coursehub.application.security import PasswordHasher, TokenProcessor
from coursehub.application.storage import Storage
from coursehub.domain.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthResult:
    user: User
    token: str


@dataclass(frozen=True, slots=True, kw_only=True)
class LoginRequest:
    email: str
    password: str


@dataclass(slots=True, frozen=True)
class LoginInteractor:
    storage: Storage
    password_hasher: PasswordHasher
    token_processor: TokenProcessor

    async def __call__(self, request_data: LoginRequest) -> AuthResult:
        user = await self.storage.get_user_by_email(request_data.email)

        # Same answer for unknown e-mail and wrong password
        if user is None or not self.password_hasher.verify(
            request_data.password,
            user.password,
        ):
            logger.info("Failed login for: %s", request_data.email)
            raise AuthenticationError("Invalid credentials")

        if not user.is_active:
            logger.info("Login for deactivated user: %s", user.id)
            raise AuthenticationError("Account is deactivated")

        logger.info("User logged in: %s", user.id)
        return AuthResult(
            user=user,
            token=self.token_processor.create_token(user.id),  # type: ignore[arg-type]
        )
