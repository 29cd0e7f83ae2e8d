import logging
from dataclasses import dataclass

from coursehub.application.interactors.auth.login import AuthResult
from coursehub.application.security import TokenProcessor
from coursehub.application.storage import Storage
from coursehub.domain.common.exceptions import ValidationError
from coursehub.domain.common.validators import require_text
from coursehub.domain.user import User, UserRole

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def check_new_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "password",
            f"must be at least {MIN_PASSWORD_LENGTH} characters",
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class RegisterRequest:
    email: str
    password: str
    name: str
    role: UserRole = UserRole.STUDENT


@dataclass(slots=True, frozen=True)
class RegisterInteractor:
    storage: Storage
    token_processor: TokenProcessor

    async def __call__(self, request_data: RegisterRequest) -> AuthResult:
        logger.info("Registering user: %s", request_data.email)

        # Admins are created out of band
        if request_data.role == UserRole.ADMIN:
            raise ValidationError("role", "must be student or instructor")
        check_new_password(request_data.password)

        user = await self.storage.create_user(
            User(
                email=request_data.email,
                password=request_data.password,
                name=require_text("name", request_data.name, max_length=50),
                role=request_data.role,
            ),
        )

        logger.info("User registered: %s with ID: %s", user.email, user.id)
        return AuthResult(
            user=user,
            token=self.token_processor.create_token(user.id),  # type: ignore[arg-type]
        )
