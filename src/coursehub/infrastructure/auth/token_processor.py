import logging
from dataclasses import dataclass
from datetime import timedelta

from jose import JWTError, jwt

from coursehub.application.exceptions.base import AuthenticationError
from coursehub.domain.common.identifiers import UserId
from coursehub.domain.common.validators import utc_now

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class JwtTokenProcessor:
    secret_key: str
    expires_in: timedelta
    algorithm: str = "HS256"

    def create_token(self, user_id: UserId) -> str:
        issued_at = utc_now()
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def read_user_id(self, token: str) -> UserId:
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
        except JWTError as e:
            logger.info("Token verification failed: %s", e)
            raise AuthenticationError("Invalid token") from e

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationError("Invalid token")
        return UserId(subject)
