from abc import abstractmethod
from typing import Protocol

from coursehub.domain.common.identifiers import UserId
from coursehub.domain.user import User


class PasswordHasher(Protocol):
    @abstractmethod
    def hash(self, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def is_hashed(self, value: str) -> bool:
        """True when value carries the hasher's marker prefix"""
        raise NotImplementedError

    @abstractmethod
    def verify(self, password: str, hashed: str) -> bool:
        raise NotImplementedError


class TokenProcessor(Protocol):
    @abstractmethod
    def create_token(self, user_id: UserId) -> str:
        raise NotImplementedError

    @abstractmethod
    def read_user_id(self, token: str) -> UserId:
        """Raise AuthenticationError for invalid or expired tokens"""
        raise NotImplementedError


class IdentityProvider(Protocol):
    @abstractmethod
    async def get_current_user(self) -> User:
        """Raise AuthenticationError when the caller is anonymous"""
        raise NotImplementedError

    @abstractmethod
    async def get_optional_user(self) -> User | None:
        raise NotImplementedError
