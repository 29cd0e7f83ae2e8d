from dataclasses import dataclass
from typing import Any

from coursehub.domain.common.exceptions import AppError


@dataclass(eq=False)
class ApplicationError(AppError):

    @property
    def message(self) -> str:
        return "An application error occurred"


@dataclass(eq=False)
class EntityNotFoundError(ApplicationError):
    """Entity lookup by identifier found nothing"""

    entity_type: type
    field_name: str | None = None
    field_value: Any = None

    @property
    def message(self) -> str:
        entity_name = self.entity_type.__name__

        if self.field_name is None:
            return f"{entity_name} not found"

        return f"{entity_name} not found by {self.field_name}='{self.field_value}'"  # noqa: E501


@dataclass(eq=False)
class ConflictError(ApplicationError):
    """Entity would violate a uniqueness constraint"""

    entity_type: type
    reason: str

    @property
    def message(self) -> str:
        return f"{self.entity_type.__name__} conflict: {self.reason}"


@dataclass(eq=False)
class AuthenticationError(ApplicationError):
    reason: str = "Not authorized, no token"

    @property
    def message(self) -> str:
        return self.reason


@dataclass(eq=False)
class AuthorizationError(ApplicationError):
    reason: str = "Not authorized to access this resource"

    @property
    def message(self) -> str:
        return self.reason


@dataclass(eq=False)
class BackendUnavailableError(ApplicationError):
    """Durable store unreachable after all connection attempts"""

    attempts: int

    @property
    def message(self) -> str:
        return f"MongoDB unreachable after {self.attempts} attempts"


@dataclass(eq=False)
class CascadeDeleteError(ApplicationError):
    entity_type: type
    entity_id: str

    @property
    def message(self) -> str:
        return (
            f"Cascade delete of {self.entity_type.__name__} "
            f"'{self.entity_id}' did not complete"
        )


@dataclass(eq=False)
class PaymentGatewayError(ApplicationError):
    reason: str

    @property
    def message(self) -> str:
        return f"Payment provider error: {self.reason}"
