from dataclasses import dataclass


@dataclass(eq=False)
class AppError(Exception):
    @property
    def message(self) -> str:
        return ""


@dataclass(eq=False)
class DomainError(AppError):

    @property
    def message(self) -> str:
        return "A domain error occurred"


@dataclass(eq=False)
class ValidationError(DomainError):
    """Entity field holds a malformed or out-of-range value"""

    field_name: str
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid {self.field_name}: {self.reason}"


@dataclass(eq=False)
class InvalidPaymentTransitionError(DomainError):
    current_status: str
    new_status: str

    @property
    def message(self) -> str:
        return (
            f"Payment status cannot change from '{self.current_status}' "
            f"to '{self.new_status}'"
        )
