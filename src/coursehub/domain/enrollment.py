from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from coursehub.domain.common.exceptions import InvalidPaymentTransitionError
from coursehub.domain.common.identifiers import (
    CourseId,
    EnrollmentId,
    UserId,
)
from coursehub.domain.common.validators import require_range, utc_now


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


# completed is terminal
ALLOWED_PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset(
        {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    ),
    PaymentStatus.FAILED: frozenset(
        {PaymentStatus.PENDING, PaymentStatus.COMPLETED},
    ),
    PaymentStatus.COMPLETED: frozenset(),
}


def check_payment_transition(
    current: PaymentStatus,
    new: PaymentStatus,
) -> None:
    if current == new:
        return
    if new not in ALLOWED_PAYMENT_TRANSITIONS[current]:
        raise InvalidPaymentTransitionError(current.value, new.value)


@dataclass
class Enrollment:
    user_id: UserId
    course_id: CourseId
    progress: int = 0
    completed: bool = False
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_ref: str | None = None
    enrolled_at: datetime = field(default_factory=utc_now)
    last_accessed_at: datetime = field(default_factory=utc_now)
    id: EnrollmentId | None = None

    def __post_init__(self) -> None:
        require_range("progress", self.progress, 0, 100)
        self.completed = self.progress >= 100

    @property
    def has_access(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED


@dataclass(frozen=True, slots=True)
class InstructorSummary:
    id: UserId
    name: str


@dataclass(frozen=True, slots=True)
class CourseSummary:
    id: CourseId
    title: str
    description: str
    thumbnail: str
    instructor: InstructorSummary | None = None


@dataclass(frozen=True, slots=True)
class EnrolledCourse:
    """Enrollment with a denormalized course summary for display"""

    enrollment: Enrollment
    course: CourseSummary
