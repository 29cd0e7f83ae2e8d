from dataclasses import dataclass, field
from datetime import datetime

from coursehub.domain.common.exceptions import ValidationError
from coursehub.domain.common.identifiers import CourseId, ReviewId, UserId
from coursehub.domain.common.validators import require_text, utc_now

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class Review:
    user_id: UserId
    course_id: CourseId
    rating: int
    text: str
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime | None = None
    id: ReviewId | None = None

    def __post_init__(self) -> None:
        if (
            isinstance(self.rating, bool)
            or not isinstance(self.rating, int)
            or not MIN_RATING <= self.rating <= MAX_RATING
        ):
            raise ValidationError(
                "rating",
                f"must be an integer between {MIN_RATING} and {MAX_RATING}",
            )
        self.text = require_text("text", self.text, 2, 500)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReviewUpdate:
    rating: int | None = None
    text: str | None = None
