from dataclasses import dataclass, field
from datetime import datetime

from coursehub.domain.common.exceptions import ValidationError
from coursehub.domain.common.identifiers import CourseId, LessonId
from coursehub.domain.common.validators import (
    require_range,
    require_text,
    utc_now,
)


@dataclass
class Lesson:
    title: str
    content: str
    course_id: CourseId
    description: str = ""
    video_url: str = ""
    duration: int = 0
    # None until storage assigns the position
    order: int | None = None
    is_preview: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    id: LessonId | None = None

    def __post_init__(self) -> None:
        self.title = require_text("title", self.title, max_length=100)
        self.content = require_text("content", self.content)
        require_range("duration", self.duration, minimum=0)
        if self.order is not None and self.order < 1:
            raise ValidationError("order", "must be a positive integer")


@dataclass(frozen=True, slots=True, kw_only=True)
class LessonUpdate:
    title: str | None = None
    description: str | None = None
    content: str | None = None
    video_url: str | None = None
    duration: int | None = None
    order: int | None = None
    is_preview: bool | None = None
