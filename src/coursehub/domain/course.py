from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from coursehub.domain.common.identifiers import CourseId, UserId
from coursehub.domain.common.validators import (
    require_range,
    require_text,
    utc_now,
)


class CourseCategory(str, Enum):
    WEB_DEVELOPMENT = "web-development"
    MOBILE_DEVELOPMENT = "mobile-development"
    DATA_SCIENCE = "data-science"
    UI_UX_DESIGN = "ui-ux-design"
    BUSINESS = "business"
    MARKETING = "marketing"
    MUSIC = "music"
    PHOTOGRAPHY = "photography"
    OTHER = "other"


class CourseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass
class Course:
    title: str
    description: str
    category: CourseCategory
    level: CourseLevel
    instructor_id: UserId
    price: float = 0.0
    thumbnail: str = "default-course.jpg"
    preview_video: str = ""
    requirements: list[str] = field(default_factory=list)
    objectives: list[str] = field(default_factory=list)
    is_published: bool = False

    # Maintained by storage
    total_lessons: int = 0
    total_duration: int = 0
    total_students: int = 0
    average_rating: float = 0.0
    num_reviews: int = 0

    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    id: CourseId | None = None

    def __post_init__(self) -> None:
        self.title = require_text("title", self.title, max_length=100)
        self.description = require_text("description", self.description)
        require_range("price", self.price, minimum=0)
        self.price = float(self.price)
        require_range("average_rating", self.average_rating, 0, 5)

    @property
    def is_free(self) -> bool:
        return self.price == 0


@dataclass(frozen=True, slots=True, kw_only=True)
class CourseUpdate:
    title: str | None = None
    description: str | None = None
    category: CourseCategory | None = None
    level: CourseLevel | None = None
    price: float | None = None
    thumbnail: str | None = None
    preview_video: str | None = None
    requirements: list[str] | None = None
    objectives: list[str] | None = None
    is_published: bool | None = None
