from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from coursehub.application.interactors.lessons.get_course_lessons import (
    LessonView,
)
from coursehub.domain.lesson import Lesson


class LessonSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    course_id: str
    title: str
    description: str
    # None while the lesson is locked for the caller
    content: str | None
    video_url: str | None
    duration: int
    order: int
    is_preview: bool
    locked: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_lesson(cls, lesson: Lesson) -> "LessonSchema":
        return cls.model_validate(lesson)

    @classmethod
    def from_view(cls, view: LessonView) -> "LessonSchema":
        schema = cls.from_lesson(view.lesson)
        if not view.locked:
            return schema
        return schema.model_copy(
            update={"content": None, "video_url": None, "locked": True},
        )


class CreateLessonRequestSchema(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "title": "Routing basics",
                    "content": "Path and query parameters.",
                    "duration": 15,
                    "is_preview": False,
                },
            ],
        },
    )

    title: str = Field(..., description="Up to 100 characters")
    content: str
    description: str = ""
    video_url: str = ""
    duration: int = Field(0, description="Minutes")
    order: int | None = Field(None, description="Appended when omitted")
    is_preview: bool = False


class UpdateLessonRequestSchema(BaseModel):
    title: str | None = None
    description: str | None = None
    content: str | None = None
    video_url: str | None = None
    duration: int | None = None
    order: int | None = None
    is_preview: bool | None = None
