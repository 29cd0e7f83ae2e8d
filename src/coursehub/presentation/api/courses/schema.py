from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from coursehub.domain.course import CourseCategory, CourseLevel


class CourseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    category: CourseCategory
    level: CourseLevel
    price: float
    thumbnail: str
    preview_video: str
    requirements: list[str]
    objectives: list[str]
    is_published: bool
    instructor_id: str
    total_lessons: int
    total_duration: int
    total_students: int
    average_rating: float
    num_reviews: int
    created_at: datetime
    updated_at: datetime


class CreateCourseRequestSchema(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "title": "Intro to FastAPI",
                    "description": "Build async web APIs in Python.",
                    "category": "web-development",
                    "level": "beginner",
                    "price": 29.99,
                    "requirements": ["Basic Python"],
                    "objectives": ["Write a REST API"],
                    "is_published": True,
                },
            ],
        },
    )

    title: str = Field(..., description="Up to 100 characters")
    description: str
    category: CourseCategory
    level: CourseLevel
    price: float = Field(0, description="0 means free")
    thumbnail: str | None = None
    preview_video: str = ""
    requirements: list[str] = Field(default_factory=list)
    objectives: list[str] = Field(default_factory=list)
    is_published: bool = False


class UpdateCourseRequestSchema(BaseModel):
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
