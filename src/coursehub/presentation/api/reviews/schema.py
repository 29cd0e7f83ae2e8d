from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReviewSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    course_id: str
    rating: int
    text: str
    created_at: datetime
    updated_at: datetime | None


class CreateReviewRequestSchema(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"rating": 5, "text": "Clear and well paced."}],
        },
    )

    rating: int = Field(..., description="1 to 5")
    text: str = Field(..., description="2 to 500 characters")


class UpdateReviewRequestSchema(BaseModel):
    rating: int | None = None
    text: str | None = None
