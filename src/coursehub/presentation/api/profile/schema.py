from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from coursehub.presentation.api.auth.schema import UserSchema
from coursehub.presentation.api.courses.schema import CourseSchema
from coursehub.presentation.api.enrollments.schema import EnrollmentSchema


class UpdateProfileRequestSchema(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Alice Smith",
                    "bio": "Backend developer learning data science.",
                    "website": "https://alice.dev",
                },
            ],
        },
    )

    email: str | None = None
    name: str | None = None
    username: str | None = None
    full_name: str | None = None
    bio: str | None = None
    website: str | None = None
    profile_picture: str | None = None


class ChangePasswordRequestSchema(BaseModel):
    current_password: str
    new_password: str = Field(..., description="At least 6 characters")


class NotificationSettingsUpdateSchema(BaseModel):
    email_notifications: bool | None = None
    course_updates: bool | None = None
    promotions: bool | None = None
    new_messages: bool | None = None
    enrollment_confirmation: bool | None = None


class PrivacySettingsUpdateSchema(BaseModel):
    show_profile_to_others: bool | None = None
    show_course_progress: bool | None = None
    show_completed_courses: bool | None = None


class UpdateSettingsRequestSchema(BaseModel):
    """Only the provided keys change, the rest keep their values"""

    notifications: NotificationSettingsUpdateSchema | None = None
    privacy: PrivacySettingsUpdateSchema | None = None


class ProfileExportSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile: UserSchema
    enrollments: list[EnrollmentSchema]
    enrolled_courses: list[CourseSchema]
    instructor_courses: list[CourseSchema]
    exported_at: datetime
