from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from coursehub.domain.user import UserRole


class NotificationSettingsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email_notifications: bool
    course_updates: bool
    promotions: bool
    new_messages: bool
    enrollment_confirmation: bool


class PrivacySettingsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    show_profile_to_others: bool
    show_course_progress: bool
    show_completed_courses: bool


class UserSettingsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notifications: NotificationSettingsSchema
    privacy: PrivacySettingsSchema


class UserSchema(BaseModel):
    """Public view of a user, the password hash is never included"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    username: str
    full_name: str
    role: UserRole
    bio: str
    website: str
    profile_picture: str
    is_active: bool
    is_email_verified: bool
    settings: UserSettingsSchema
    created_at: datetime
    updated_at: datetime


class RegisterRequestSchema(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Alice Smith",
                    "email": "alice@example.com",
                    "password": "secret123",
                    "role": "student",
                },
            ],
        },
    )

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Unique e-mail address")
    password: str = Field(..., description="At least 6 characters")
    role: UserRole = Field(UserRole.STUDENT, description="student or instructor")


class LoginRequestSchema(BaseModel):
    email: str
    password: str


class AuthResponseSchema(BaseModel):
    token: str
    user: UserSchema
