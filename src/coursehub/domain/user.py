from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from coursehub.domain.common.identifiers import UserId
from coursehub.domain.common.validators import (
    patch_values,
    require_email,
    require_text,
    utc_now,
)


class UserRole(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


@dataclass
class NotificationSettings:
    email_notifications: bool = True
    course_updates: bool = True
    promotions: bool = False
    new_messages: bool = True
    enrollment_confirmation: bool = True


@dataclass
class PrivacySettings:
    show_profile_to_others: bool = True
    show_course_progress: bool = True
    show_completed_courses: bool = True


@dataclass
class UserSettings:
    notifications: NotificationSettings = field(
        default_factory=NotificationSettings,
    )
    privacy: PrivacySettings = field(default_factory=PrivacySettings)


@dataclass
class User:
    email: str
    password: str
    name: str = ""
    username: str = ""
    full_name: str = ""
    role: UserRole = UserRole.STUDENT
    bio: str = ""
    website: str = ""
    profile_picture: str = ""
    is_active: bool = True
    is_email_verified: bool = False
    settings: UserSettings = field(default_factory=UserSettings)
    payment_customer_id: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    id: UserId | None = None

    def __post_init__(self) -> None:
        self.email = require_email(self.email)
        require_text("password", self.password)

    @property
    def display_name(self) -> str:
        return self.name or self.full_name or self.username or self.email

    @property
    def can_author_courses(self) -> bool:
        return self.role in (UserRole.INSTRUCTOR, UserRole.ADMIN)


@dataclass(frozen=True, slots=True, kw_only=True)
class UserUpdate:
    email: str | None = None
    password: str | None = None
    name: str | None = None
    username: str | None = None
    full_name: str | None = None
    role: UserRole | None = None
    bio: str | None = None
    website: str | None = None
    profile_picture: str | None = None
    is_active: bool | None = None
    is_email_verified: bool | None = None
    payment_customer_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotificationSettingsUpdate:
    email_notifications: bool | None = None
    course_updates: bool | None = None
    promotions: bool | None = None
    new_messages: bool | None = None
    enrollment_confirmation: bool | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PrivacySettingsUpdate:
    show_profile_to_others: bool | None = None
    show_course_progress: bool | None = None
    show_completed_courses: bool | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UserSettingsUpdate:
    notifications: NotificationSettingsUpdate | None = None
    privacy: PrivacySettingsUpdate | None = None


def merge_settings(
    settings: UserSettings,
    update: UserSettingsUpdate,
) -> UserSettings:
    """Apply only the provided keys of each section, siblings are kept"""
    notifications = settings.notifications
    if update.notifications is not None:
        notifications = replace(
            notifications,
            **patch_values(update.notifications),
        )

    privacy = settings.privacy
    if update.privacy is not None:
        privacy = replace(privacy, **patch_values(update.privacy))

    return UserSettings(notifications=notifications, privacy=privacy)
