from datetime import datetime, timezone
from typing import Any

from adaptix import P, Retort, dumper, loader, name_mapping
from bson import ObjectId

from coursehub.domain.course import Course
from coursehub.domain.enrollment import Enrollment
from coursehub.domain.lesson import Lesson
from coursehub.domain.review import Review
from coursehub.domain.user import User

# Fields stored as ObjectId in MongoDB documents
OBJECT_ID_FIELDS: dict[type, tuple[str, ...]] = {
    User: ("id",),
    Course: ("id", "instructor_id"),
    Lesson: ("id", "course_id"),
    Enrollment: ("id", "user_id", "course_id"),
    Review: ("id", "user_id", "course_id"),
}


def _load_object_id(value: Any) -> str | None:
    if value is None:
        return None
    return str(value) if isinstance(value, ObjectId) else value


def _dump_object_id(value: str | None) -> ObjectId | None:
    if value is None:
        return None
    return ObjectId(value)


def _load_datetime(value: Any) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        # Mongo hands back naive UTC unless the client is tz_aware
        return value.replace(tzinfo=timezone.utc)
    return value


def build_mongo_retort() -> Retort:
    recipe: list[Any] = [
        loader(datetime, _load_datetime),
        dumper(datetime, lambda value: value),
        # BSON doubles come back as int when they have no fraction
        loader(float, float),
    ]
    for model, field_names in OBJECT_ID_FIELDS.items():
        recipe.append(name_mapping(model, map={"id": "_id"}))
        for field_name in field_names:
            field_pattern = getattr(P[model], field_name)
            recipe.append(loader(field_pattern, _load_object_id))
            recipe.append(dumper(field_pattern, _dump_object_id))

    return Retort(recipe=recipe)
