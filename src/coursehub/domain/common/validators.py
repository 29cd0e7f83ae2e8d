import re
from dataclasses import fields, replace
from datetime import datetime, timezone
from typing import Any, TypeVar

from coursehub.domain.common.exceptions import ValidationError

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.\w{2,}$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def require_text(
    field_name: str,
    value: str,
    min_length: int = 1,
    max_length: int | None = None,
) -> str:
    """Strip and check length, returns the stripped value"""
    stripped = value.strip()
    if len(stripped) < min_length:
        if min_length == 1:
            raise ValidationError(field_name, "must not be empty")
        raise ValidationError(
            field_name,
            f"must be at least {min_length} characters",
        )
    if max_length is not None and len(stripped) > max_length:
        raise ValidationError(
            field_name,
            f"cannot be more than {max_length} characters",
        )
    return stripped


def require_range(
    field_name: str,
    value: float,
    minimum: float | None = None,
    maximum: float | None = None,
) -> None:
    if isinstance(value, bool):
        raise ValidationError(field_name, "must be a number")
    if minimum is not None and value < minimum:
        raise ValidationError(field_name, f"must be >= {minimum}")
    if maximum is not None and value > maximum:
        raise ValidationError(field_name, f"must be <= {maximum}")


def require_email(value: str) -> str:
    normalized = value.strip().lower()
    if not EMAIL_PATTERN.match(normalized):
        raise ValidationError("email", "must be a valid email address")
    return normalized


def patch_values(patch: Any) -> dict[str, Any]:
    """Fields of a patch dataclass that were actually provided"""
    return {
        f.name: getattr(patch, f.name)
        for f in fields(patch)
        if getattr(patch, f.name) is not None
    }


def apply_patch(entity: T, patch: Any) -> T:
    """Return a copy of entity with patch values, validated by __post_init__"""
    values = patch_values(patch)
    if not values:
        return entity
    return replace(entity, **values, updated_at=utc_now())  # type: ignore[type-var]
