"""
Course aggregates shared by every storage backend.

Both backends call these functions so counters, ratings and lesson order
come out identical regardless of where the data lives.
"""
from collections.abc import Iterable, Sequence
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal

from coursehub.domain.common.identifiers import LessonId
from coursehub.domain.lesson import Lesson


def round_rating(value: float) -> float:
    """Round half up to one decimal place (4.25 -> 4.3)"""
    rounded = Decimal(str(value)).quantize(
        Decimal("0.1"),
        rounding=ROUND_HALF_UP,
    )
    return float(rounded)


def rating_summary(ratings: Sequence[int]) -> tuple[float, int]:
    """Return (average_rating, num_reviews), (0.0, 0) when empty"""
    if not ratings:
        return 0.0, 0
    return round_rating(sum(ratings) / len(ratings)), len(ratings)


def sort_lessons(lessons: Iterable[Lesson]) -> list[Lesson]:
    return sorted(lessons, key=lambda lesson: lesson.order or 0)


def next_lesson_order(lessons: Iterable[Lesson]) -> int:
    return max((lesson.order or 0 for lesson in lessons), default=0) + 1


def total_duration(lessons: Iterable[Lesson]) -> int:
    return sum(lesson.duration for lesson in lessons)


def renumber_lessons(lessons: Iterable[Lesson]) -> list[Lesson]:
    """
    Reassign order 1..N following the current order.

    Returns only the lessons whose order changed, these need to be persisted.
    """
    changed = []
    for position, lesson in enumerate(sort_lessons(lessons), start=1):
        if lesson.order != position:
            changed.append(replace(lesson, order=position))
    return changed


def _reposition(
    ordered: list[Lesson],
    lesson: Lesson,
    position: int,
) -> list[Lesson]:
    position = min(max(position, 1), len(ordered) + 1)
    ordered.insert(position - 1, lesson)
    changed = []
    for index, item in enumerate(ordered, start=1):
        if item.order != index:
            changed.append(replace(item, order=index))
    return changed


def place_lesson(
    siblings: Iterable[Lesson],
    lesson: Lesson,
) -> tuple[Lesson, list[Lesson]]:
    """
    Assign an order to a new lesson.

    Without an order the lesson goes after the last one (max order + 1).
    With an order it is inserted at that position (clamped to 1..N+1) and
    the following siblings are shifted down.
    Returns the placed lesson and the siblings whose order changed.
    """
    ordered = sort_lessons(siblings)
    if lesson.order is None or lesson.order > len(ordered):
        return replace(lesson, order=next_lesson_order(ordered)), []

    target = lesson.order
    changed = _reposition(ordered, replace(lesson, order=None), target)
    placed = next(item for item in changed if item.id == lesson.id)
    shifted = [item for item in changed if item is not placed]
    return placed, shifted


def move_lesson(
    lessons: Iterable[Lesson],
    lesson_id: LessonId,
    new_order: int,
) -> list[Lesson]:
    """Move one lesson to new_order, returns every lesson whose order changed"""
    ordered = sort_lessons(lessons)
    moving = next(item for item in ordered if item.id == lesson_id)
    ordered.remove(moving)
    return _reposition(ordered, moving, new_order)
