import pytest

from coursehub.domain.aggregates import (
    move_lesson,
    next_lesson_order,
    place_lesson,
    rating_summary,
    renumber_lessons,
    round_rating,
    total_duration,
)
from coursehub.domain.common.identifiers import CourseId, LessonId
from coursehub.domain.lesson import Lesson

COURSE_ID = CourseId("c1")


def lessons(*orders: int) -> list[Lesson]:
    return [
        Lesson(
            id=LessonId(f"l{order}"),
            title=f"Lesson {order}",
            content="content",
            course_id=COURSE_ID,
            duration=order * 10,
            order=order,
        )
        for order in orders
    ]


def order_map(items: list[Lesson]) -> dict[str, int]:
    return {item.id: item.order for item in items}


# ============= Ratings =============


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (4.0, 4.0),
        (4.25, 4.3),
        (4.35, 4.4),
        (4.333333, 4.3),
        (2.05, 2.1),
    ],
)
def test_round_rating_half_up(value, expected):
    """Ratings round half up to one decimal"""
    assert round_rating(value) == expected


def test_rating_summary_empty():
    assert rating_summary([]) == (0.0, 0)


def test_rating_summary_average_and_count():
    assert rating_summary([5, 4, 3]) == (4.0, 3)
    assert rating_summary([5, 4]) == (4.5, 2)
    assert rating_summary([5, 4, 4]) == (4.3, 3)


# ============= Lesson order =============


def test_next_lesson_order_empty_course():
    assert next_lesson_order([]) == 1


def test_next_lesson_order_uses_max_not_count():
    assert next_lesson_order(lessons(1, 2, 7)) == 8


def test_total_duration():
    assert total_duration(lessons(1, 2, 3)) == 60
    assert total_duration([]) == 0


def test_renumber_after_gap():
    """Removing order 2 of 1..4 leaves 1..3"""
    remaining = [lesson for lesson in lessons(1, 2, 3, 4) if lesson.order != 2]

    changed = renumber_lessons(remaining)

    assert order_map(changed) == {"l3": 2, "l4": 3}


def test_renumber_contiguous_returns_nothing():
    assert renumber_lessons(lessons(1, 2, 3)) == []


def test_place_lesson_without_order_appends():
    new = Lesson(title="New", content="x", course_id=COURSE_ID)

    placed, shifted = place_lesson(lessons(1, 2), new)

    assert placed.order == 3
    assert shifted == []


def test_place_lesson_at_position_shifts_following():
    new = Lesson(
        id=LessonId("new"),
        title="New",
        content="x",
        course_id=COURSE_ID,
        order=2,
    )

    placed, shifted = place_lesson(lessons(1, 2, 3), new)

    assert placed.order == 2
    assert order_map(shifted) == {"l2": 3, "l3": 4}


def test_place_lesson_order_beyond_end_appends():
    new = Lesson(title="New", content="x", course_id=COURSE_ID, order=10)

    placed, shifted = place_lesson(lessons(1, 2), new)

    assert placed.order == 3
    assert shifted == []


def test_move_lesson_down():
    changed = move_lesson(lessons(1, 2, 3, 4), LessonId("l1"), 3)

    assert order_map(changed) == {"l2": 1, "l3": 2, "l1": 3}


def test_move_lesson_up():
    changed = move_lesson(lessons(1, 2, 3, 4), LessonId("l4"), 2)

    assert order_map(changed) == {"l4": 2, "l2": 3, "l3": 4}


def test_move_lesson_clamps_position():
    changed = move_lesson(lessons(1, 2, 3), LessonId("l1"), 99)

    assert order_map(changed) == {"l2": 1, "l3": 2, "l1": 3}
