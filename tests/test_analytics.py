from datetime import date, datetime, timezone

import pytest

from coursehub.application.analytics import (
    engagement_levels,
    enrollments_by_date,
    enrollments_by_month,
    percentage,
    progress_distribution,
    recent_months,
    revenue_by_month,
    round_half_up,
)
from coursehub.domain.common.identifiers import CourseId, UserId
from coursehub.domain.enrollment import Enrollment, PaymentStatus

TODAY = date(2024, 2, 15)


def enrollment(enrolled_at: datetime, progress: int = 0) -> Enrollment:
    return Enrollment(
        user_id=UserId("u1"),
        course_id=CourseId("c1"),
        payment_status=PaymentStatus.COMPLETED,
        progress=progress,
        enrolled_at=enrolled_at,
    )


# ============= Rounding =============


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.5, 1), (1.49, 1), (2.5, 3), (74.5, 75)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_percentage_of_nothing_is_zero():
    assert percentage(0, 0) == 0
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67


# ============= Monthly series =============


def test_recent_months_cross_year_boundary():
    assert recent_months(TODAY) == [
        (2023, 9),
        (2023, 10),
        (2023, 11),
        (2023, 12),
        (2024, 1),
        (2024, 2),
    ]


def test_revenue_by_month_ignores_older_sales():
    sales = [
        (enrollment(datetime(2024, 2, 1, tzinfo=timezone.utc)), 10.0),
        (enrollment(datetime(2024, 2, 28, tzinfo=timezone.utc)), 19.99),
        (enrollment(datetime(2023, 12, 5, tzinfo=timezone.utc)), 5.0),
        (enrollment(datetime(2023, 1, 5, tzinfo=timezone.utc)), 100.0),
    ]

    series = revenue_by_month(sales, TODAY)

    assert [item.name for item in series] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]
    assert [item.revenue for item in series] == [0, 0, 0, 5.0, 0, 29.99]


def test_enrollments_by_month():
    enrollments = [
        enrollment(datetime(2024, 1, 31, 23, 59, tzinfo=timezone.utc)),
        enrollment(datetime(2024, 2, 1, tzinfo=timezone.utc)),
        enrollment(datetime(2024, 2, 2, tzinfo=timezone.utc)),
    ]

    series = enrollments_by_month(enrollments, TODAY)

    assert [item.enrollments for item in series] == [0, 0, 0, 0, 1, 2]


# ============= Buckets =============


def test_engagement_levels_bounds():
    enrollments = [
        enrollment(datetime(2024, 2, 1, tzinfo=timezone.utc), progress)
        for progress in (0, 25, 26, 50, 75, 76, 100)
    ]

    levels = engagement_levels(enrollments)

    assert [(level.name, level.count) for level in levels] == [
        ("Low (0-25%)", 2),
        ("Medium (26-50%)", 2),
        ("High (51-75%)", 1),
        ("Very High (76-100%)", 2),
    ]


def test_progress_distribution_separates_finished():
    enrollments = [
        enrollment(datetime(2024, 2, 1, tzinfo=timezone.utc), progress)
        for progress in (10, 11, 99, 100)
    ]

    ranges = progress_distribution(enrollments)

    assert [bucket.count for bucket in ranges] == [1, 1, 0, 0, 1, 1]


def test_enrollments_by_date_sorted():
    enrollments = [
        enrollment(datetime(2024, 2, 3, 8, tzinfo=timezone.utc)),
        enrollment(datetime(2024, 2, 1, 9, tzinfo=timezone.utc)),
        enrollment(datetime(2024, 2, 3, 17, tzinfo=timezone.utc)),
    ]

    days = enrollments_by_date(enrollments)

    assert [(day.date, day.count) for day in days] == [
        (date(2024, 2, 1), 1),
        (date(2024, 2, 3), 2),
    ]
