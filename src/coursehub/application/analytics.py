"""Chart series for instructor analytics, computed over paid enrollments."""
import calendar
import math
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from coursehub.domain.enrollment import Enrollment

RECENT_MONTHS = 6

# (label, highest progress in the bucket)
ENGAGEMENT_LEVELS = (
    ("Low (0-25%)", 25),
    ("Medium (26-50%)", 50),
    ("High (51-75%)", 75),
    ("Very High (76-100%)", 100),
)
PROGRESS_RANGES = (
    ("0-10%", 10),
    ("11-25%", 25),
    ("26-50%", 50),
    ("51-75%", 75),
    ("76-99%", 99),
    ("100%", 100),
)


@dataclass(frozen=True, slots=True)
class MonthlyRevenue:
    name: str
    revenue: float


@dataclass(frozen=True, slots=True)
class MonthlyEnrollments:
    name: str
    enrollments: int


@dataclass(frozen=True, slots=True)
class CountBucket:
    name: str
    count: int


@dataclass(frozen=True, slots=True)
class DailyEnrollments:
    date: date
    count: int


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percentage(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return round_half_up(part / whole * 100)


def average_progress(enrollments: Sequence[Enrollment]) -> int:
    if not enrollments:
        return 0
    total = sum(enrollment.progress for enrollment in enrollments)
    return round_half_up(total / len(enrollments))


def recent_months(today: date, count: int = RECENT_MONTHS) -> list[tuple[int, int]]:
    """(year, month) pairs, oldest first, ending with the month of today"""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
    return months[::-1]


def revenue_by_month(
    sales: Iterable[tuple[Enrollment, float]],
    today: date,
) -> list[MonthlyRevenue]:
    months = recent_months(today)
    totals = dict.fromkeys(months, 0.0)
    for enrollment, price in sales:
        key = (enrollment.enrolled_at.year, enrollment.enrolled_at.month)
        if key in totals:
            totals[key] += price
    return [
        MonthlyRevenue(
            name=calendar.month_abbr[month],
            revenue=round(totals[(year, month)], 2),
        )
        for year, month in months
    ]


def enrollments_by_month(
    enrollments: Iterable[Enrollment],
    today: date,
) -> list[MonthlyEnrollments]:
    months = recent_months(today)
    counts = Counter(
        (enrollment.enrolled_at.year, enrollment.enrolled_at.month)
        for enrollment in enrollments
    )
    return [
        MonthlyEnrollments(
            name=calendar.month_abbr[month],
            enrollments=counts[(year, month)],
        )
        for year, month in months
    ]


def _bucket_counts(
    enrollments: Iterable[Enrollment],
    buckets: Sequence[tuple[str, int]],
) -> list[CountBucket]:
    counts = Counter(
        next(name for name, upper in buckets if enrollment.progress <= upper)
        for enrollment in enrollments
    )
    return [CountBucket(name=name, count=counts[name]) for name, _ in buckets]


def engagement_levels(enrollments: Iterable[Enrollment]) -> list[CountBucket]:
    return _bucket_counts(enrollments, ENGAGEMENT_LEVELS)


def progress_distribution(enrollments: Iterable[Enrollment]) -> list[CountBucket]:
    return _bucket_counts(enrollments, PROGRESS_RANGES)


def enrollments_by_date(
    enrollments: Iterable[Enrollment],
) -> list[DailyEnrollments]:
    counts = Counter(enrollment.enrolled_at.date() for enrollment in enrollments)
    return [
        DailyEnrollments(date=day, count=count)
        for day, count in sorted(counts.items())
    ]
