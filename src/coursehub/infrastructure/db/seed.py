import logging

from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import UserId
from coursehub.domain.course import Course, CourseCategory, CourseLevel
from coursehub.domain.enrollment import Enrollment, PaymentStatus
from coursehub.domain.lesson import Lesson
from coursehub.domain.review import Review
from coursehub.domain.user import User, UserRole

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"  # noqa: S105

# (title, content, duration in minutes, is_preview)
LessonSeed = tuple[str, str, int, bool]


def _demo_courses(
    instructor_id: UserId,
) -> list[tuple[Course, tuple[LessonSeed, ...]]]:
    return [
        (
            Course(
                title="Modern Web Development",
                description="Build and deploy full-stack web applications.",
                category=CourseCategory.WEB_DEVELOPMENT,
                level=CourseLevel.BEGINNER,
                instructor_id=instructor_id,
                is_published=True,
                requirements=["A computer with internet access"],
                objectives=["Write HTML and CSS", "Call an HTTP API"],
            ),
            (
                ("Welcome", "What this course covers.", 5, True),
                ("HTML basics", "Documents, elements and attributes.", 20, False),
                ("Styling with CSS", "Selectors and the box model.", 25, False),
            ),
        ),
        (
            Course(
                title="Data Science Foundations",
                description="Explore, clean and visualise real data sets.",
                category=CourseCategory.DATA_SCIENCE,
                level=CourseLevel.INTERMEDIATE,
                instructor_id=instructor_id,
                price=49.99,
                is_published=True,
                requirements=["Basic programming"],
                objectives=["Load and clean data", "Plot distributions"],
            ),
            (
                ("Course overview", "Tools and data sets used.", 8, True),
                ("Working with tables", "Filtering, grouping and joins.", 30, False),
            ),
        ),
    ]


async def seed_demo_data(storage: Storage) -> None:
    """Populate an empty storage with demo users, courses and reviews"""
    if await storage.get_courses():
        logger.info("Storage already has courses, demo seed skipped")
        return

    instructor = await storage.create_user(
        User(
            email="instructor@example.com",
            password=DEMO_PASSWORD,
            name="Demo Instructor",
            role=UserRole.INSTRUCTOR,
            bio="Teaches the demo courses.",
        ),
    )
    student = await storage.create_user(
        User(
            email="student@example.com",
            password=DEMO_PASSWORD,
            name="Demo Student",
        ),
    )
    assert instructor.id is not None
    assert student.id is not None

    free_course: Course | None = None
    for course, lessons in _demo_courses(instructor.id):
        created = await storage.create_course(course)
        assert created.id is not None
        for title, content, duration, is_preview in lessons:
            await storage.create_lesson(
                Lesson(
                    title=title,
                    content=content,
                    duration=duration,
                    is_preview=is_preview,
                    course_id=created.id,
                ),
            )
        if created.is_free and free_course is None:
            free_course = created

    assert free_course is not None and free_course.id is not None
    await storage.create_enrollment(
        Enrollment(
            user_id=student.id,
            course_id=free_course.id,
            progress=40,
            payment_status=PaymentStatus.COMPLETED,
        ),
    )
    await storage.create_review(
        Review(
            user_id=student.id,
            course_id=free_course.id,
            rating=5,
            text="Clear explanations and good pacing.",
        ),
    )

    logger.info(
        "Demo data seeded: %s and %s with password %s",
        instructor.email,
        student.email,
        DEMO_PASSWORD,
    )
