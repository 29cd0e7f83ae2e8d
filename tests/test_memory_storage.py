import pytest

from coursehub.domain.course import Course, CourseCategory, CourseLevel
from coursehub.domain.lesson import Lesson
from coursehub.domain.user import User, UserRole
from coursehub.infrastructure.db.memory_storage import MemoryStorage


@pytest.fixture
def storage(memory_storage):
    return memory_storage


async def create_instructor(storage) -> User:
    return await storage.create_user(
        User(
            email="tutor@example.com",
            password="secret123",
            role=UserRole.INSTRUCTOR,
        ),
    )


async def create_course(storage, instructor: User) -> Course:
    return await storage.create_course(
        Course(
            title="Intro",
            description="Introduction",
            category=CourseCategory.OTHER,
            level=CourseLevel.BEGINNER,
            instructor_id=instructor.id,
        ),
    )


@pytest.mark.asyncio
async def test_ids_are_sequential_per_entity(storage):
    instructor = await create_instructor(storage)
    first = await create_course(storage, instructor)
    second = await create_course(storage, instructor)

    assert instructor.id == "1"
    assert (first.id, second.id) == ("1", "2")


@pytest.mark.asyncio
async def test_returned_entities_are_copies(storage):
    """Mutating a returned entity doesn't touch stored state"""
    instructor = await create_instructor(storage)
    course = await create_course(storage, instructor)

    course.title = "Changed outside"
    course.requirements.append("Leaked")
    fetched = await storage.get_course(course.id)
    fetched.objectives.append("Leaked")

    stored = await storage.get_course(course.id)
    assert stored.title == "Intro"
    assert stored.requirements == []
    assert stored.objectives == []


@pytest.mark.asyncio
async def test_lesson_list_is_a_copy(storage):
    instructor = await create_instructor(storage)
    course = await create_course(storage, instructor)
    await storage.create_lesson(
        Lesson(title="One", content="Body", course_id=course.id),
    )

    lessons = await storage.get_lessons_for_course(course.id)
    lessons[0].order = 42

    stored = await storage.get_lessons_for_course(course.id)
    assert stored[0].order == 1


@pytest.mark.asyncio
async def test_entities_do_not_survive_new_instance(password_hasher):
    first = MemoryStorage(password_hasher)
    await create_instructor(first)

    second = MemoryStorage(password_hasher)
    assert await second.get_user_by_email("tutor@example.com") is None
