from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter
from starlette import status

from coursehub.application.interactors.courses.create_course import (
    CreateCourseInteractor,
    CreateCourseRequest,
)
from coursehub.application.interactors.courses.delete_course import (
    DeleteCourseInteractor,
    DeleteCourseRequest,
)
from coursehub.application.interactors.courses.get_course import (
    GetCourseInteractor,
    GetCourseRequest,
)
from coursehub.application.interactors.courses.get_courses import (
    GetCoursesInteractor,
)
from coursehub.application.interactors.courses.get_instructor_courses import (
    GetInstructorCoursesInteractor,
)
from coursehub.application.interactors.courses.update_course import (
    UpdateCourseInteractor,
    UpdateCourseRequest,
)
from coursehub.domain.common.identifiers import CourseId
from coursehub.presentation.api.courses.schema import (
    CourseSchema,
    CreateCourseRequestSchema,
    UpdateCourseRequestSchema,
)

courses_router = APIRouter(prefix="/courses", tags=["courses"])


@courses_router.get(
    "",
    status_code=status.HTTP_200_OK,
)
@inject
async def get_courses(
    interactor: FromDishka[GetCoursesInteractor],
) -> list[CourseSchema]:
    """Published courses, newest first"""
    return [CourseSchema.model_validate(course) for course in await interactor()]


@courses_router.get(
    "/instructor/mine",
    status_code=status.HTTP_200_OK,
)
@inject
async def get_instructor_courses(
    interactor: FromDishka[GetInstructorCoursesInteractor],
) -> list[CourseSchema]:
    """Courses of the calling instructor, drafts included"""
    return [CourseSchema.model_validate(course) for course in await interactor()]


@courses_router.get(
    "/{course_id}",
    status_code=status.HTTP_200_OK,
)
@inject
async def get_course(
    course_id: str,
    interactor: FromDishka[GetCourseInteractor],
) -> CourseSchema:
    course = await interactor(GetCourseRequest(course_id=CourseId(course_id)))
    return CourseSchema.model_validate(course)


@courses_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
)
@inject
async def create_course(
    request_data: CreateCourseRequestSchema,
    interactor: FromDishka[CreateCourseInteractor],
) -> CourseSchema:
    data = CreateCourseRequest(
        title=request_data.title,
        description=request_data.description,
        category=request_data.category,
        level=request_data.level,
        price=request_data.price,
        thumbnail=request_data.thumbnail,
        preview_video=request_data.preview_video,
        requirements=request_data.requirements,
        objectives=request_data.objectives,
        is_published=request_data.is_published,
    )

    return CourseSchema.model_validate(await interactor(data))


@courses_router.put(
    "/{course_id}",
    status_code=status.HTTP_200_OK,
)
@inject
async def update_course(
    course_id: str,
    request_schema: UpdateCourseRequestSchema,
    interactor: FromDishka[UpdateCourseInteractor],
) -> CourseSchema:
    """
    Update course by ID

    Updates only provided fields, leaving others unchanged.
    Only the course instructor or an admin may do this.
    """
    request_data = UpdateCourseRequest(
        course_id=CourseId(course_id),
        title=request_schema.title,
        description=request_schema.description,
        category=request_schema.category,
        level=request_schema.level,
        price=request_schema.price,
        thumbnail=request_schema.thumbnail,
        preview_video=request_schema.preview_video,
        requirements=request_schema.requirements,
        objectives=request_schema.objectives,
        is_published=request_schema.is_published,
    )

    return CourseSchema.model_validate(await interactor(request_data))


@courses_router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
@inject
async def delete_course(
        course_id: str,
        interactor: FromDishka[DeleteCourseInteractor],
) -> None:
    """
    Delete course by ID

    Removes the course with its lessons, enrollments and reviews.
    """
    await interactor(DeleteCourseRequest(course_id=CourseId(course_id)))
