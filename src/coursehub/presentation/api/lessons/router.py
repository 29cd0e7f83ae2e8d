from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter
from starlette import status

from coursehub.application.interactors.lessons.create_lesson import (
    CreateLessonInteractor,
    CreateLessonRequest,
)
from coursehub.application.interactors.lessons.delete_lesson import (
    DeleteLessonInteractor,
    DeleteLessonRequest,
)
from coursehub.application.interactors.lessons.get_course_lessons import (
    GetCourseLessonsInteractor,
    GetCourseLessonsRequest,
)
from coursehub.application.interactors.lessons.get_lesson import (
    GetLessonInteractor,
    GetLessonRequest,
)
from coursehub.application.interactors.lessons.update_lesson import (
    UpdateLessonInteractor,
    UpdateLessonRequest,
)
from coursehub.domain.common.identifiers import CourseId, LessonId
from coursehub.presentation.api.lessons.schema import (
    CreateLessonRequestSchema,
    LessonSchema,
    UpdateLessonRequestSchema,
)

lessons_router = APIRouter(tags=["lessons"])


@lessons_router.get(
    "/courses/{course_id}/lessons",
    status_code=status.HTTP_200_OK,
)
@inject
async def get_course_lessons(
    course_id: str,
    interactor: FromDishka[GetCourseLessonsInteractor],
) -> list[LessonSchema]:
    """
    Lessons of a course in order

    Content and video of lessons the caller can't open are hidden.
    """
    views = await interactor(
        GetCourseLessonsRequest(course_id=CourseId(course_id)),
    )
    return [LessonSchema.from_view(view) for view in views]


@lessons_router.post(
    "/courses/{course_id}/lessons",
    status_code=status.HTTP_201_CREATED,
)
@inject
async def create_lesson(
    course_id: str,
    request_schema: CreateLessonRequestSchema,
    interactor: FromDishka[CreateLessonInteractor],
) -> LessonSchema:
    request_data = CreateLessonRequest(
        course_id=CourseId(course_id),
        title=request_schema.title,
        content=request_schema.content,
        description=request_schema.description,
        video_url=request_schema.video_url,
        duration=request_schema.duration,
        order=request_schema.order,
        is_preview=request_schema.is_preview,
    )

    return LessonSchema.from_lesson(await interactor(request_data))


@lessons_router.get(
    "/lessons/{lesson_id}",
    status_code=status.HTTP_200_OK,
)
@inject
async def get_lesson(
    lesson_id: str,
    interactor: FromDishka[GetLessonInteractor],
) -> LessonSchema:
    view = await interactor(GetLessonRequest(lesson_id=LessonId(lesson_id)))
    return LessonSchema.from_view(view)


@lessons_router.put(
    "/lessons/{lesson_id}",
    status_code=status.HTTP_200_OK,
)
@inject
async def update_lesson(
    lesson_id: str,
    request_schema: UpdateLessonRequestSchema,
    interactor: FromDishka[UpdateLessonInteractor],
) -> LessonSchema:
    """Changing order shifts the sibling lessons"""
    request_data = UpdateLessonRequest(
        lesson_id=LessonId(lesson_id),
        title=request_schema.title,
        description=request_schema.description,
        content=request_schema.content,
        video_url=request_schema.video_url,
        duration=request_schema.duration,
        order=request_schema.order,
        is_preview=request_schema.is_preview,
    )

    return LessonSchema.from_lesson(await interactor(request_data))


@lessons_router.delete(
    "/lessons/{lesson_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
@inject
async def delete_lesson(
        lesson_id: str,
        interactor: FromDishka[DeleteLessonInteractor],
) -> None:
    await interactor(DeleteLessonRequest(lesson_id=LessonId(lesson_id)))
