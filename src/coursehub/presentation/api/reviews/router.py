from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter
from starlette import status

from coursehub.application.interactors.reviews.create_review import (
    CreateReviewInteractor,
    CreateReviewRequest,
)
from coursehub.application.interactors.reviews.delete_review import (
    DeleteReviewInteractor,
    DeleteReviewRequest,
)
from coursehub.application.interactors.reviews.get_course_reviews import (
    GetCourseReviewsInteractor,
    GetCourseReviewsRequest,
)
from coursehub.application.interactors.reviews.update_review import (
    UpdateReviewInteractor,
    UpdateReviewRequest,
)
from coursehub.domain.common.identifiers import CourseId, ReviewId
from coursehub.presentation.api.reviews.schema import (
    CreateReviewRequestSchema,
    ReviewSchema,
    UpdateReviewRequestSchema,
)

reviews_router = APIRouter(prefix="/reviews", tags=["reviews"])


@reviews_router.get(
    "/course/{course_id}",
    status_code=status.HTTP_200_OK,
)
@inject
async def get_course_reviews(
    course_id: str,
    interactor: FromDishka[GetCourseReviewsInteractor],
) -> list[ReviewSchema]:
    reviews = await interactor(
        GetCourseReviewsRequest(course_id=CourseId(course_id)),
    )
    return [ReviewSchema.model_validate(review) for review in reviews]


@reviews_router.post(
    "/course/{course_id}",
    status_code=status.HTTP_201_CREATED,
)
@inject
async def create_review(
    course_id: str,
    request_schema: CreateReviewRequestSchema,
    interactor: FromDishka[CreateReviewInteractor],
) -> ReviewSchema:
    """One review per enrolled user and course"""
    review = await interactor(
        CreateReviewRequest(
            course_id=CourseId(course_id),
            rating=request_schema.rating,
            text=request_schema.text,
        ),
    )
    return ReviewSchema.model_validate(review)


@reviews_router.put(
    "/{review_id}",
    status_code=status.HTTP_200_OK,
)
@inject
async def update_review(
    review_id: str,
    request_schema: UpdateReviewRequestSchema,
    interactor: FromDishka[UpdateReviewInteractor],
) -> ReviewSchema:
    review = await interactor(
        UpdateReviewRequest(
            review_id=ReviewId(review_id),
            rating=request_schema.rating,
            text=request_schema.text,
        ),
    )
    return ReviewSchema.model_validate(review)


@reviews_router.delete(
    "/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
@inject
async def delete_review(
        review_id: str,
        interactor: FromDishka[DeleteReviewInteractor],
) -> None:
    """Allowed for the author and the course instructor"""
    await interactor(DeleteReviewRequest(review_id=ReviewId(review_id)))
