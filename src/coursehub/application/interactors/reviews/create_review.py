import logging
from dataclasses import dataclass

from coursehub.application.exceptions.base import (
    AuthorizationError,
    EntityNotFoundError,
)
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import CourseId
from coursehub.domain.course import Course
from coursehub.domain.review import Review

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateReviewRequest:
    course_id: CourseId
    rating: int
    text: str


@dataclass(slots=True, frozen=True)
class CreateReviewInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: CreateReviewRequest) -> Review:
        user = await self.identity_provider.get_current_user()

        course = await self.storage.get_course(request_data.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", request_data.course_id)

        enrollment = await self.storage.get_enrollment(
            user.id,  # type: ignore[arg-type]
            request_data.course_id,
        )
        if enrollment is None:
            logger.info(
                "User %s reviewed course %s without enrollment",
                user.id,
                course.id,
            )
            raise AuthorizationError(
                "You must be enrolled in this course to review it",
            )

        review = await self.storage.create_review(
            Review(
                user_id=user.id,  # type: ignore[arg-type]
                course_id=request_data.course_id,
                rating=request_data.rating,
                text=request_data.text,
            ),
        )
        logger.info("Review %s added to course %s", review.id, course.id)
        return review
