import logging
from dataclasses import dataclass

from coursehub.application.access_policy import ensure_can_delete_review
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import ReviewId
from coursehub.domain.course import Course
from coursehub.domain.review import Review

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class DeleteReviewRequest:
    review_id: ReviewId


@dataclass(slots=True, frozen=True)
class DeleteReviewInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: DeleteReviewRequest) -> None:
        user = await self.identity_provider.get_current_user()

        review = await self.storage.get_review(request_data.review_id)
        if review is None:
            raise EntityNotFoundError(Review, "id", request_data.review_id)
        course = await self.storage.get_course(review.course_id)
        if course is None:
            raise EntityNotFoundError(Course, "id", review.course_id)
        ensure_can_delete_review(user, review, course)

        await self.storage.delete_review(request_data.review_id)
        logger.info("Review %s deleted by %s", request_data.review_id, user.id)
