from dataclasses import dataclass

from coursehub.application.access_policy import ensure_review_author
from coursehub.application.exceptions.base import EntityNotFoundError
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.common.identifiers import ReviewId
from coursehub.domain.review import Review, ReviewUpdate


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateReviewRequest:
    review_id: ReviewId
    rating: int | None = None
    text: str | None = None


@dataclass(slots=True, frozen=True)
class UpdateReviewInteractor:
    storage: Storage
    identity_provider: IdentityProvider

    async def __call__(self, request_data: UpdateReviewRequest) -> Review:
        user = await self.identity_provider.get_current_user()

        review = await self.storage.get_review(request_data.review_id)
        if review is None:
            raise EntityNotFoundError(Review, "id", request_data.review_id)
        ensure_review_author(user, review)

        return await self.storage.update_review(
            request_data.review_id,
            ReviewUpdate(rating=request_data.rating, text=request_data.text),
        )
