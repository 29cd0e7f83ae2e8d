import logging
from dataclasses import dataclass, replace
from typing import Any, TypeVar

from adaptix import Retort
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from coursehub.application.exceptions.base import (
    CascadeDeleteError,
    ConflictError,
    EntityNotFoundError,
)
from coursehub.application.security import PasswordHasher
from coursehub.application.storage import Storage
from coursehub.domain.aggregates import (
    move_lesson,
    place_lesson,
    renumber_lessons,
    round_rating,
    total_duration,
)
from coursehub.domain.common.identifiers import (
    CourseId,
    EnrollmentId,
    LessonId,
    ReviewId,
    UserId,
)
from coursehub.domain.common.validators import apply_patch, utc_now
from coursehub.domain.course import Course, CourseUpdate
from coursehub.domain.enrollment import (
    CourseSummary,
    EnrolledCourse,
    Enrollment,
    InstructorSummary,
    PaymentStatus,
    check_payment_transition,
)
from coursehub.domain.lesson import Lesson, LessonUpdate
from coursehub.domain.review import Review, ReviewUpdate
from coursehub.domain.user import (
    User,
    UserSettingsUpdate,
    UserUpdate,
    merge_settings,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Document = dict[str, Any]

NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def to_object_id(value: str | None) -> ObjectId | None:
    """Backend form of an identifier, None when it can't be one"""
    if value is None:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def get_changed_fields(original: Document, current: Document) -> Document:
    """
    Compare top-level keys of two dumps and return changed fields.
    Nested structures (settings, lists) are replaced as a whole.
    """
    update_fields = {}

    for key in set(original.keys()) | set(current.keys()):
        current_value = current.get(key)
        if original.get(key) != current_value:
            update_fields[key] = current_value

    return update_fields


@dataclass(slots=True, frozen=True)
class MongoStorage(Storage):
    """
    Storage backed by MongoDB through motor.

    References between entities are stored as ObjectId, uniqueness of
    e-mail and of (user, course) pairs is additionally guarded by unique
    indexes created in ensure_indexes.
    """

    database: AsyncIOMotorDatabase[Document]
    retort: Retort
    password_hasher: PasswordHasher
    name = "mongodb"

    @property
    def users(self) -> AsyncIOMotorCollection[Document]:
        return self.database["users"]

    @property
    def courses(self) -> AsyncIOMotorCollection[Document]:
        return self.database["courses"]

    @property
    def lessons(self) -> AsyncIOMotorCollection[Document]:
        return self.database["lessons"]

    @property
    def enrollments(self) -> AsyncIOMotorCollection[Document]:
        return self.database["enrollments"]

    @property
    def reviews(self) -> AsyncIOMotorCollection[Document]:
        return self.database["reviews"]

    async def ensure_indexes(self) -> None:
        pair = [("user_id", ASCENDING), ("course_id", ASCENDING)]
        await self.users.create_index("email", unique=True)
        await self.courses.create_index("instructor_id")
        await self.lessons.create_index(
            [("course_id", ASCENDING), ("order", ASCENDING)],
        )
        await self.enrollments.create_index(pair, unique=True)
        await self.enrollments.create_index("payment_ref")
        await self.reviews.create_index(pair, unique=True)
        logger.info("MongoDB indexes ensured")

    # Generic document helpers

    def _dump(self, entity: Any) -> Document:
        document = self.retort.dump(entity)
        document.pop("_id", None)
        return document

    async def _find_by_id(
        self,
        collection: AsyncIOMotorCollection[Document],
        entity_id: str,
        model: type[T],
    ) -> T | None:
        object_id = to_object_id(entity_id)
        if object_id is None:
            logger.info("%s id is not an ObjectId: %s", model.__name__, entity_id)
            return None

        document = await collection.find_one({"_id": object_id})
        if not document:
            logger.info("%s not found: %s", model.__name__, entity_id)
            return None

        return self.retort.load(document, model)

    async def _require(
        self,
        collection: AsyncIOMotorCollection[Document],
        entity_id: str,
        model: type[T],
    ) -> T:
        entity = await self._find_by_id(collection, entity_id, model)
        if entity is None:
            raise EntityNotFoundError(model, "id", entity_id)
        return entity

    async def _find_all(
        self,
        collection: AsyncIOMotorCollection[Document],
        query: Document,
        model: type[T],
        sort: list[tuple[str, int]] | None = None,
    ) -> list[T]:
        cursor = collection.find(query)
        if sort:
            cursor = cursor.sort(sort)

        documents = await cursor.to_list(length=None)
        entities = self.retort.load(documents, list[model])  # type: ignore[valid-type]
        logger.debug(
            "Loaded %s %s with filter: %s",
            len(entities),
            model.__name__,
            query,
        )
        return entities

    async def _insert(
        self,
        collection: AsyncIOMotorCollection[Document],
        entity: T,
    ) -> T:
        result = await collection.insert_one(self._dump(entity))
        logger.info(
            "%s added with ID: %s",
            type(entity).__name__,
            result.inserted_id,
        )
        return replace(entity, id=str(result.inserted_id))  # type: ignore[type-var]

    async def _save_changes(
        self,
        collection: AsyncIOMotorCollection[Document],
        original: Any,
        current: Any,
    ) -> None:
        update_fields = get_changed_fields(
            self._dump(original),
            self._dump(current),
        )
        if not update_fields:
            logger.debug("No changes detected for %s", current.id)
            return

        await collection.update_one(
            {"_id": ObjectId(current.id)},
            {"$set": update_fields},
        )
        logger.debug(
            "Updated %s:%s with fields: %s",
            type(current).__name__,
            current.id,
            list(update_fields.keys()),
        )

    async def _update_course_fields(
        self,
        course_id: CourseId,
        increments: Document | None = None,
        values: Document | None = None,
    ) -> None:
        update: Document = {"$set": {"updated_at": utc_now(), **(values or {})}}
        if increments:
            update["$inc"] = increments
        await self.courses.update_one({"_id": ObjectId(course_id)}, update)

    # Users

    async def get_user(self, user_id: UserId) -> User | None:
        return await self._find_by_id(self.users, user_id, User)

    async def get_user_by_email(self, email: str) -> User | None:
        document = await self.users.find_one({"email": email.strip().lower()})
        if not document:
            return None
        return self.retort.load(document, User)

    def _hashed(self, password: str) -> str:
        if self.password_hasher.is_hashed(password):
            return password
        return self.password_hasher.hash(password)

    async def create_user(self, user: User) -> User:
        if await self.get_user_by_email(user.email) is not None:
            raise ConflictError(User, "email already in use")

        try:
            return await self._insert(
                self.users,
                replace(user, password=self._hashed(user.password)),
            )
        except DuplicateKeyError as e:
            raise ConflictError(User, "email already in use") from e

    async def update_user(self, user_id: UserId, update: UserUpdate) -> User:
        user = await self._require(self.users, user_id, User)
        updated = apply_patch(user, update)

        if update.email is not None:
            owner = await self.get_user_by_email(updated.email)
            if owner is not None and owner.id != user_id:
                raise ConflictError(User, "email already in use")
        if update.password is not None:
            updated.password = self._hashed(update.password)

        try:
            await self._save_changes(self.users, user, updated)
        except DuplicateKeyError as e:
            raise ConflictError(User, "email already in use") from e

        logger.info("User updated: %s", user_id)
        return updated

    async def update_user_settings(
        self,
        user_id: UserId,
        update: UserSettingsUpdate,
    ) -> User:
        user = await self._require(self.users, user_id, User)
        updated = replace(
            user,
            settings=merge_settings(user.settings, update),
            updated_at=utc_now(),
        )
        await self._save_changes(self.users, user, updated)
        logger.info("User settings updated: %s", user_id)
        return updated

    async def delete_user(self, user_id: UserId) -> None:
        await self._require(self.users, user_id, User)
        object_id = ObjectId(user_id)

        try:
            enrollments = await self._find_all(
                self.enrollments,
                {"user_id": object_id},
                Enrollment,
            )
            for enrollment in enrollments:
                await self.courses.update_one(
                    {
                        "_id": ObjectId(enrollment.course_id),
                        "total_students": {"$gt": 0},
                    },
                    {"$inc": {"total_students": -1}},
                )
            await self.enrollments.delete_many({"user_id": object_id})

            owned = await self.get_courses_by_instructor(user_id)
            for course in owned:
                await self._delete_course_tree(course.id)  # type: ignore[arg-type]

            reviewed = await self.reviews.distinct(
                "course_id",
                {"user_id": object_id},
            )
            await self.reviews.delete_many({"user_id": object_id})
            for course_id in reviewed:
                await self.update_course_rating(CourseId(str(course_id)))

            await self.users.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.exception("Cascade delete of user %s failed", user_id)
            raise CascadeDeleteError(User, user_id) from e

        logger.info("User deleted: %s", user_id)

    # Courses

    async def create_course(self, course: Course) -> Course:
        await self._require(self.users, course.instructor_id, User)
        return await self._insert(self.courses, course)

    async def get_course(self, course_id: CourseId) -> Course | None:
        return await self._find_by_id(self.courses, course_id, Course)

    async def get_courses(self, published_only: bool = False) -> list[Course]:
        query = {"is_published": True} if published_only else {}
        return await self._find_all(self.courses, query, Course, NEWEST_FIRST)

    async def get_courses_by_instructor(
        self,
        instructor_id: UserId,
    ) -> list[Course]:
        object_id = to_object_id(instructor_id)
        if object_id is None:
            return []
        return await self._find_all(
            self.courses,
            {"instructor_id": object_id},
            Course,
            NEWEST_FIRST,
        )

    async def update_course(
        self,
        course_id: CourseId,
        update: CourseUpdate,
    ) -> Course:
        course = await self._require(self.courses, course_id, Course)
        updated = apply_patch(course, update)
        await self._save_changes(self.courses, course, updated)
        logger.info("Course updated: %s", course_id)
        return updated

    async def _delete_course_tree(self, course_id: CourseId) -> None:
        object_id = ObjectId(course_id)
        try:
            for collection in (self.lessons, self.enrollments, self.reviews):
                result = await collection.delete_many({"course_id": object_id})
                logger.debug(
                    "Deleted %s documents from %s for course %s",
                    result.deleted_count,
                    collection.name,
                    course_id,
                )
            await self.courses.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.exception("Cascade delete of course %s failed", course_id)
            raise CascadeDeleteError(Course, course_id) from e

        logger.info("Course deleted with lessons, enrollments and reviews: %s", course_id)  # noqa: E501

    async def delete_course(self, course_id: CourseId) -> None:
        await self._require(self.courses, course_id, Course)
        await self._delete_course_tree(course_id)

    # Lessons

    async def _set_lesson_order(self, lesson: Lesson) -> None:
        await self.lessons.update_one(
            {"_id": ObjectId(lesson.id)},
            {"$set": {"order": lesson.order, "updated_at": utc_now()}},
        )

    async def create_lesson(self, lesson: Lesson) -> Lesson:
        await self._require(self.courses, lesson.course_id, Course)

        placed, shifted = place_lesson(
            await self.get_lessons_for_course(lesson.course_id),
            lesson,
        )
        for sibling in shifted:
            await self._set_lesson_order(sibling)
        created = await self._insert(self.lessons, placed)

        await self._update_course_fields(
            lesson.course_id,
            increments={"total_lessons": 1, "total_duration": created.duration},
        )
        return created

    async def get_lesson(self, lesson_id: LessonId) -> Lesson | None:
        return await self._find_by_id(self.lessons, lesson_id, Lesson)

    async def get_lessons_for_course(self, course_id: CourseId) -> list[Lesson]:
        object_id = to_object_id(course_id)
        if object_id is None:
            return []
        return await self._find_all(
            self.lessons,
            {"course_id": object_id},
            Lesson,
            [("order", ASCENDING)],
        )

    async def update_lesson(
        self,
        lesson_id: LessonId,
        update: LessonUpdate,
    ) -> Lesson:
        lesson = await self._require(self.lessons, lesson_id, Lesson)

        # order goes through move_lesson to keep positions contiguous
        updated = apply_patch(lesson, replace(update, order=None))
        await self._save_changes(self.lessons, lesson, updated)

        if update.order is not None and update.order != lesson.order:
            siblings = await self.get_lessons_for_course(lesson.course_id)
            for moved in move_lesson(siblings, lesson_id, update.order):
                await self._set_lesson_order(moved)

        if updated.duration != lesson.duration:
            await self._update_course_fields(
                lesson.course_id,
                increments={
                    "total_duration": updated.duration - lesson.duration,
                },
            )

        logger.info("Lesson updated: %s", lesson_id)
        return await self._require(self.lessons, lesson_id, Lesson)

    async def delete_lesson(self, lesson_id: LessonId) -> None:
        lesson = await self._require(self.lessons, lesson_id, Lesson)
        await self.lessons.delete_one({"_id": ObjectId(lesson_id)})

        remaining = await self.get_lessons_for_course(lesson.course_id)
        for renumbered in renumber_lessons(remaining):
            await self._set_lesson_order(renumbered)

        course = await self.get_course(lesson.course_id)
        if course is not None:
            await self._update_course_fields(
                lesson.course_id,
                values={
                    "total_lessons": max(course.total_lessons - 1, 0),
                    "total_duration": total_duration(remaining),
                },
            )
        logger.info("Lesson deleted: %s", lesson_id)

    # Enrollments

    async def create_enrollment(self, enrollment: Enrollment) -> Enrollment:
        await self._require(self.users, enrollment.user_id, User)
        await self._require(self.courses, enrollment.course_id, Course)

        existing = await self.get_enrollment(
            enrollment.user_id,
            enrollment.course_id,
        )
        if existing is not None:
            logger.info("Enrollment already exists: %s", existing.id)
            return existing

        try:
            created = await self._insert(self.enrollments, enrollment)
        except DuplicateKeyError:
            # Lost a race with a concurrent request for the same pair
            logger.info(
                "Concurrent enrollment for user %s in course %s",
                enrollment.user_id,
                enrollment.course_id,
            )
            concurrent = await self.get_enrollment(
                enrollment.user_id,
                enrollment.course_id,
            )
            if concurrent is None:
                raise
            return concurrent

        await self._update_course_fields(
            enrollment.course_id,
            increments={"total_students": 1},
        )
        return created

    async def get_enrollment(
        self,
        user_id: UserId,
        course_id: CourseId,
    ) -> Enrollment | None:
        user_oid = to_object_id(user_id)
        course_oid = to_object_id(course_id)
        if user_oid is None or course_oid is None:
            return None

        document = await self.enrollments.find_one(
            {"user_id": user_oid, "course_id": course_oid},
        )
        if not document:
            return None
        return self.retort.load(document, Enrollment)

    async def get_enrollment_by_id(
        self,
        enrollment_id: EnrollmentId,
    ) -> Enrollment | None:
        return await self._find_by_id(self.enrollments, enrollment_id, Enrollment)

    async def get_enrollment_by_payment_ref(
        self,
        payment_ref: str,
    ) -> Enrollment | None:
        document = await self.enrollments.find_one({"payment_ref": payment_ref})
        if not document:
            return None
        return self.retort.load(document, Enrollment)

    async def get_enrollments_by_user(
        self,
        user_id: UserId,
    ) -> list[EnrolledCourse]:
        object_id = to_object_id(user_id)
        if object_id is None:
            return []

        enrollments = await self._find_all(
            self.enrollments,
            {"user_id": object_id},
            Enrollment,
            [("enrolled_at", DESCENDING), ("_id", DESCENDING)],
        )
        if not enrollments:
            return []

        courses = {
            course.id: course
            for course in await self._find_all(
                self.courses,
                {"_id": {"$in": [ObjectId(e.course_id) for e in enrollments]}},
                Course,
            )
        }
        instructors = {
            user.id: user
            for user in await self._find_all(
                self.users,
                {
                    "_id": {
                        "$in": [
                            ObjectId(c.instructor_id) for c in courses.values()
                        ],
                    },
                },
                User,
            )
        }

        result = []
        for enrollment in enrollments:
            course = courses.get(enrollment.course_id)
            if course is None:
                continue
            instructor = instructors.get(course.instructor_id)
            result.append(
                EnrolledCourse(
                    enrollment=enrollment,
                    course=CourseSummary(
                        id=course.id,  # type: ignore[arg-type]
                        title=course.title,
                        description=course.description,
                        thumbnail=course.thumbnail,
                        instructor=InstructorSummary(
                            id=instructor.id,  # type: ignore[arg-type]
                            name=instructor.display_name,
                        ) if instructor else None,
                    ),
                ),
            )
        return result

    async def get_enrollments_by_course(
        self,
        course_id: CourseId,
    ) -> list[Enrollment]:
        object_id = to_object_id(course_id)
        if object_id is None:
            return []
        return await self._find_all(
            self.enrollments,
            {"course_id": object_id},
            Enrollment,
            [("enrolled_at", DESCENDING), ("_id", DESCENDING)],
        )

    async def update_enrollment_progress(
        self,
        enrollment_id: EnrollmentId,
        progress: int,
    ) -> Enrollment:
        enrollment = await self._require(
            self.enrollments,
            enrollment_id,
            Enrollment,
        )
        # __post_init__ validates progress and derives completed
        updated = replace(
            enrollment,
            progress=progress,
            last_accessed_at=utc_now(),
        )
        await self._save_changes(self.enrollments, enrollment, updated)
        return updated

    async def update_enrollment_payment_status(
        self,
        enrollment_id: EnrollmentId,
        payment_ref: str | None,
        status: PaymentStatus,
    ) -> Enrollment:
        enrollment = await self._require(
            self.enrollments,
            enrollment_id,
            Enrollment,
        )
        check_payment_transition(enrollment.payment_status, status)
        updated = replace(
            enrollment,
            payment_ref=payment_ref or enrollment.payment_ref,
            payment_status=status,
            last_accessed_at=utc_now(),
        )
        await self._save_changes(self.enrollments, enrollment, updated)
        logger.info("Enrollment %s payment status: %s", enrollment_id, status.value)
        return updated

    # Reviews

    async def create_review(self, review: Review) -> Review:
        await self._require(self.users, review.user_id, User)
        await self._require(self.courses, review.course_id, Course)

        existing = await self.reviews.find_one(
            {
                "user_id": ObjectId(review.user_id),
                "course_id": ObjectId(review.course_id),
            },
        )
        if existing:
            raise ConflictError(Review, "course already reviewed by user")

        try:
            created = await self._insert(self.reviews, review)
        except DuplicateKeyError as e:
            raise ConflictError(Review, "course already reviewed by user") from e

        await self.update_course_rating(review.course_id)
        return created

    async def get_review(self, review_id: ReviewId) -> Review | None:
        return await self._find_by_id(self.reviews, review_id, Review)

    async def get_reviews_by_course(self, course_id: CourseId) -> list[Review]:
        object_id = to_object_id(course_id)
        if object_id is None:
            return []
        return await self._find_all(
            self.reviews,
            {"course_id": object_id},
            Review,
            NEWEST_FIRST,
        )

    async def update_review(
        self,
        review_id: ReviewId,
        update: ReviewUpdate,
    ) -> Review:
        review = await self._require(self.reviews, review_id, Review)
        updated = apply_patch(review, update)
        await self._save_changes(self.reviews, review, updated)
        await self.update_course_rating(review.course_id)
        return updated

    async def delete_review(self, review_id: ReviewId) -> None:
        review = await self._require(self.reviews, review_id, Review)
        await self.reviews.delete_one({"_id": ObjectId(review_id)})
        logger.info("Review deleted: %s", review_id)
        await self.update_course_rating(review.course_id)

    async def update_course_rating(self, course_id: CourseId) -> None:
        object_id = to_object_id(course_id)
        if object_id is None or not await self.courses.find_one(
            {"_id": object_id},
            {"_id": 1},
        ):
            return

        cursor = self.reviews.aggregate(
            [
                {"$match": {"course_id": object_id}},
                {
                    "$group": {
                        "_id": "$course_id",
                        "average_rating": {"$avg": "$rating"},
                        "num_reviews": {"$sum": 1},
                    },
                },
            ],
        )
        results = await cursor.to_list(length=None)

        if results:
            average = round_rating(results[0]["average_rating"])
            count = results[0]["num_reviews"]
        else:
            average, count = 0.0, 0

        await self._update_course_fields(
            course_id,
            values={"average_rating": average, "num_reviews": count},
        )
        logger.debug("Course %s rating: %s (%s reviews)", course_id, average, count)
