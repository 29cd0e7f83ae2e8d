import itertools
import os
from dataclasses import dataclass, field, replace
from uuid import uuid4

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient
from motor.motor_asyncio import AsyncIOMotorClient

from coursehub.application.exceptions.base import (
    AuthenticationError,
    PaymentGatewayError,
)
from coursehub.application.payments import PaymentGateway, PaymentIntent
from coursehub.application.security import IdentityProvider
from coursehub.application.storage import Storage
from coursehub.domain.course import Course, CourseCategory, CourseLevel
from coursehub.domain.lesson import Lesson
from coursehub.domain.user import User, UserRole
from coursehub.infrastructure.auth.password_hasher import Pbkdf2PasswordHasher
from coursehub.infrastructure.db.memory_storage import MemoryStorage
from coursehub.infrastructure.db.mongo_storage import MongoStorage
from coursehub.infrastructure.db.retort import build_mongo_retort

MONGO_TEST_URI = os.environ.get("MONGO_TEST_URI")

TEST_PASSWORD = "secret123"  # noqa: S105


# ============= Test doubles =============


@dataclass
class FakePaymentGateway(PaymentGateway):
    """In-process payment intents, settle() plays the card holder"""

    intents: dict[str, PaymentIntent] = field(default_factory=dict)
    created: list[PaymentIntent] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    async def create_payment_intent(
        self,
        amount: float,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        intent_id = f"pi_test_{next(self._ids)}"
        intent = PaymentIntent(
            id=intent_id,
            status="requires_payment_method",
            amount=round(amount * 100),
            currency=currency,
            client_secret=f"{intent_id}_secret",
            metadata=dict(metadata),
        )
        self.intents[intent_id] = intent
        self.created.append(intent)
        return intent

    async def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        intent = self.intents.get(intent_id)
        if intent is None:
            raise PaymentGatewayError(f"No such payment_intent: '{intent_id}'")
        return intent

    def settle(
        self,
        intent_id: str,
        status: str = "succeeded",
        last_error: str | None = None,
    ) -> None:
        self.intents[intent_id] = replace(
            self.intents[intent_id],
            status=status,
            last_error=last_error,
        )


@dataclass
class StaticIdentityProvider(IdentityProvider):
    """Caller fixed by the test, None means anonymous"""

    user: User | None = None

    async def get_current_user(self) -> User:
        if self.user is None:
            raise AuthenticationError()
        return self.user

    async def get_optional_user(self) -> User | None:
        return self.user


# ============= Fixtures =============


@pytest.fixture
def password_hasher():
    """Low iteration count keeps tests fast"""
    return Pbkdf2PasswordHasher(iterations=1_000)


@pytest.fixture
def memory_storage(password_hasher):
    return MemoryStorage(password_hasher)


def mongo_test_client() -> AsyncIOMotorClient | AsyncMongoMockClient:
    """Real server when MONGO_TEST_URI is set, in-process mock otherwise"""
    if MONGO_TEST_URI:
        return AsyncIOMotorClient(
            MONGO_TEST_URI,
            tz_aware=True,
            serverSelectionTimeoutMS=2_000,
        )
    return AsyncMongoMockClient()


@pytest_asyncio.fixture
async def mongo_storage(password_hasher):
    client = mongo_test_client()
    db_name = f"coursehub_test_{uuid4().hex[:12]}"
    storage = MongoStorage(
        database=client[db_name],
        retort=build_mongo_retort(),
        password_hasher=password_hasher,
    )
    await storage.ensure_indexes()

    yield storage

    await client.drop_database(db_name)
    if MONGO_TEST_URI:
        client.close()


@pytest.fixture(params=["memory", "mongo"])
def storage(request):
    """Every storage test runs on both backends"""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
def identity():
    """Anonymous until a test sets identity.user"""
    return StaticIdentityProvider()


@pytest.fixture
def make_user(storage: Storage):
    """Create users with unique e-mails"""
    numbers = itertools.count(1)

    async def _make(role: UserRole = UserRole.STUDENT, **kwargs) -> User:
        number = next(numbers)
        kwargs.setdefault("email", f"user{number}@example.com")
        kwargs.setdefault("name", f"User {number}")
        kwargs.setdefault("password", TEST_PASSWORD)
        return await storage.create_user(User(role=role, **kwargs))

    return _make


@pytest.fixture
def make_course(storage: Storage):
    async def _make(instructor: User, **kwargs) -> Course:
        kwargs.setdefault("title", "Python for beginners")
        kwargs.setdefault("description", "Learn the basics of Python.")
        kwargs.setdefault("category", CourseCategory.WEB_DEVELOPMENT)
        kwargs.setdefault("level", CourseLevel.BEGINNER)
        kwargs.setdefault("is_published", True)
        return await storage.create_course(
            Course(instructor_id=instructor.id, **kwargs),
        )

    return _make


@pytest.fixture
def make_lesson(storage: Storage):
    async def _make(course: Course, **kwargs) -> Lesson:
        kwargs.setdefault("title", "Lesson")
        kwargs.setdefault("content", "Lesson content")
        kwargs.setdefault("duration", 10)
        return await storage.create_lesson(Lesson(course_id=course.id, **kwargs))

    return _make
