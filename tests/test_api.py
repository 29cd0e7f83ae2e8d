import itertools

import pytest
from dishka import Provider, Scope, provide
from fastapi.testclient import TestClient

from coursehub.application.payments import PaymentGateway
from coursehub.application.security import PasswordHasher
from coursehub.bootstrap.configs import AuthConfig, Config
from coursehub.bootstrap.entrypoints.api import create_app

PASSWORD = "secret123"  # noqa: S105


class OverridesProvider(Provider):
    """Swap slow hashing and the real payment provider for test doubles"""

    def __init__(
        self,
        password_hasher: PasswordHasher,
        payment_gateway: PaymentGateway,
    ) -> None:
        super().__init__(scope=Scope.APP)
        self.password_hasher = password_hasher
        self.payment_gateway = payment_gateway

    @provide
    def get_password_hasher(self) -> PasswordHasher:
        return self.password_hasher

    @provide
    def get_payment_gateway(self) -> PaymentGateway:
        return self.payment_gateway


@pytest.fixture
def client(password_hasher, payment_gateway):
    config = Config(auth=AuthConfig(secret_key="test"), environment="test")
    app = create_app(
        config,
        OverridesProvider(password_hasher, payment_gateway),
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user and return its bearer headers"""
    numbers = itertools.count(1)

    def _register(role: str = "student") -> dict[str, str]:
        number = next(numbers)
        response = client.post(
            "/api/auth/register",
            json={
                "name": f"User {number}",
                "email": f"user{number}@example.com",
                "password": PASSWORD,
                "role": role,
            },
        )
        assert response.status_code == 201, response.text
        # Switch users by header only
        client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def create_course(client):
    def _create(headers: dict[str, str], **fields) -> dict:
        body = {
            "title": "Intro to FastAPI",
            "description": "Build async web APIs in Python.",
            "category": "web-development",
            "level": "beginner",
            "is_published": True,
            **fields,
        }
        response = client.post("/api/courses", json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


# ============= Health and auth =============


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "storage": "memory"}
    assert response.headers["X-Request-ID"]


def test_request_id_is_echoed(client):
    response = client.get("/api/health", headers={"X-Request-ID": "abc"})

    assert response.headers["X-Request-ID"] == "abc"


def test_register_sets_cookie_and_hides_password(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Ann", "email": "ann@example.com", "password": PASSWORD},
    )

    body = response.json()
    assert response.status_code == 201
    assert "password" not in body["user"]
    assert body["user"]["role"] == "student"
    assert client.cookies.get("authToken") == body["token"]

    me = client.get("/api/auth/user")
    assert me.json()["email"] == "ann@example.com"


def test_login_and_logout(client, register):
    register()

    response = client.post(
        "/api/auth/login",
        json={"email": "user1@example.com", "password": PASSWORD},
    )
    assert response.status_code == 200
    assert client.get("/api/auth/user").status_code == 200

    client.post("/api/auth/logout")
    assert client.get("/api/auth/user").status_code == 401


def test_wrong_password_is_401(client, register):
    register()

    response = client.post(
        "/api/auth/login",
        json={"email": "user1@example.com", "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid credentials"}


def test_duplicate_email_is_400(client, register):
    register()

    response = client.post(
        "/api/auth/register",
        json={"name": "Again", "email": "user1@example.com", "password": PASSWORD},
    )

    assert response.status_code == 400


def test_missing_field_is_400(client):
    response = client.post("/api/auth/register", json={"email": "x@example.com"})

    body = response.json()
    assert response.status_code == 400
    assert body["detail"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"name", "password"}


# ============= Courses =============


def test_course_crud(client, register, create_course):
    instructor = register("instructor")
    course = create_course(instructor, price=19.99)

    listed = client.get("/api/courses").json()
    assert [item["id"] for item in listed] == [course["id"]]

    updated = client.put(
        f"/api/courses/{course['id']}",
        json={"title": "Renamed"},
        headers=instructor,
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Renamed"
    assert updated.json()["price"] == 19.99

    deleted = client.delete(f"/api/courses/{course['id']}", headers=instructor)
    assert deleted.status_code == 204
    assert client.get(f"/api/courses/{course['id']}").status_code == 404


def test_student_cannot_create_course_403(client, register):
    response = client.post(
        "/api/courses",
        json={
            "title": "Nope",
            "description": "Students can't publish",
            "category": "other",
            "level": "beginner",
        },
        headers=register(),
    )

    assert response.status_code == 403


def test_anonymous_create_course_401(client):
    response = client.post(
        "/api/courses",
        json={
            "title": "Nope",
            "description": "No token",
            "category": "other",
            "level": "beginner",
        },
    )

    assert response.status_code == 401


def test_other_instructor_cannot_update_403(client, register, create_course):
    course = create_course(register("instructor"))

    response = client.put(
        f"/api/courses/{course['id']}",
        json={"title": "Hijacked"},
        headers=register("instructor"),
    )

    assert response.status_code == 403


def test_negative_price_is_400(client, register, create_course):
    instructor = register("instructor")
    course = create_course(instructor)

    response = client.put(
        f"/api/courses/{course['id']}",
        json={"price": -5},
        headers=instructor,
    )

    assert response.status_code == 400
    assert "price" in response.json()["detail"]


def test_drafts_listed_for_instructor_only(client, register, create_course):
    instructor = register("instructor")
    draft = create_course(instructor, is_published=False)

    assert client.get("/api/courses").json() == []
    assert client.get(f"/api/courses/{draft['id']}").status_code == 404
    assert client.get(f"/api/courses/{draft['id']}/lessons").status_code == 404
    mine = client.get("/api/courses/instructor/mine", headers=instructor).json()
    assert [item["id"] for item in mine] == [draft["id"]]


# ============= Lessons and enrollment =============


def test_lessons_unlock_after_free_enrollment(client, register, create_course):
    instructor = register("instructor")
    course = create_course(instructor)
    for title, preview in (("Welcome", True), ("Deep dive", False)):
        response = client.post(
            f"/api/courses/{course['id']}/lessons",
            json={"title": title, "content": f"{title} body", "is_preview": preview},
            headers=instructor,
        )
        assert response.status_code == 201, response.text
    student = register()

    locked = client.get(f"/api/courses/{course['id']}/lessons").json()
    enrolled = client.post(f"/api/courses/{course['id']}/enroll", headers=student)
    unlocked = client.get(
        f"/api/courses/{course['id']}/lessons",
        headers=student,
    ).json()

    assert [lesson["locked"] for lesson in locked] == [False, True]
    assert locked[1]["content"] is None
    assert enrolled.json()["requires_payment"] is False
    assert [lesson["content"] for lesson in unlocked] == [
        "Welcome body",
        "Deep dive body",
    ]


def test_paid_enrollment_flow(client, register, create_course, payment_gateway):
    course = create_course(register("instructor"), price=25)
    student = register()

    enrolled = client.post(
        f"/api/courses/{course['id']}/enroll",
        headers=student,
    ).json()
    assert enrolled["requires_payment"] is True
    assert enrolled["client_secret"]

    intent_id = enrolled["enrollment"]["payment_ref"]
    payment_gateway.settle(intent_id)
    confirmed = client.post(
        "/api/payments/confirm",
        json={"payment_intent_id": intent_id},
        headers=student,
    )
    assert confirmed.json()["payment_status"] == "completed"

    status = client.get(
        f"/api/courses/{course['id']}/enrollment",
        headers=student,
    ).json()
    assert status["enrolled"] is True

    progress = client.put(
        f"/api/enrollments/{status['enrollment']['id']}/progress",
        json={"progress": 100},
        headers=student,
    )
    assert progress.json()["completed"] is True

    mine = client.get("/api/enrollments/me", headers=student).json()
    assert mine[0]["course"]["title"] == course["title"]
    assert mine[0]["course"]["instructor"]["name"] == "User 1"


def test_progress_out_of_range_is_400(client, register, create_course):
    course = create_course(register("instructor"))
    student = register()
    enrollment = client.post(
        f"/api/courses/{course['id']}/enroll",
        headers=student,
    ).json()["enrollment"]

    response = client.put(
        f"/api/enrollments/{enrollment['id']}/progress",
        json={"progress": 150},
        headers=student,
    )

    assert response.status_code == 400


# ============= Reviews and profile =============


def test_review_requires_enrollment(client, register, create_course):
    course = create_course(register("instructor"))
    student = register()
    url = f"/api/reviews/course/{course['id']}"

    assert client.post(url, json={"rating": 5, "text": "Great"}, headers=student).status_code == 403  # noqa: E501

    client.post(f"/api/courses/{course['id']}/enroll", headers=student)
    created = client.post(url, json={"rating": 5, "text": "Great"}, headers=student)
    duplicate = client.post(url, json={"rating": 3, "text": "Again"}, headers=student)

    assert created.status_code == 201
    assert duplicate.status_code == 400
    reviewed = client.get(f"/api/courses/{course['id']}").json()
    assert (reviewed["average_rating"], reviewed["num_reviews"]) == (5.0, 1)


def test_profile_update_and_delete(client, register):
    headers = register()

    updated = client.patch(
        "/api/profile",
        json={"bio": "Learning every day"},
        headers=headers,
    )
    settings = client.patch(
        "/api/profile/settings",
        json={"notifications": {"promotions": True}},
        headers=headers,
    )

    assert updated.json()["bio"] == "Learning every day"
    assert settings.json()["settings"]["notifications"]["promotions"] is True
    assert settings.json()["settings"]["notifications"]["course_updates"] is True

    assert client.delete("/api/profile", headers=headers).status_code == 204
    assert client.get("/api/profile", headers=headers).status_code == 401


def test_change_password_wrong_current_is_400(client, register):
    response = client.post(
        "/api/profile/password",
        json={"current_password": "nope", "new_password": "another1"},
        headers=register(),
    )

    assert response.status_code == 400


def test_instructor_dashboard(client, register, create_course):
    instructor = register("instructor")
    course = create_course(instructor)
    client.post(f"/api/courses/{course['id']}/enroll", headers=register())

    dashboard = client.get("/api/analytics/instructor/dashboard", headers=instructor)

    body = dashboard.json()
    assert dashboard.status_code == 200
    assert body["total_courses"] == 1
    assert body["total_students"] == 1
    assert body["course_stats"][0]["students"] == 1


def test_course_analytics_owner_only(client, register, create_course):
    instructor = register("instructor")
    course = create_course(instructor, price=10)
    client.post(f"/api/courses/{course['id']}/enroll", headers=register())
    url = f"/api/analytics/instructor/course/{course['id']}"

    owned = client.get(url, headers=instructor)
    foreign = client.get(url, headers=register("instructor"))

    assert owned.status_code == 200
    assert owned.json()["course_title"] == course["title"]
    assert owned.json()["total_enrollments"] == 0
    assert len(owned.json()["progress_distribution"]) == 6
    assert foreign.status_code == 404


def test_profile_export(client, register, create_course):
    instructor = register("instructor")
    course = create_course(instructor)
    client.post(f"/api/courses/{course['id']}/enroll", headers=instructor)

    response = client.get("/api/profile/export", headers=instructor)

    body = response.json()
    assert response.status_code == 200
    assert "password" not in body["profile"]
    assert [item["course_id"] for item in body["enrollments"]] == [course["id"]]
    assert [item["id"] for item in body["instructor_courses"]] == [course["id"]]
    assert body["exported_at"]
