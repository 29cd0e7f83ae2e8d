from dishka import Provider, Scope, provide_all

from coursehub.application.interactors.analytics.course_analytics import (
    CourseAnalyticsInteractor,
)
from coursehub.application.interactors.analytics.instructor_dashboard import (
    InstructorDashboardInteractor,
)
from coursehub.application.interactors.auth.get_current_user import (
    GetCurrentUserInteractor,
)
from coursehub.application.interactors.auth.login import LoginInteractor
from coursehub.application.interactors.auth.register import RegisterInteractor
from coursehub.application.interactors.courses.create_course import (
    CreateCourseInteractor,
)
from coursehub.application.interactors.courses.delete_course import (
    DeleteCourseInteractor,
)
from coursehub.application.interactors.courses.get_course import (
    GetCourseInteractor,
)
from coursehub.application.interactors.courses.get_courses import (
    GetCoursesInteractor,
)
from coursehub.application.interactors.courses.get_instructor_courses import (
    GetInstructorCoursesInteractor,
)
from coursehub.application.interactors.courses.update_course import (
    UpdateCourseInteractor,
)
from coursehub.application.interactors.enrollments.confirm_payment import (
    ConfirmPaymentInteractor,
)
from coursehub.application.interactors.enrollments.enroll import (
    EnrollInteractor,
)
from coursehub.application.interactors.enrollments.get_enrollment_status import (  # noqa: E501
    GetEnrollmentStatusInteractor,
)
from coursehub.application.interactors.enrollments.get_my_enrollments import (
    GetMyEnrollmentsInteractor,
)
from coursehub.application.interactors.enrollments.update_progress import (
    UpdateProgressInteractor,
)
from coursehub.application.interactors.lessons.create_lesson import (
    CreateLessonInteractor,
)
from coursehub.application.interactors.lessons.delete_lesson import (
    DeleteLessonInteractor,
)
from coursehub.application.interactors.lessons.get_course_lessons import (
    GetCourseLessonsInteractor,
)
from coursehub.application.interactors.lessons.get_lesson import (
    GetLessonInteractor,
)
from coursehub.application.interactors.lessons.update_lesson import (
    UpdateLessonInteractor,
)
from coursehub.application.interactors.profile.change_password import (
    ChangePasswordInteractor,
)
from coursehub.application.interactors.profile.delete_account import (
    DeleteAccountInteractor,
)
from coursehub.application.interactors.profile.export_profile import (
    ExportProfileInteractor,
)
from coursehub.application.interactors.profile.update_profile import (
    UpdateProfileInteractor,
)
from coursehub.application.interactors.profile.update_settings import (
    UpdateSettingsInteractor,
)
from coursehub.application.interactors.reviews.create_review import (
    CreateReviewInteractor,
)
from coursehub.application.interactors.reviews.delete_review import (
    DeleteReviewInteractor,
)
from coursehub.application.interactors.reviews.get_course_reviews import (
    GetCourseReviewsInteractor,
)
from coursehub.application.interactors.reviews.update_review import (
    UpdateReviewInteractor,
)


class ApplicationProvider(Provider):
    auth = provide_all(
        RegisterInteractor,
        LoginInteractor,
        GetCurrentUserInteractor,
        scope=Scope.REQUEST,
    )

    profile = provide_all(
        UpdateProfileInteractor,
        ChangePasswordInteractor,
        UpdateSettingsInteractor,
        DeleteAccountInteractor,
        ExportProfileInteractor,
        scope=Scope.REQUEST,
    )

    courses = provide_all(
        CreateCourseInteractor,
        GetCourseInteractor,
        GetCoursesInteractor,
        GetInstructorCoursesInteractor,
        UpdateCourseInteractor,
        DeleteCourseInteractor,
        scope=Scope.REQUEST,
    )

    lessons = provide_all(
        GetCourseLessonsInteractor,
        GetLessonInteractor,
        CreateLessonInteractor,
        UpdateLessonInteractor,
        DeleteLessonInteractor,
        scope=Scope.REQUEST,
    )

    enrollments = provide_all(
        EnrollInteractor,
        ConfirmPaymentInteractor,
        UpdateProgressInteractor,
        GetMyEnrollmentsInteractor,
        GetEnrollmentStatusInteractor,
        scope=Scope.REQUEST,
    )

    reviews = provide_all(
        GetCourseReviewsInteractor,
        CreateReviewInteractor,
        UpdateReviewInteractor,
        DeleteReviewInteractor,
        scope=Scope.REQUEST,
    )

    analytics = provide_all(
        InstructorDashboardInteractor,
        CourseAnalyticsInteractor,
        scope=Scope.REQUEST,
    )
