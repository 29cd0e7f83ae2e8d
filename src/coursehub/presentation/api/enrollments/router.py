from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter
from starlette import status

from coursehub.application.interactors.enrollments.confirm_payment import (
    ConfirmPaymentInteractor,
    ConfirmPaymentRequest,
)
from coursehub.application.interactors.enrollments.enroll import (
    EnrollInteractor,
    EnrollRequest,
)
from coursehub.application.interactors.enrollments.get_enrollment_status import (  # noqa: E501
    GetEnrollmentStatusInteractor,
    GetEnrollmentStatusRequest,
)
from coursehub.application.interactors.enrollments.get_my_enrollments import (
    GetMyEnrollmentsInteractor,
)
from coursehub.application.interactors.enrollments.update_progress import (
    UpdateProgressInteractor,
    UpdateProgressRequest,
)
from coursehub.domain.common.identifiers import CourseId, EnrollmentId
from coursehub.presentation.api.enrollments.schema import (
    ConfirmPaymentRequestSchema,
    EnrolledCourseSchema,
    EnrollmentSchema,
    EnrollmentStatusSchema,
    EnrollResponseSchema,
    ProgressRequestSchema,
)

enrollments_router = APIRouter(tags=["enrollments"])


@enrollments_router.post(
    "/courses/{course_id}/enroll",
    status_code=status.HTTP_200_OK,
)
@inject
async def enroll(
    course_id: str,
    interactor: FromDishka[EnrollInteractor],
) -> EnrollResponseSchema:
    """
    Enroll in a course

    Free courses are granted at once. For paid courses the response
    carries the client secret of a payment intent to complete.
    """
    result = await interactor(EnrollRequest(course_id=CourseId(course_id)))
    return EnrollResponseSchema(
        enrollment=EnrollmentSchema.model_validate(result.enrollment),
        requires_payment=not result.enrollment.has_access,
        client_secret=result.client_secret,
    )


@enrollments_router.get(
    "/courses/{course_id}/enrollment",
    status_code=status.HTTP_200_OK,
)
@inject
async def get_enrollment_status(
    course_id: str,
    interactor: FromDishka[GetEnrollmentStatusInteractor],
) -> EnrollmentStatusSchema:
    enrollment = await interactor(
        GetEnrollmentStatusRequest(course_id=CourseId(course_id)),
    )
    if enrollment is None:
        return EnrollmentStatusSchema(enrolled=False)
    return EnrollmentStatusSchema(
        enrolled=enrollment.has_access,
        enrollment=EnrollmentSchema.model_validate(enrollment),
    )


@enrollments_router.get(
    "/enrollments/me",
    status_code=status.HTTP_200_OK,
)
@inject
async def get_my_enrollments(
    interactor: FromDishka[GetMyEnrollmentsInteractor],
) -> list[EnrolledCourseSchema]:
    return [
        EnrolledCourseSchema.from_enrolled_course(item)
        for item in await interactor()
    ]


@enrollments_router.put(
    "/enrollments/{enrollment_id}/progress",
    status_code=status.HTTP_200_OK,
)
@inject
async def update_progress(
    enrollment_id: str,
    request_schema: ProgressRequestSchema,
    interactor: FromDishka[UpdateProgressInteractor],
) -> EnrollmentSchema:
    enrollment = await interactor(
        UpdateProgressRequest(
            enrollment_id=EnrollmentId(enrollment_id),
            progress=request_schema.progress,
        ),
    )
    return EnrollmentSchema.model_validate(enrollment)


@enrollments_router.post(
    "/payments/confirm",
    status_code=status.HTTP_200_OK,
)
@inject
async def confirm_payment(
    request_schema: ConfirmPaymentRequestSchema,
    interactor: FromDishka[ConfirmPaymentInteractor],
) -> EnrollmentSchema:
    enrollment = await interactor(
        ConfirmPaymentRequest(
            payment_intent_id=request_schema.payment_intent_id,
        ),
    )
    return EnrollmentSchema.model_validate(enrollment)
