from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from coursehub.domain.enrollment import EnrolledCourse, PaymentStatus


class EnrollmentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    course_id: str
    progress: int
    completed: bool
    payment_status: PaymentStatus
    payment_ref: str | None
    enrolled_at: datetime
    last_accessed_at: datetime


class InstructorSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class CourseSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    thumbnail: str
    instructor: InstructorSummarySchema | None


class EnrolledCourseSchema(EnrollmentSchema):
    course: CourseSummarySchema

    @classmethod
    def from_enrolled_course(cls, item: EnrolledCourse) -> "EnrolledCourseSchema":
        enrollment = EnrollmentSchema.model_validate(item.enrollment)
        return cls(
            **enrollment.model_dump(),
            course=CourseSummarySchema.model_validate(item.course),
        )


class EnrollResponseSchema(BaseModel):
    enrollment: EnrollmentSchema
    requires_payment: bool
    client_secret: str | None = None


class EnrollmentStatusSchema(BaseModel):
    enrolled: bool
    enrollment: EnrollmentSchema | None = None


class ProgressRequestSchema(BaseModel):
    progress: int = Field(..., description="Percent, 0 to 100")


class ConfirmPaymentRequestSchema(BaseModel):
    payment_intent_id: str
