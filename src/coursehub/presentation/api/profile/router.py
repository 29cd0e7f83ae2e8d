from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter, Response
from starlette import status

from coursehub.application.interactors.auth.get_current_user import (
    GetCurrentUserInteractor,
)
from coursehub.application.interactors.profile.change_password import (
    ChangePasswordInteractor,
    ChangePasswordRequest,
)
from coursehub.application.interactors.profile.delete_account import (
    DeleteAccountInteractor,
)
from coursehub.application.interactors.profile.export_profile import (
    ExportProfileInteractor,
)
from coursehub.application.interactors.profile.update_profile import (
    UpdateProfileInteractor,
    UpdateProfileRequest,
)
from coursehub.application.interactors.profile.update_settings import (
    UpdateSettingsInteractor,
)
from coursehub.bootstrap.configs import AuthConfig
from coursehub.domain.user import (
    NotificationSettingsUpdate,
    PrivacySettingsUpdate,
    UserSettingsUpdate,
)
from coursehub.presentation.api.auth.schema import UserSchema
from coursehub.presentation.api.profile.schema import (
    ChangePasswordRequestSchema,
    ProfileExportSchema,
    UpdateProfileRequestSchema,
    UpdateSettingsRequestSchema,
)

profile_router = APIRouter(prefix="/profile", tags=["profile"])


@profile_router.get(
    "",
    status_code=status.HTTP_200_OK,
)
@inject
async def get_profile(
    interactor: FromDishka[GetCurrentUserInteractor],
) -> UserSchema:
    return UserSchema.model_validate(await interactor())


@profile_router.get(
    "/export",
    status_code=status.HTTP_200_OK,
)
@inject
async def export_profile(
    interactor: FromDishka[ExportProfileInteractor],
) -> ProfileExportSchema:
    """Profile, enrollments and courses of the caller, password excluded"""
    return ProfileExportSchema.model_validate(await interactor())


@profile_router.patch(
    "",
    status_code=status.HTTP_200_OK,
)
@inject
async def update_profile(
    request_schema: UpdateProfileRequestSchema,
    interactor: FromDishka[UpdateProfileInteractor],
) -> UserSchema:
    user = await interactor(
        UpdateProfileRequest(
            email=request_schema.email,
            name=request_schema.name,
            username=request_schema.username,
            full_name=request_schema.full_name,
            bio=request_schema.bio,
            website=request_schema.website,
            profile_picture=request_schema.profile_picture,
        ),
    )
    return UserSchema.model_validate(user)


@profile_router.post(
    "/password",
    status_code=status.HTTP_200_OK,
)
@inject
async def change_password(
    request_schema: ChangePasswordRequestSchema,
    interactor: FromDishka[ChangePasswordInteractor],
) -> dict[str, str]:
    await interactor(
        ChangePasswordRequest(
            current_password=request_schema.current_password,
            new_password=request_schema.new_password,
        ),
    )
    return {"message": "Password updated"}


@profile_router.patch(
    "/settings",
    status_code=status.HTTP_200_OK,
)
@inject
async def update_settings(
    request_schema: UpdateSettingsRequestSchema,
    interactor: FromDishka[UpdateSettingsInteractor],
) -> UserSchema:
    notifications = request_schema.notifications
    privacy = request_schema.privacy
    user = await interactor(
        UserSettingsUpdate(
            notifications=NotificationSettingsUpdate(
                **notifications.model_dump(),
            ) if notifications else None,
            privacy=PrivacySettingsUpdate(
                **privacy.model_dump(),
            ) if privacy else None,
        ),
    )
    return UserSchema.model_validate(user)


@profile_router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
)
@inject
async def delete_account(
        response: Response,
        interactor: FromDishka[DeleteAccountInteractor],
        config: FromDishka[AuthConfig],
) -> None:
    """
    Delete the caller's account

    Enrollments and reviews go with it, as do courses the caller teaches.
    """
    await interactor()
    response.delete_cookie(config.cookie_name)
