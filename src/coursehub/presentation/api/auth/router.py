from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter, Response
from starlette import status

from coursehub.application.interactors.auth.get_current_user import (
    GetCurrentUserInteractor,
)
from coursehub.application.interactors.auth.login import (
    AuthResult,
    LoginInteractor,
    LoginRequest,
)
from coursehub.application.interactors.auth.register import (
    RegisterInteractor,
    RegisterRequest,
)
from coursehub.bootstrap.configs import AuthConfig
from coursehub.presentation.api.auth.schema import (
    AuthResponseSchema,
    LoginRequestSchema,
    RegisterRequestSchema,
    UserSchema,
)

auth_router = APIRouter(prefix="/auth", tags=["auth"])


def set_auth_cookie(
    response: Response,
    result: AuthResult,
    config: AuthConfig,
) -> AuthResponseSchema:
    response.set_cookie(
        key=config.cookie_name,
        value=result.token,
        max_age=config.expire_days * 24 * 60 * 60,
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
    )
    return AuthResponseSchema(
        token=result.token,
        user=UserSchema.model_validate(result.user),
    )


@auth_router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
)
@inject
async def register(
    request_data: RegisterRequestSchema,
    response: Response,
    interactor: FromDishka[RegisterInteractor],
    config: FromDishka[AuthConfig],
) -> AuthResponseSchema:
    result = await interactor(
        RegisterRequest(
            email=request_data.email,
            password=request_data.password,
            name=request_data.name,
            role=request_data.role,
        ),
    )
    return set_auth_cookie(response, result, config)


@auth_router.post(
    "/login",
    status_code=status.HTTP_200_OK,
)
@inject
async def login(
    request_data: LoginRequestSchema,
    response: Response,
    interactor: FromDishka[LoginInteractor],
    config: FromDishka[AuthConfig],
) -> AuthResponseSchema:
    result = await interactor(
        LoginRequest(
            email=request_data.email,
            password=request_data.password,
        ),
    )
    return set_auth_cookie(response, result, config)


@auth_router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
)
@inject
async def logout(
    response: Response,
    config: FromDishka[AuthConfig],
) -> dict[str, str]:
    """Tokens are stateless, logging out only drops the cookie"""
    response.delete_cookie(config.cookie_name)
    return {"message": "Logged out"}


@auth_router.get(
    "/user",
    status_code=status.HTTP_200_OK,
)
@inject
async def current_user(
    interactor: FromDishka[GetCurrentUserInteractor],
) -> UserSchema:
    return UserSchema.model_validate(await interactor())
