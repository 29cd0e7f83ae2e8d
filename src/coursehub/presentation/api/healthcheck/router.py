from dishka import FromDishka
from dishka.integrations.fastapi import inject
from fastapi import APIRouter
from starlette import status

from coursehub.application.storage import Storage

healthcheck_router = APIRouter(tags=["healthcheck"])


@healthcheck_router.get(
    "/health",
    status_code=status.HTTP_200_OK,
)
@inject
async def healthcheck(storage: FromDishka[Storage]) -> dict[str, str]:
    return {"status": "ok", "storage": storage.name}
